"""Role and ownership checks for launch requests, messages and assignments.

All role comparisons live here. Services call `require()` (or
`authorize()` when they only need a yes/no) instead of comparing role
strings themselves.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping
from uuid import UUID

from src.api.middleware.error_handler import AuthorizationError
from src.models.profile import UserRole
from src.schemas.auth import Actor


class Action(str, Enum):
    """Operations that are gated by role or ownership."""

    # Client side, resource is the launch request
    EDIT_OWN_REQUEST = "edit_own_request"
    RESPOND_MESSAGE = "respond_message"

    # Either side, resource is the launch request
    VIEW_REQUEST = "view_request"
    RESOLVE_MESSAGE = "resolve_message"

    # Team side
    MANAGE_REQUEST = "manage_request"
    POST_MESSAGE = "post_message"
    UPDATE_PROGRESS = "update_progress"
    ADD_NOTE = "add_note"
    VIEW_NOTES = "view_notes"
    ASSIGN = "assign"
    LIST_ALL_REQUESTS = "list_all_requests"
    MANAGE_TEAM = "manage_team"


@dataclass(frozen=True)
class AssignmentChange:
    """Resource passed with Action.ASSIGN."""

    request: Mapping[str, Any]
    assignee_id: UUID | None


def _same_user(value: Any, user_id: UUID) -> bool:
    return value is not None and str(value) == str(user_id)


def _owns(actor: Actor, request: Mapping[str, Any] | None) -> bool:
    return request is not None and _same_user(request.get("user_id"), actor.user_id)


def _can_assign(actor: Actor, change: AssignmentChange) -> bool:
    if actor.role == UserRole.SUPERADMIN:
        return True
    if actor.role == UserRole.SIMPLIFICADOR:
        # Claim only: self as assignee, and never over someone else's assignment.
        if not _same_user(change.assignee_id, actor.user_id):
            return False
        current = change.request.get("assigned_to")
        return current is None or _same_user(current, actor.user_id)
    return False


def authorize(actor: Actor, action: Action, resource: Any = None) -> bool:
    """Decide whether an actor may perform an action on a resource.

    Args:
        actor: The acting user.
        action: The gated operation.
        resource: Launch request row for request scoped actions,
            AssignmentChange for Action.ASSIGN, None otherwise.

    Returns:
        bool: True if allowed.
    """
    if action in (Action.EDIT_OWN_REQUEST, Action.RESPOND_MESSAGE):
        return _owns(actor, resource)

    if action in (Action.VIEW_REQUEST, Action.RESOLVE_MESSAGE):
        return actor.is_team or _owns(actor, resource)

    if action in (
        Action.MANAGE_REQUEST,
        Action.POST_MESSAGE,
        Action.UPDATE_PROGRESS,
        Action.ADD_NOTE,
        Action.VIEW_NOTES,
    ):
        return actor.is_team

    if action == Action.ASSIGN:
        return isinstance(resource, AssignmentChange) and _can_assign(actor, resource)

    if action in (Action.LIST_ALL_REQUESTS, Action.MANAGE_TEAM):
        return actor.is_superadmin

    return False


def require(actor: Actor, action: Action, resource: Any = None, message: str | None = None) -> None:
    """Raise AuthorizationError unless `authorize()` allows the action."""
    if not authorize(actor, action, resource):
        raise AuthorizationError(message or f"Not allowed to {action.value.replace('_', ' ')}")
