"""Assignment of launch requests to team members, and role-scoped listings."""

import logging
from typing import Any
from uuid import UUID

from src.api.middleware.error_handler import ConflictError, NotFoundError, ValidationError
from src.core.permissions import Action, AssignmentChange, authorize, require
from src.models.profile import TEAM_ROLES, UserRole
from src.repositories.base import LaunchRequestStore, Row
from src.repositories.supabase_stores import SupabaseLaunchRequestStore
from src.schemas.auth import Actor
from src.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


class AssignmentService:
    """Service for the team board: who works on which request."""

    def __init__(
        self,
        requests: LaunchRequestStore | None = None,
        profiles: Any = None,
    ) -> None:
        """Initialize assignment service.

        Args:
            requests: Launch request store (Supabase-backed by default).
            profiles: Anything with an async get_profile(user_id), used to
                check the assignee (ProfileService by default).
        """
        self.requests = requests or SupabaseLaunchRequestStore()
        self.profiles = profiles or ProfileService(requests=self.requests)

    async def assign(self, request_id: UUID, assignee_id: UUID | None, actor: Actor) -> Row:
        """Assign a request to a team member, or clear the assignment.

        Args:
            request_id: Launch request to assign.
            assignee_id: Team member's user ID, or None to unassign.
            actor: The acting user.

        Returns:
            dict: The updated request.

        Raises:
            NotFoundError: If the request or the assignee does not exist.
            AuthorizationError: If the actor may not make this assignment.
            ValidationError: If the assignee is not on the team.
            ConflictError: If the request changed since it was read.
        """
        request = await self.requests.get(request_id)
        if not request:
            raise NotFoundError("Launch request not found")

        require(
            actor,
            Action.ASSIGN,
            AssignmentChange(request=request, assignee_id=assignee_id),
            "Not allowed to make this assignment",
        )

        if assignee_id is not None:
            profile = await self.profiles.get_profile(assignee_id)
            if not profile:
                raise NotFoundError("Assignee not found")
            if UserRole(profile["role"]) not in TEAM_ROLES:
                raise ValidationError(
                    "Assignee must be a team member",
                    details=[{"loc": ["body", "assigned_to"], "msg": "not a team member", "type": "value_error"}],
                )

        updated = await self.requests.update(
            request["id"],
            {"assigned_to": assignee_id},
            request["version"],
        )
        if updated is None:
            logger.warning("Assignment of launch request %s lost a concurrent update", request_id)
            raise ConflictError("Launch request was modified concurrently; reload and try again")

        logger.info("User %s assigned launch request %s to %s", actor.user_id, request_id, assignee_id)
        return updated

    async def list_for_actor(self, actor: Actor, status_filter: str | None = None) -> list[Row]:
        """List the requests visible on the actor's board.

        Superadmins see every request, optionally filtered by
        admin_status. Simplificadores see only their own assignments.
        """
        if authorize(actor, Action.LIST_ALL_REQUESTS):
            return await self.requests.list_all(status_filter)

        require(actor, Action.MANAGE_REQUEST, message="Only the team can list launch requests")
        rows = await self.requests.list_by_assignee(actor.user_id)
        if status_filter:
            rows = [row for row in rows if row.get("admin_status") == status_filter]
        return rows

    async def list_unassigned(self, actor: Actor) -> list[Row]:
        """Started requests nobody has claimed yet."""
        require(actor, Action.MANAGE_REQUEST, message="Only the team can list launch requests")
        return await self.requests.list_unassigned()
