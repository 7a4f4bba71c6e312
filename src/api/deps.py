"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt
from src.core.permissions import Action, require
from src.schemas.auth import Actor, UserContext
from src.services.assignment_service import AssignmentService
from src.services.launch_service import LaunchService
from src.services.message_service import MessageService
from src.services.note_service import NoteService
from src.services.payment_service import PaymentService
from src.services.profile_service import ProfileService
from src.services.progress_service import ProgressService


async def get_current_user(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> UserContext:
    """Extract and validate the current user from the Authorization header.

    Args:
        authorization: The Authorization header value (Bearer token).

    Returns:
        UserContext: The authenticated user's context.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Extract the token from "Bearer <token>" format
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_jwt(parts[1])
        return payload.to_user_context()

    except AuthError as e:
        if e.code == AuthErrorCode.TOKEN_EXPIRED:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


CurrentUser = Annotated[UserContext, Depends(get_current_user)]


def get_profile_service() -> ProfileService:
    return ProfileService()


async def get_current_actor(
    user: CurrentUser,
    profiles: Annotated[ProfileService, Depends(get_profile_service)],
) -> Actor:
    """Resolve the authenticated user's application role from their profile.

    A user without a profile gets one created with the client role.
    """
    return await profiles.get_actor(user.user_id, user.email)


CurrentActor = Annotated[Actor, Depends(get_current_actor)]


async def get_team_actor(actor: CurrentActor) -> Actor:
    """Require the acting user to be a simplificador or superadmin."""
    require(actor, Action.MANAGE_REQUEST, message="Team access required")
    return actor


TeamActor = Annotated[Actor, Depends(get_team_actor)]


# Service factories, overridable in tests through app.dependency_overrides


def get_launch_service() -> LaunchService:
    return LaunchService()


def get_progress_service() -> ProgressService:
    return ProgressService()


def get_message_service() -> MessageService:
    return MessageService()


def get_assignment_service() -> AssignmentService:
    return AssignmentService()


def get_note_service() -> NoteService:
    return NoteService()


def get_payment_service() -> PaymentService:
    return PaymentService()


LaunchServiceDep = Annotated[LaunchService, Depends(get_launch_service)]
ProgressServiceDep = Annotated[ProgressService, Depends(get_progress_service)]
MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]
AssignmentServiceDep = Annotated[AssignmentService, Depends(get_assignment_service)]
NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
PaymentServiceDep = Annotated[PaymentService, Depends(get_payment_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]