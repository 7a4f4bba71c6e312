"""Profile business logic service."""

import logging
from typing import Any
from uuid import UUID

from postgrest.exceptions import APIError as PostgrestAPIError

from src.api.middleware.error_handler import NotFoundError, PreconditionFailedError
from src.core.permissions import Action, require
from src.core.supabase import get_supabase_client
from src.models.profile import TEAM_ROLES, UserRole
from src.repositories.base import LaunchRequestStore
from src.repositories.supabase_stores import UNIQUE_VIOLATION, SupabaseLaunchRequestStore
from src.schemas.auth import Actor

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for user profiles and the team directory."""

    def __init__(self, requests: LaunchRequestStore | None = None) -> None:
        """Initialize profile service with Supabase client.

        Args:
            requests: Launch request store, consulted before a team member
                loses their role (Supabase-backed by default).
        """
        self.client = get_supabase_client()
        self.requests = requests or SupabaseLaunchRequestStore()

    async def get_or_create_profile(
        self,
        user_id: UUID,
        email: str | None = None,
        full_name: str | None = None,
    ) -> dict[str, Any]:
        """Get existing profile or create a new client profile.

        Args:
            user_id: The auth user ID.
            email: User's email address.
            full_name: User's display name.

        Returns:
            dict: The profile data.
        """
        existing = await self.get_profile(user_id)
        if existing:
            return existing

        profile_data = {
            "user_id": str(user_id),
            "email": email,
            "full_name": full_name,
            "role": UserRole.CLIENT.value,
        }

        try:
            response = (
                self.client.table("profiles")
                .insert(profile_data)
                .execute()
            )
        except PostgrestAPIError as e:
            if e.code != UNIQUE_VIOLATION:
                raise
            # A concurrent request created the profile first.
            logger.info("Profile for user %s already created, re-reading", user_id)
            existing = await self.get_profile(user_id)
            if existing is None:
                raise
            return existing

        logger.info("Created client profile for user %s", user_id)
        return response.data[0]

    async def get_profile(self, user_id: UUID) -> dict[str, Any] | None:
        """Get a profile by auth user ID.

        Args:
            user_id: The auth user ID.

        Returns:
            dict | None: The profile data or None if not found.
        """
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .execute()
        )

        return response.data[0] if response.data else None

    async def get_actor(self, user_id: UUID, email: str | None = None) -> Actor:
        """Resolve the acting user and their application role."""
        profile = await self.get_or_create_profile(user_id, email)
        return Actor(
            user_id=user_id,
            role=profile.get("role") or UserRole.CLIENT,
            full_name=profile.get("full_name"),
            email=profile.get("email") or email,
        )

    async def list_team(self, actor: Actor) -> list[dict[str, Any]]:
        """List team profiles (superadmin only).

        Args:
            actor: The acting user.

        Returns:
            list[dict]: Profiles with a team role, ordered by name.
        """
        require(actor, Action.MANAGE_TEAM)

        response = (
            self.client.table("profiles")
            .select("*")
            .in_("role", [role.value for role in TEAM_ROLES])
            .order("full_name")
            .execute()
        )

        return response.data or []

    async def set_role(self, user_id: UUID, role: UserRole, actor: Actor) -> dict[str, Any]:
        """Change a user's application role (superadmin only).

        Raises:
            AuthorizationError: If the actor is not a superadmin.
            PreconditionFailedError: If the user would leave the team while
                launch requests are still assigned to them.
            NotFoundError: If the user has no profile.
        """
        require(actor, Action.MANAGE_TEAM)

        if role not in TEAM_ROLES:
            assigned = await self.requests.list_by_assignee(user_id)
            if assigned:
                logger.warning(
                    "Refusing to set role of %s to %s: %d requests still assigned",
                    user_id,
                    role.value,
                    len(assigned),
                )
                raise PreconditionFailedError("Reassign this member's launch requests before removing their team role")

        response = (
            self.client.table("profiles")
            .update({"role": role.value})
            .eq("user_id", str(user_id))
            .execute()
        )

        if not response.data:
            raise NotFoundError("Profile not found")

        logger.info("User %s set role of %s to %s", actor.user_id, user_id, role.value)
        return response.data[0]
