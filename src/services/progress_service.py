"""Progress tracker business logic service."""

import logging
from uuid import UUID

from src.api.middleware.error_handler import ConflictError, NotFoundError
from src.core.permissions import Action, require
from src.repositories.base import LaunchRequestStore, ProgressStore, Row
from src.repositories.supabase_stores import SupabaseLaunchRequestStore, SupabaseProgressStore
from src.schemas.auth import Actor
from src.schemas.progress import ProgressUpdate

logger = logging.getLogger(__name__)


class ProgressService:
    """Service for reading and updating the six delivery pipelines."""

    def __init__(
        self,
        progress: ProgressStore | None = None,
        requests: LaunchRequestStore | None = None,
    ) -> None:
        """Initialize progress service.

        Args:
            progress: Progress tracker store (Supabase-backed by default).
            requests: Launch request store (Supabase-backed by default).
        """
        self.progress = progress or SupabaseProgressStore()
        self.requests = requests or SupabaseLaunchRequestStore()

    async def get_for_request(self, request_id: UUID, actor: Actor) -> Row | None:
        """Get the tracker for a launch request.

        Returns None while the launch has not been started.

        Raises:
            NotFoundError: If the request does not exist.
            AuthorizationError: If the actor may not view the request.
        """
        request = await self.requests.get(request_id)
        if not request:
            raise NotFoundError("Launch request not found")
        require(actor, Action.VIEW_REQUEST, request, "Not allowed to view this launch request")
        return await self.progress.get_by_request(request_id)

    async def get_for_owner(self, user_id: UUID) -> Row | None:
        """Get the tracker for the user's own launch, if started."""
        request = await self.requests.get_by_user(user_id)
        if not request:
            return None
        return await self.progress.get_by_request(request["id"])

    async def update_progress(self, progress_id: UUID, update: ProgressUpdate, actor: Actor) -> Row:
        """Apply a partial update to one or more pipelines.

        Args:
            progress_id: Tracker to update.
            update: Per-pipeline patches; omitted pipelines are unchanged.
            actor: The acting team member.

        Returns:
            dict: The updated tracker.

        Raises:
            AuthorizationError: If the actor is not on the team.
            NotFoundError: If the tracker does not exist.
            ConflictError: If the tracker changed since it was read.
        """
        require(actor, Action.UPDATE_PROGRESS, message="Only the team can update progress")

        current = await self.progress.get(progress_id)
        if not current:
            raise NotFoundError("Progress not found")

        columns = update.to_columns()
        if not columns:
            return current

        updated = await self.progress.update(progress_id, columns, current["version"])
        if updated is None:
            raise ConflictError("Progress was modified concurrently; reload and try again")

        logger.info(
            "User %s updated progress %s (%s)",
            actor.user_id,
            progress_id,
            ", ".join(sorted(columns)),
        )
        return updated
