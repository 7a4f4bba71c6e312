"""Bitácora (internal admin notes) service."""

import logging
from uuid import UUID

from src.api.middleware.error_handler import NotFoundError
from src.core.permissions import Action, require
from src.repositories.base import LaunchRequestStore, NoteStore, Row
from src.repositories.supabase_stores import SupabaseLaunchRequestStore, SupabaseNoteStore
from src.schemas.auth import Actor

logger = logging.getLogger(__name__)


class NoteService:
    """Team-only notes attached to a launch request."""

    def __init__(
        self,
        notes: NoteStore | None = None,
        requests: LaunchRequestStore | None = None,
    ) -> None:
        """Initialize note service.

        Args:
            notes: Admin note store (Supabase-backed by default).
            requests: Launch request store (Supabase-backed by default).
        """
        self.notes = notes or SupabaseNoteStore()
        self.requests = requests or SupabaseLaunchRequestStore()

    async def add_note(self, request_id: UUID, text: str, actor: Actor) -> Row:
        """Add a bitácora note to a launch request.

        Args:
            request_id: Launch request the note belongs to.
            text: Note body.
            actor: The acting team member, recorded as the author.

        Returns:
            dict: The created note.

        Raises:
            AuthorizationError: If the actor is not on the team.
            NotFoundError: If the request does not exist.
        """
        require(actor, Action.ADD_NOTE, message="Only the team can add notes")
        if not await self.requests.get(request_id):
            raise NotFoundError("Launch request not found")

        note = await self.notes.create(
            {
                "launch_request_id": request_id,
                "admin_user_id": actor.user_id,
                "note_text": text,
            }
        )
        logger.info("User %s added note to launch request %s", actor.user_id, request_id)
        return note

    async def list_notes(self, request_id: UUID, actor: Actor) -> list[Row]:
        """List the notes of a launch request, newest first.

        Args:
            request_id: Launch request ID.
            actor: The acting user.

        Returns:
            list[dict]: The request's notes.

        Raises:
            AuthorizationError: If the actor is not on the team.
        """
        require(actor, Action.VIEW_NOTES, message="Only the team can read notes")
        return await self.notes.list_by_request(request_id)
