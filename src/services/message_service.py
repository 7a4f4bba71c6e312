"""Team message business logic service."""

import logging
from uuid import UUID

from src.api.middleware.error_handler import ConflictError, NotFoundError
from src.core.config import get_settings
from src.core.permissions import Action, require
from src.models.team_message import SenderRole
from src.repositories.base import LaunchRequestStore, MessageStore, Row
from src.repositories.supabase_stores import SupabaseLaunchRequestStore, SupabaseMessageStore
from src.schemas.auth import Actor
from src.schemas.common import utc_now

logger = logging.getLogger(__name__)


class MessageService:
    """Service for messages between the team and a request owner."""

    def __init__(
        self,
        messages: MessageStore | None = None,
        requests: LaunchRequestStore | None = None,
    ) -> None:
        """Initialize message service with its stores.

        Args:
            messages: Team message store (Supabase-backed by default).
            requests: Launch request store used for ownership checks.
        """
        self.messages = messages or SupabaseMessageStore()
        self.requests = requests or SupabaseLaunchRequestStore()

    async def _get_request(self, request_id: UUID) -> Row:
        request = await self.requests.get(request_id)
        if not request:
            raise NotFoundError("Launch request not found")
        return request

    async def _get_message(self, message_id: UUID) -> tuple[Row, Row]:
        message = await self.messages.get(message_id)
        if not message:
            raise NotFoundError("Message not found")
        request = await self._get_request(message["launch_request_id"])
        return message, request

    async def list_messages(self, request_id: UUID, actor: Actor) -> list[Row]:
        """List a request's messages in creation order."""
        request = await self._get_request(request_id)
        require(actor, Action.VIEW_REQUEST, request, "Not allowed to view this launch request")
        return await self.messages.list_by_request(request_id)

    async def list_for_owner(self, user_id: UUID) -> list[Row]:
        """List the messages of the user's own request (empty without one)."""
        request = await self.requests.get_by_user(user_id)
        if not request:
            return []
        return await self.messages.list_by_request(request["id"])

    async def post_message(
        self,
        request_id: UUID,
        text: str,
        sender_role: SenderRole = SenderRole.ADMIN,
        sender_name: str | None = None,
    ) -> Row:
        """Append a message to a request's thread.

        Args:
            request_id: Launch request the message belongs to.
            text: Message text.
            sender_role: Which side is writing.
            sender_name: Display name; defaults to the team name.

        Returns:
            dict: The created message, unresolved and without response.
        """
        await self._get_request(request_id)

        message = await self.messages.create(
            {
                "launch_request_id": request_id,
                "message": text,
                "sender_role": sender_role,
                "sender_name": sender_name or get_settings().default_team_sender_name,
                "is_resolved": False,
                "client_response": None,
            }
        )
        logger.info("Posted %s message %s on launch request %s", sender_role.value, message["id"], request_id)
        return message

    async def post_team_message(self, request_id: UUID, text: str, actor: Actor) -> Row:
        """Post a message as the acting team member."""
        require(actor, Action.POST_MESSAGE, message="Only the team can post messages")
        return await self.post_message(request_id, text, SenderRole.ADMIN, actor.full_name)

    async def respond(self, message_id: UUID, text: str, actor: Actor) -> Row:
        """Record the request owner's single response to a message.

        Raises:
            NotFoundError: If the message does not exist.
            AuthorizationError: If the actor does not own the request.
            ConflictError: If the message already has a response.
        """
        _, request = await self._get_message(message_id)
        require(actor, Action.RESPOND_MESSAGE, request, "Only the request owner can respond")

        updated = await self.messages.set_response_once(message_id, text, utc_now().isoformat())
        if updated is None:
            logger.warning("Rejected second response to message %s", message_id)
            raise ConflictError("Message already has a response")

        logger.info("Recorded response to message %s", message_id)
        return updated

    async def set_resolved(self, message_id: UUID, is_resolved: bool, actor: Actor) -> Row:
        """Set the resolved flag (request owner or team)."""
        _, request = await self._get_message(message_id)
        require(actor, Action.RESOLVE_MESSAGE, request, "Not allowed to resolve this message")

        updated = await self.messages.set_resolved(message_id, is_resolved)
        if updated is None:
            raise NotFoundError("Message not found")
        return updated
