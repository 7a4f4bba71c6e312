"""Team message API routes shared by request owners and the team."""

from uuid import UUID

from fastapi import APIRouter

from src.api.deps import CurrentActor, MessageServiceDep
from src.schemas.message import MessageResolve, MessageRespond, TeamMessageResponse

router = APIRouter(prefix="/messages", tags=["messages"])


@router.patch(
    "/{message_id}/respond",
    response_model=TeamMessageResponse,
    summary="Respond to a message",
    description="Records the request owner's response. A message accepts a single response.",
    responses={
        403: {"description": "Caller does not own the request"},
        409: {"description": "Message already has a response"},
    },
)
async def respond_to_message(
    message_id: UUID,
    data: MessageRespond,
    actor: CurrentActor,
    service: MessageServiceDep,
) -> TeamMessageResponse:
    """Respond to a team message.

    Args:
        message_id: The message being answered.
        data: Response text.
        actor: The acting user.
        service: Message service.

    Returns:
        TeamMessageResponse: The message with its response.
    """
    message = await service.respond(message_id, data.response, actor)
    return TeamMessageResponse(**message)


@router.patch(
    "/{message_id}/resolve",
    response_model=TeamMessageResponse,
    summary="Set message resolved flag",
    description="Marks a message resolved or unresolved. Allowed for the request owner and the team.",
)
async def resolve_message(
    message_id: UUID,
    data: MessageResolve,
    actor: CurrentActor,
    service: MessageServiceDep,
) -> TeamMessageResponse:
    message = await service.set_resolved(message_id, data.is_resolved, actor)
    return TeamMessageResponse(**message)
