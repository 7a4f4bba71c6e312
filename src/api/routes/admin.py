"""Team board API routes (simplificadores and superadmins)."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from src.api.deps import (
    AssignmentServiceDep,
    LaunchServiceDep,
    MessageServiceDep,
    NoteServiceDep,
    ProfileServiceDep,
    ProgressServiceDep,
    TeamActor,
)
from src.schemas.admin import (
    AdminNoteResponse,
    AdminRequestUpdate,
    AssignRequest,
    NoteCreate,
    RequestDetailResponse,
    RoleUpdate,
    TeamMemberResponse,
)
from src.schemas.launch import LaunchRequestResponse
from src.schemas.message import MessageCreate, TeamMessageResponse
from src.schemas.progress import ProgressResponse, ProgressUpdate

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/requests",
    response_model=list[LaunchRequestResponse],
    summary="List launch requests",
    description=(
        "Superadmins see every request, optionally filtered by admin status. "
        "Simplificadores see the requests assigned to them."
    ),
)
async def list_requests(
    actor: TeamActor,
    service: AssignmentServiceDep,
    status_filter: str | None = Query(default=None, alias="status", description="Filter by admin status"),
) -> list[LaunchRequestResponse]:
    """List the requests on the caller's board.

    Args:
        actor: The acting team member.
        service: Assignment service.
        status_filter: Optional admin_status to filter by.

    Returns:
        list[LaunchRequestResponse]: Visible requests.
    """
    requests = await service.list_for_actor(actor, status_filter)
    return [LaunchRequestResponse(**request) for request in requests]


@router.get(
    "/requests/unassigned",
    response_model=list[LaunchRequestResponse],
    summary="List unassigned requests",
    description="Started requests without an assigned team member, oldest first.",
)
async def list_unassigned_requests(
    actor: TeamActor,
    service: AssignmentServiceDep,
) -> list[LaunchRequestResponse]:
    requests = await service.list_unassigned(actor)
    return [LaunchRequestResponse(**request) for request in requests]


@router.get(
    "/requests/{request_id}",
    response_model=RequestDetailResponse,
    summary="Get request detail",
    description="Returns the request with its progress, messages and bitácora notes.",
)
async def get_request_detail(
    request_id: UUID,
    actor: TeamActor,
    launch_service: LaunchServiceDep,
    progress_service: ProgressServiceDep,
    message_service: MessageServiceDep,
    note_service: NoteServiceDep,
) -> RequestDetailResponse:
    """Get everything the team needs to work on a request.

    Args:
        request_id: The launch request ID.
        actor: The acting team member.
        launch_service: Launch service.
        progress_service: Progress service.
        message_service: Message service.
        note_service: Note service.

    Returns:
        RequestDetailResponse: Request, progress, messages and notes.
    """
    request = await launch_service.get_request_for_actor(request_id, actor)
    progress = await progress_service.get_for_request(request_id, actor)
    messages = await message_service.list_messages(request_id, actor)
    notes = await note_service.list_notes(request_id, actor)

    return RequestDetailResponse(
        request=LaunchRequestResponse(**request),
        progress=ProgressResponse.from_row(progress) if progress else None,
        messages=[TeamMessageResponse(**message) for message in messages],
        notes=[AdminNoteResponse(**note) for note in notes],
    )


@router.patch(
    "/requests/{request_id}",
    response_model=LaunchRequestResponse,
    summary="Update admin status",
    description="Moves the request to another column of the team board.",
)
async def update_request_status(
    request_id: UUID,
    data: AdminRequestUpdate,
    actor: TeamActor,
    service: LaunchServiceDep,
) -> LaunchRequestResponse:
    request = await service.update_admin_status(request_id, data.admin_status, actor)
    return LaunchRequestResponse(**request)


@router.patch(
    "/requests/{request_id}/assign",
    response_model=LaunchRequestResponse,
    summary="Assign request",
    description=(
        "Superadmins may assign any team member or clear the assignment. "
        "Simplificadores may only claim unassigned requests for themselves."
    ),
    responses={
        403: {"description": "Assignment not allowed for this role"},
        404: {"description": "Request or assignee not found"},
        422: {"description": "Assignee is not a team member"},
    },
)
async def assign_request(
    request_id: UUID,
    data: AssignRequest,
    actor: TeamActor,
    service: AssignmentServiceDep,
) -> LaunchRequestResponse:
    request = await service.assign(request_id, data.assigned_to, actor)
    return LaunchRequestResponse(**request)


@router.get(
    "/requests/{request_id}/messages",
    response_model=list[TeamMessageResponse],
    summary="List request messages",
)
async def list_request_messages(
    request_id: UUID,
    actor: TeamActor,
    service: MessageServiceDep,
) -> list[TeamMessageResponse]:
    messages = await service.list_messages(request_id, actor)
    return [TeamMessageResponse(**message) for message in messages]


@router.post(
    "/requests/{request_id}/messages",
    response_model=TeamMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post message to client",
    description="Sends a message to the request owner, signed with the caller's name.",
)
async def post_request_message(
    request_id: UUID,
    data: MessageCreate,
    actor: TeamActor,
    service: MessageServiceDep,
) -> TeamMessageResponse:
    message = await service.post_team_message(request_id, data.message, actor)
    return TeamMessageResponse(**message)


@router.post(
    "/requests/{request_id}/notes",
    response_model=AdminNoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add bitácora note",
    description="Adds an internal note. Notes are never shown to the client.",
)
async def add_request_note(
    request_id: UUID,
    data: NoteCreate,
    actor: TeamActor,
    service: NoteServiceDep,
) -> AdminNoteResponse:
    note = await service.add_note(request_id, data.note_text, actor)
    return AdminNoteResponse(**note)


@router.get(
    "/requests/{request_id}/progress",
    response_model=ProgressResponse | None,
    summary="Get request progress",
    description="Returns the progress tracker, or null while the launch is not started.",
)
async def get_request_progress(
    request_id: UUID,
    actor: TeamActor,
    service: ProgressServiceDep,
) -> ProgressResponse | None:
    progress = await service.get_for_request(request_id, actor)
    return ProgressResponse.from_row(progress) if progress else None


@router.patch(
    "/progress/{progress_id}",
    response_model=ProgressResponse,
    summary="Update progress",
    description="Partially updates one or more pipelines. Omitted fields are unchanged.",
    responses={409: {"description": "Progress changed since it was read"}},
)
async def update_progress(
    progress_id: UUID,
    data: ProgressUpdate,
    actor: TeamActor,
    service: ProgressServiceDep,
) -> ProgressResponse:
    progress = await service.update_progress(progress_id, data, actor)
    return ProgressResponse.from_row(progress)


@router.get(
    "/team",
    response_model=list[TeamMemberResponse],
    summary="List team members",
    description="Superadmin only. Lists profiles with the simplificador or superadmin role.",
)
async def list_team(
    actor: TeamActor,
    service: ProfileServiceDep,
) -> list[TeamMemberResponse]:
    members = await service.list_team(actor)
    return [TeamMemberResponse(**member) for member in members]


@router.patch(
    "/team/{user_id}",
    response_model=TeamMemberResponse,
    summary="Set user role",
    description=(
        "Superadmin only. Changes a user's application role. "
        "A member with assigned launch requests cannot be moved out of the team."
    ),
)
async def set_user_role(
    user_id: UUID,
    data: RoleUpdate,
    actor: TeamActor,
    service: ProfileServiceDep,
) -> TeamMemberResponse:
    profile = await service.set_role(user_id, data.role, actor)
    return TeamMemberResponse(**profile)
