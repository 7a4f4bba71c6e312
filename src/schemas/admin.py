"""Team board (admin) Pydantic schemas for API request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.models.profile import UserRole
from src.schemas.launch import LaunchRequestResponse
from src.schemas.message import TeamMessageResponse
from src.schemas.progress import ProgressResponse


class AssignRequest(BaseModel):
    """Schema for PATCH /admin/requests/{id}/assign.

    `assigned_to` is required so that clearing an assignment is an
    explicit null rather than a missing field.
    """

    model_config = ConfigDict(from_attributes=True)

    assigned_to: UUID | None = Field(..., description="Team member to assign, or null to unassign")


class AdminRequestUpdate(BaseModel):
    """Schema for moving a request between kanban columns."""

    model_config = ConfigDict(extra="forbid")

    admin_status: str = Field(..., min_length=1, max_length=50, description="New kanban column")


class NoteCreate(BaseModel):
    """Schema for adding a bitácora note."""

    model_config = ConfigDict(from_attributes=True)

    note_text: str = Field(..., min_length=1, max_length=5000, description="Note text")


class AdminNoteResponse(BaseModel):
    """Schema for bitácora note API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Note unique identifier")
    launch_request_id: UUID = Field(description="Launch request the note belongs to")
    admin_user_id: UUID = Field(description="Team member who wrote the note")
    note_text: str = Field(description="Note text")
    created_at: datetime = Field(description="Creation timestamp")


class RequestDetailResponse(BaseModel):
    """Everything the team sees when opening a request."""

    model_config = ConfigDict(from_attributes=True)

    request: LaunchRequestResponse
    progress: ProgressResponse | None = None
    messages: list[TeamMessageResponse] = Field(default_factory=list)
    notes: list[AdminNoteResponse] = Field(default_factory=list)


class TeamMemberResponse(BaseModel):
    """Schema for team directory entries."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Profile unique identifier")
    user_id: UUID = Field(description="Auth user ID (used for assignment)")
    email: str | None = Field(default=None, description="Email address")
    full_name: str | None = Field(default=None, description="Display name")
    role: UserRole = Field(description="Application role")


class RoleUpdate(BaseModel):
    """Schema for PATCH /admin/team/{user_id}."""

    model_config = ConfigDict(from_attributes=True)

    role: UserRole = Field(..., description="New application role")
