"""Team message Pydantic schemas for API request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from src.models.team_message import SenderRole


class MessageCreate(BaseModel):
    """Schema for a team member posting a message to a client."""

    model_config = ConfigDict(from_attributes=True)

    message: str = Field(..., min_length=1, max_length=5000, description="Message text")


class MessageRespond(BaseModel):
    """Schema for the client's single response to a message."""

    model_config = ConfigDict(from_attributes=True)

    response: str = Field(..., min_length=1, max_length=5000, description="Client response text")


class MessageResolve(BaseModel):
    """Schema for toggling the resolved flag."""

    model_config = ConfigDict(from_attributes=True)

    is_resolved: StrictBool = Field(..., description="New resolved state")


class TeamMessageResponse(BaseModel):
    """Schema for team message API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Message unique identifier")
    launch_request_id: UUID = Field(description="Parent launch request ID")
    message: str = Field(description="Message text")
    sender_role: SenderRole = Field(description="Which side wrote the message")
    sender_name: str = Field(description="Display name of the sender")
    client_response: str | None = Field(default=None, description="Client's response, set once")
    responded_at: datetime | None = Field(default=None, description="When the client responded")
    is_resolved: bool = Field(default=False, description="Resolved flag")
    created_at: datetime = Field(description="Creation timestamp")
