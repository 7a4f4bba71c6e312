"""Team message model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict
from uuid import UUID


class SenderRole(str, Enum):
    """Author side of a team message."""

    ADMIN = "admin"
    CLIENT = "client"


class TeamMessage(TypedDict):
    """Team message table row representation.

    A message from the team to the owner of a launch request. The client
    may answer once (client_response) and either side may toggle
    is_resolved.
    """

    id: UUID
    launch_request_id: UUID
    message: str
    sender_role: SenderRole
    sender_name: str
    client_response: str | None
    responded_at: datetime | None
    is_resolved: bool
    created_at: datetime


class TeamMessageCreate(TypedDict):
    """Data required to create a team message."""

    launch_request_id: str
    message: str
    sender_role: str
    sender_name: str
    is_resolved: bool
    client_response: str | None
