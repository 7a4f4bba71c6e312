"""Admin note (bitácora) model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict
from uuid import UUID


class AdminNote(TypedDict):
    """Admin note table row representation.

    Internal logbook entry written by a team member against a launch
    request. Never exposed to the client.
    """

    id: UUID
    launch_request_id: UUID
    admin_user_id: UUID
    note_text: str
    created_at: datetime
