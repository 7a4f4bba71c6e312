"""Store interfaces injected into the launch services.

Each store reads and writes one table. Writes that can race are
conditional: `update()` only applies when the stored `version` still
equals `expected_version` and returns None otherwise, so callers can
tell a lost race from a successful write.
"""

from enum import Enum
from typing import Any, Protocol
from uuid import UUID

Row = dict[str, Any]


def to_db(values: dict[str, Any]) -> dict[str, Any]:
    """Convert UUIDs and enums to the plain values PostgREST expects."""
    converted: dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, UUID):
            converted[key] = str(value)
        elif isinstance(value, Enum):
            converted[key] = value.value
        else:
            converted[key] = value
    return converted


class LaunchRequestStore(Protocol):
    """Persistence for launch_requests."""

    async def get(self, request_id: UUID) -> Row | None: ...

    async def get_by_user(self, user_id: UUID) -> Row | None: ...

    async def create(self, values: dict[str, Any]) -> Row | None:
        """Insert a request; None if the owner already has one."""
        ...

    async def update(
        self, request_id: UUID, changes: dict[str, Any], expected_version: int
    ) -> Row | None: ...

    async def list_all(self, admin_status: str | None = None) -> list[Row]: ...

    async def list_by_assignee(self, user_id: UUID) -> list[Row]: ...

    async def list_unassigned(self) -> list[Row]: ...


class ProgressStore(Protocol):
    """Persistence for launch_progress."""

    async def get(self, progress_id: UUID) -> Row | None: ...

    async def get_by_request(self, request_id: UUID) -> Row | None: ...

    async def create(self, values: dict[str, Any]) -> Row | None:
        """Insert a tracker; None if the request already has one."""
        ...

    async def update(
        self, progress_id: UUID, changes: dict[str, Any], expected_version: int
    ) -> Row | None: ...


class MessageStore(Protocol):
    """Persistence for team_messages."""

    async def get(self, message_id: UUID) -> Row | None: ...

    async def list_by_request(self, request_id: UUID) -> list[Row]: ...

    async def create(self, values: dict[str, Any]) -> Row: ...

    async def set_response_once(self, message_id: UUID, response: str, responded_at: str) -> Row | None:
        """Store a client response only if none is stored yet."""
        ...

    async def set_resolved(self, message_id: UUID, is_resolved: bool) -> Row | None: ...


class NoteStore(Protocol):
    """Persistence for admin_notes."""

    async def create(self, values: dict[str, Any]) -> Row: ...

    async def list_by_request(self, request_id: UUID) -> list[Row]: ...
