"""Supabase-backed implementations of the launch stores."""

import logging
from typing import Any
from uuid import UUID

from postgrest.exceptions import APIError as PostgrestAPIError

from src.core.supabase import get_supabase_client
from src.repositories.base import Row, to_db

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


def _first(response: Any) -> Row | None:
    return response.data[0] if response and response.data else None


class SupabaseLaunchRequestStore:
    """launch_requests table access."""

    table = "launch_requests"

    def __init__(self) -> None:
        """Initialize store with Supabase client."""
        self.client = get_supabase_client()

    async def get(self, request_id: UUID) -> Row | None:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("id", str(request_id))
            .maybe_single()
            .execute()
        )
        return response.data if response and response.data else None

    async def get_by_user(self, user_id: UUID) -> Row | None:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        return _first(response)

    async def create(self, values: dict[str, Any]) -> Row | None:
        try:
            response = self.client.table(self.table).insert(to_db(values)).execute()
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.info("Launch request already exists for user %s", values.get("user_id"))
                return None
            raise
        return _first(response)

    async def update(
        self, request_id: UUID, changes: dict[str, Any], expected_version: int
    ) -> Row | None:
        payload = to_db(changes)
        payload["version"] = expected_version + 1
        response = (
            self.client.table(self.table)
            .update(payload)
            .eq("id", str(request_id))
            .eq("version", expected_version)
            .execute()
        )
        return _first(response)

    async def list_all(self, admin_status: str | None = None) -> list[Row]:
        query = self.client.table(self.table).select("*")
        if admin_status:
            query = query.eq("admin_status", admin_status)
        response = query.order("created_at", desc=True).execute()
        return response.data or []

    async def list_by_assignee(self, user_id: UUID) -> list[Row]:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("assigned_to", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    async def list_unassigned(self) -> list[Row]:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("is_started", True)
            .is_("assigned_to", "null")
            .order("created_at")
            .execute()
        )
        return response.data or []


class SupabaseProgressStore:
    """launch_progress table access."""

    table = "launch_progress"

    def __init__(self) -> None:
        """Initialize store with Supabase client."""
        self.client = get_supabase_client()

    async def get(self, progress_id: UUID) -> Row | None:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("id", str(progress_id))
            .maybe_single()
            .execute()
        )
        return response.data if response and response.data else None

    async def get_by_request(self, request_id: UUID) -> Row | None:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("launch_request_id", str(request_id))
            .limit(1)
            .execute()
        )
        return _first(response)

    async def create(self, values: dict[str, Any]) -> Row | None:
        try:
            response = self.client.table(self.table).insert(to_db(values)).execute()
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.warning("Progress already exists for request %s", values.get("launch_request_id"))
                return None
            raise
        return _first(response)

    async def update(
        self, progress_id: UUID, changes: dict[str, Any], expected_version: int
    ) -> Row | None:
        payload = to_db(changes)
        payload["version"] = expected_version + 1
        response = (
            self.client.table(self.table)
            .update(payload)
            .eq("id", str(progress_id))
            .eq("version", expected_version)
            .execute()
        )
        return _first(response)


class SupabaseMessageStore:
    """team_messages table access."""

    table = "team_messages"

    def __init__(self) -> None:
        """Initialize store with Supabase client."""
        self.client = get_supabase_client()

    async def get(self, message_id: UUID) -> Row | None:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("id", str(message_id))
            .maybe_single()
            .execute()
        )
        return response.data if response and response.data else None

    async def list_by_request(self, request_id: UUID) -> list[Row]:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("launch_request_id", str(request_id))
            .order("created_at")
            .execute()
        )
        return response.data or []

    async def create(self, values: dict[str, Any]) -> Row:
        response = self.client.table(self.table).insert(to_db(values)).execute()
        return response.data[0]

    async def set_response_once(self, message_id: UUID, response: str, responded_at: str) -> Row | None:
        result = (
            self.client.table(self.table)
            .update({"client_response": response, "responded_at": responded_at})
            .eq("id", str(message_id))
            .is_("client_response", "null")
            .execute()
        )
        return _first(result)

    async def set_resolved(self, message_id: UUID, is_resolved: bool) -> Row | None:
        response = (
            self.client.table(self.table)
            .update({"is_resolved": is_resolved})
            .eq("id", str(message_id))
            .execute()
        )
        return _first(response)


class SupabaseNoteStore:
    """admin_notes table access."""

    table = "admin_notes"

    def __init__(self) -> None:
        """Initialize store with Supabase client."""
        self.client = get_supabase_client()

    async def create(self, values: dict[str, Any]) -> Row:
        response = self.client.table(self.table).insert(to_db(values)).execute()
        return response.data[0]

    async def list_by_request(self, request_id: UUID) -> list[Row]:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("launch_request_id", str(request_id))
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []
