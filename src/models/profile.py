"""Profile model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict
from uuid import UUID


class UserRole(str, Enum):
    """Application role values stored on the profiles table."""

    CLIENT = "client"
    SIMPLIFICADOR = "simplificador"
    SUPERADMIN = "superadmin"


TEAM_ROLES = frozenset({UserRole.SIMPLIFICADOR, UserRole.SUPERADMIN})


class Profile(TypedDict):
    """Profile table row representation.

    Represents a user profile stored in the profiles table.
    Linked to Supabase auth.users via user_id.
    """

    id: UUID
    user_id: UUID
    email: str | None
    full_name: str | None
    role: UserRole
    created_at: datetime
    updated_at: datetime


class ProfileCreate(TypedDict, total=False):
    """Data required to create a new profile."""

    user_id: UUID
    email: str | None
    full_name: str | None
    role: UserRole
