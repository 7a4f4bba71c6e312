"""Database model type definitions."""

from src.models.admin_note import AdminNote
from src.models.launch_request import (
    FINAL_STEP,
    FIRST_STEP,
    AdminStatus,
    LaunchRequest,
    LaunchRequestUpdate,
    PaymentStatus,
)
from src.models.profile import TEAM_ROLES, Profile, UserRole
from src.models.progress import PIPELINES, LaunchProgress, PipelineStatus
from src.models.team_message import SenderRole, TeamMessage

__all__ = [
    "AdminNote",
    "AdminStatus",
    "FINAL_STEP",
    "FIRST_STEP",
    "LaunchProgress",
    "LaunchRequest",
    "LaunchRequestUpdate",
    "PIPELINES",
    "PaymentStatus",
    "PipelineStatus",
    "Profile",
    "SenderRole",
    "TEAM_ROLES",
    "TeamMessage",
    "UserRole",
]
