"""Launch request model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import Any, TypedDict
from uuid import UUID

# The wizard runs from the welcome step (1) to the confirmation step (8).
FIRST_STEP = 1
FINAL_STEP = 8

INITIAL_ADMIN_STATUS = "new"


class PaymentStatus(str, Enum):
    """Payment status values matching database enum."""

    PENDING = "pending"
    COMPLETED = "completed"


class AdminStatus(str, Enum):
    """Kanban columns used by the team.

    The admin_status column is free text; these are the values the
    team board groups by.
    """

    NEW = "new"
    REVIEWING = "reviewing"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class LaunchRequest(TypedDict):
    """Launch request table row representation.

    One row per client. Wizard answers are stored as flat nullable
    columns next to the lifecycle flags.
    """

    id: UUID
    user_id: UUID
    current_step: int
    is_form_complete: bool
    payment_status: PaymentStatus
    paid_amount: str | None
    stripe_payment_intent_id: str | None
    is_started: bool
    admin_status: str | None
    assigned_to: UUID | None
    version: int

    # Personal data
    full_name: str | None
    personal_email: str | None
    phone: str | None
    id_number: str | None
    partners: list[dict[str, Any]] | None

    # Company data
    company_name_1: str | None
    company_name_2: str | None
    company_name_3: str | None
    main_activity: str | None
    city: str | None
    capital: str | None

    # Brand data
    brand_name: str | None
    brand_colors: list[str] | None
    logo_style: str | None
    desired_domain: str | None
    website_pages: list[str] | None
    social_networks: list[str] | None

    # Billing data
    billing_name: str | None
    billing_tax_id: str | None
    billing_address: str | None
    billing_email: str | None
    accepted_terms: bool | None

    created_at: datetime
    updated_at: datetime


class LaunchRequestUpdate(TypedDict, total=False):
    """Lifecycle fields that can be written on a launch request.

    Answer fields are merged separately from the wizard payload.
    """

    current_step: int
    is_form_complete: bool
    payment_status: PaymentStatus
    paid_amount: str | None
    stripe_payment_intent_id: str | None
    is_started: bool
    admin_status: str | None
    assigned_to: UUID | None
