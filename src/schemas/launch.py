"""Launch request Pydantic schemas for API request/response models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.launch_request import PaymentStatus


class PartnerSchema(BaseModel):
    """A partner (socio) of the company being formed."""

    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(default=None, max_length=255)
    id_number: str | None = Field(default=None, max_length=32, description="Cédula or passport number")
    share_percentage: float | None = Field(default=None, ge=0, le=100)


class LaunchAnswers(BaseModel):
    """Answers collected by the Launch wizard.

    Every field is optional and only checked for type. Completeness of
    a step is a presentation concern; unknown keys are rejected so typos
    surface as validation errors instead of being silently dropped.
    """

    model_config = ConfigDict(extra="forbid")

    # Personal data
    full_name: str | None = Field(default=None, max_length=255)
    personal_email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    id_number: str | None = Field(default=None, max_length=32)
    partners: list[PartnerSchema] | None = None

    # Company data
    company_name_1: str | None = Field(default=None, max_length=255)
    company_name_2: str | None = Field(default=None, max_length=255)
    company_name_3: str | None = Field(default=None, max_length=255)
    main_activity: str | None = Field(default=None, max_length=1000)
    city: str | None = Field(default=None, max_length=120)
    capital: str | None = Field(default=None, max_length=32)

    # Brand data
    brand_name: str | None = Field(default=None, max_length=255)
    brand_colors: list[str] | None = None
    logo_style: str | None = Field(default=None, max_length=255)
    desired_domain: str | None = Field(default=None, max_length=255)
    website_pages: list[str] | None = None
    social_networks: list[str] | None = None

    # Billing data
    billing_name: str | None = Field(default=None, max_length=255)
    billing_tax_id: str | None = Field(default=None, max_length=32, description="RUC or cédula")
    billing_address: str | None = Field(default=None, max_length=500)
    billing_email: str | None = Field(default=None, max_length=255)

    accepted_terms: bool | None = None

    def to_changes(self) -> dict:
        """Return only the fields the client actually sent."""
        return self.model_dump(mode="json", exclude_unset=True)


class LaunchRequestResponse(BaseModel):
    """Schema for launch request API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = Field(default=None, description="Request ID (None for an unsaved draft)")
    user_id: UUID = Field(description="Owner's auth user ID")
    current_step: int = Field(description="Last saved wizard step (1-8)")
    is_form_complete: bool = Field(description="Whether the final step was saved")
    payment_status: PaymentStatus = Field(description="Payment state")
    paid_amount: str | None = Field(default=None, description="Amount charged, as a decimal string")
    is_started: bool = Field(description="Whether the launch was started")
    admin_status: str | None = Field(default=None, description="Kanban column on the team board")
    assigned_to: UUID | None = Field(default=None, description="Assigned team member")

    full_name: str | None = None
    personal_email: str | None = None
    phone: str | None = None
    id_number: str | None = None
    partners: list[PartnerSchema] | None = None

    company_name_1: str | None = None
    company_name_2: str | None = None
    company_name_3: str | None = None
    main_activity: str | None = None
    city: str | None = None
    capital: str | None = None

    brand_name: str | None = None
    brand_colors: list[str] | None = None
    logo_style: str | None = None
    desired_domain: str | None = None
    website_pages: list[str] | None = None
    social_networks: list[str] | None = None

    billing_name: str | None = None
    billing_tax_id: str | None = None
    billing_address: str | None = None
    billing_email: str | None = None
    accepted_terms: bool | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("paid_amount", mode="before")
    @classmethod
    def stringify_amount(cls, value: Any) -> Any:
        """Numeric columns come back from PostgREST as numbers."""
        if value is None or isinstance(value, str):
            return value
        return str(value)
