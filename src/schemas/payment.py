"""Launch payment Pydantic schemas for API request/response models."""

from pydantic import BaseModel, ConfigDict, Field


class PaymentIntentResponse(BaseModel):
    """Schema for POST /launch/payment-intent responses."""

    model_config = ConfigDict(from_attributes=True)

    client_secret: str = Field(description="Stripe PaymentIntent client secret for the frontend")
    payment_intent_id: str = Field(description="Stripe PaymentIntent ID")
    base_amount: str = Field(description="Plan price before IVA")
    tax: str = Field(description="IVA amount")
    total_amount: str = Field(description="Amount charged")
    currency: str = Field(description="Currency code")


class ConfirmPaymentRequest(BaseModel):
    """Schema for POST /launch/confirm-payment."""

    model_config = ConfigDict(from_attributes=True)

    payment_intent_id: str = Field(..., min_length=1, description="Stripe PaymentIntent ID to verify")
