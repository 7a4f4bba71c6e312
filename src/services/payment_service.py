"""Launch plan payments through Stripe PaymentIntents."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from uuid import UUID, uuid4

import stripe

from src.api.middleware.error_handler import (
    AuthorizationError,
    NotFoundError,
    PreconditionFailedError,
)
from src.core.config import Settings, get_settings
from src.core.stripe import get_stripe
from src.models.launch_request import PaymentStatus
from src.repositories.base import Row
from src.services.launch_service import LaunchService

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Stripe metadata marker for Launch payments
LAUNCH_PAYMENT_TYPE = "launch"


def launch_amounts(settings: Settings) -> dict[str, Decimal]:
    """Price breakdown of the Launch plan (base, IVA and total)."""
    base = settings.launch_base_amount.quantize(CENT, rounding=ROUND_HALF_UP)
    tax = (base * settings.launch_tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)
    return {"base_amount": base, "tax": tax, "total_amount": base + tax}


def to_cents(amount: Decimal) -> int:
    """Convert a currency amount to Stripe's smallest unit."""
    return int((amount * 100).to_integral_value(rounding=ROUND_HALF_UP))


class PaymentService:
    """Service for collecting the Launch plan payment."""

    def __init__(self, launch_service: LaunchService | None = None) -> None:
        """Initialize payment service with Stripe and the launch service."""
        self.stripe = get_stripe()
        self.settings = get_settings()
        self.launch_service = launch_service or LaunchService()

    async def _payable_request(self, user_id: UUID) -> Row:
        request = await self.launch_service.get_for_user(user_id)
        if not request:
            raise NotFoundError("Launch request not found")
        if not request.get("is_form_complete"):
            raise PreconditionFailedError("The Launch form must be completed before paying")
        if request.get("payment_status") == PaymentStatus.COMPLETED.value:
            raise PreconditionFailedError("The Launch plan is already paid")
        return request

    async def create_payment_intent(self, user_id: UUID) -> dict[str, Any]:
        """Create a Stripe PaymentIntent for the user's Launch request.

        Args:
            user_id: Owner of the request.

        Returns:
            dict: client_secret, payment_intent_id and the price breakdown.

        Raises:
            NotFoundError: If the user has no request.
            PreconditionFailedError: If the form is incomplete or already paid.
            stripe.StripeError: If Stripe rejects the call.
        """
        request = await self._payable_request(user_id)
        amounts = launch_amounts(self.settings)

        try:
            intent = self.stripe.PaymentIntent.create(
                amount=to_cents(amounts["total_amount"]),
                currency=self.settings.launch_currency,
                automatic_payment_methods={"enabled": True},
                metadata={
                    "type": LAUNCH_PAYMENT_TYPE,
                    "request_id": str(request["id"]),
                    "user_id": str(user_id),
                },
            )
        except stripe.StripeError as e:
            logger.error("Stripe error creating payment intent for request %s: %s", request["id"], str(e))
            raise

        await self.launch_service.record_payment_intent(
            request["id"], intent.id, str(amounts["total_amount"])
        )
        logger.info("Created payment intent %s for launch request %s", intent.id, request["id"])

        return {
            "client_secret": intent.client_secret,
            "payment_intent_id": intent.id,
            "base_amount": str(amounts["base_amount"]),
            "tax": str(amounts["tax"]),
            "total_amount": str(amounts["total_amount"]),
            "currency": self.settings.launch_currency,
        }

    async def confirm_payment(self, user_id: UUID, payment_intent_id: str) -> Row:
        """Verify a PaymentIntent with Stripe and mark the request paid.

        Raises:
            NotFoundError: If the user has no request.
            AuthorizationError: If the intent belongs to another request.
            PreconditionFailedError: If the intent has not succeeded.
        """
        request = await self.launch_service.get_for_user(user_id)
        if not request:
            raise NotFoundError("Launch request not found")

        intent = self.stripe.PaymentIntent.retrieve(payment_intent_id)
        metadata = dict(intent.metadata or {})
        if metadata.get("request_id") != str(request["id"]):
            logger.warning("Payment intent %s does not belong to request %s", payment_intent_id, request["id"])
            raise AuthorizationError("Payment intent does not belong to this launch request")

        if intent.status != "succeeded":
            raise PreconditionFailedError(f"Payment has not succeeded (status: {intent.status})")

        return await self.launch_service.mark_payment_completed(
            request["id"],
            payment_intent_id=intent.id,
            paid_amount=self._paid_amount(intent.amount_received),
        )

    def _paid_amount(self, amount_received: int | None) -> str:
        if amount_received:
            return str((Decimal(amount_received) / 100).quantize(CENT))
        return str(launch_amounts(self.settings)["total_amount"])

    async def handle_payment_succeeded(self, event: dict[str, Any]) -> Row | None:
        """Process a payment_intent.succeeded webhook event.

        Events for other payment types are ignored.

        Args:
            event: Stripe webhook event data.

        Returns:
            dict | None: The updated request, or None if the event was ignored.
        """
        intent = event["data"]["object"]
        metadata = intent.get("metadata") or {}

        if metadata.get("type") != LAUNCH_PAYMENT_TYPE:
            logger.debug("Ignoring payment intent %s (not a Launch payment)", intent.get("id"))
            return None

        request_id = metadata.get("request_id")
        if not request_id:
            logger.warning("Webhook missing request_id in metadata: %s", intent.get("id"))
            return None

        try:
            request_uuid = UUID(request_id)
        except ValueError:
            logger.warning("Webhook has malformed request_id %r: %s", request_id, intent.get("id"))
            return None

        try:
            return await self.launch_service.mark_payment_completed(
                request_uuid,
                payment_intent_id=intent.get("id"),
                paid_amount=self._paid_amount(intent.get("amount_received")),
            )
        except NotFoundError:
            logger.warning("Launch request not found for payment intent %s", intent.get("id"))
            return None

    async def complete_test_payment(self, user_id: UUID) -> Row:
        """Mark the Launch payment completed without Stripe.

        Raises:
            AuthorizationError: If test payments are disabled.
        """
        if not self.settings.test_payments_enabled:
            raise AuthorizationError("Test payments are disabled")

        request = await self._payable_request(user_id)
        logger.warning("Completing test payment for launch request %s", request["id"])
        return await self.launch_service.mark_payment_completed(
            request["id"],
            payment_intent_id=f"test_{uuid4().hex}",
            paid_amount=str(launch_amounts(self.settings)["total_amount"]),
        )

    def verify_webhook_signature(self, payload: bytes, sig_header: str) -> dict[str, Any]:
        """Verify Stripe webhook signature and return event.

        Args:
            payload: Raw webhook payload bytes.
            sig_header: Stripe-Signature header value.

        Returns:
            dict: Verified Stripe event.

        Raises:
            ValueError: If signature is invalid or Stripe not configured.
        """
        if not self.settings.stripe_webhook_secret:
            raise ValueError("Stripe webhook secret is not configured. Please set STRIPE_WEBHOOK_SECRET environment variable.")

        try:
            return self.stripe.Webhook.construct_event(
                payload, sig_header, self.settings.stripe_webhook_secret
            )
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid webhook signature: %s", str(e))
            raise ValueError("Invalid webhook signature") from e
