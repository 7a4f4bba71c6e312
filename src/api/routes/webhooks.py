"""Webhook API routes for external service integrations."""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from src.api.deps import PaymentServiceDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post(
    "/stripe",
    status_code=status.HTTP_200_OK,
    summary="Handle Stripe webhooks",
    description="Receives and processes Stripe webhook events. Requires valid signature.",
)
async def stripe_webhook(request: Request, service: PaymentServiceDep) -> dict[str, str]:
    """Handle Stripe webhook events.

    Handles:
    - payment_intent.succeeded: marks the Launch request paid

    Every other event is acknowledged and ignored.

    Args:
        request: FastAPI request object for reading raw body and headers.
        service: Payment service.

    Returns:
        dict: Acknowledgment message.

    Raises:
        HTTPException: 400 if the signature header is missing or invalid.
    """
    # Raw body is needed for signature verification
    payload = await request.body()

    sig_header = request.headers.get("stripe-signature")
    if not sig_header:
        logger.error("Missing Stripe-Signature header in webhook request")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing Stripe-Signature header",
        )

    logger.debug("Received webhook payload of %d bytes", len(payload))

    try:
        event = service.verify_webhook_signature(payload, sig_header)
    except ValueError as e:
        logger.error("Invalid webhook signature: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid signature",
        ) from e

    event_type = event.get("type", "")
    logger.info("Processing Stripe webhook event: %s", event_type)

    if event_type == "payment_intent.succeeded":
        await service.handle_payment_succeeded(event)
    else:
        logger.debug("Unhandled webhook event type: %s", event_type)

    # Always acknowledge so Stripe stops retrying
    return {"status": "received"}
