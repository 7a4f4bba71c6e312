"""Launch wizard API routes for the request owner."""

from fastapi import APIRouter, Path

from src.api.deps import (
    CurrentActor,
    LaunchServiceDep,
    MessageServiceDep,
    PaymentServiceDep,
    ProgressServiceDep,
)
from src.models.launch_request import FINAL_STEP, FIRST_STEP
from src.schemas.launch import LaunchAnswers, LaunchRequestResponse
from src.schemas.message import TeamMessageResponse
from src.schemas.payment import ConfirmPaymentRequest, PaymentIntentResponse
from src.schemas.progress import ProgressResponse

router = APIRouter(prefix="/launch", tags=["launch"])


@router.get(
    "/request",
    response_model=LaunchRequestResponse | None,
    summary="Get current launch request",
    description="Returns the caller's launch request, or null if they have not saved a step yet.",
)
async def get_current_request(
    actor: CurrentActor,
    service: LaunchServiceDep,
) -> LaunchRequestResponse | None:
    """Get the authenticated user's launch request.

    Args:
        actor: The acting user.
        service: Launch service.

    Returns:
        LaunchRequestResponse | None: The request, or None if none exists.
    """
    request = await service.get_for_user(actor.user_id)
    return LaunchRequestResponse(**request) if request else None


@router.get(
    "/request/draft",
    response_model=LaunchRequestResponse,
    summary="Get launch request or empty draft",
    description="Returns the caller's launch request, or an unsaved draft positioned at step 1.",
)
async def get_request_or_draft(
    actor: CurrentActor,
    service: LaunchServiceDep,
) -> LaunchRequestResponse:
    request = await service.load_or_create(actor.user_id)
    return LaunchRequestResponse(**request)


@router.put(
    "/request/steps/{step_number}",
    response_model=LaunchRequestResponse,
    summary="Save a wizard step",
    description="Merges the sent answers into the caller's request and records the step.",
)
async def save_step(
    answers: LaunchAnswers,
    actor: CurrentActor,
    service: LaunchServiceDep,
    step_number: int = Path(..., ge=FIRST_STEP, le=FINAL_STEP, description="Wizard step (1-8)"),
) -> LaunchRequestResponse:
    """Save one step of the Launch wizard.

    Args:
        answers: Answer fields for this step.
        actor: The acting user.
        service: Launch service.
        step_number: Wizard step being saved.

    Returns:
        LaunchRequestResponse: The stored request.
    """
    request = await service.save_step(actor.user_id, step_number, answers)
    return LaunchRequestResponse(**request)


@router.post(
    "/start",
    response_model=LaunchRequestResponse,
    summary="Start the launch",
    description="Starts the paid, completed request and creates its progress tracker. Idempotent.",
    responses={
        404: {"description": "No launch request"},
        409: {"description": "Payment or form incomplete"},
    },
)
async def start_launch(
    actor: CurrentActor,
    service: LaunchServiceDep,
) -> LaunchRequestResponse:
    request = await service.start(actor.user_id)
    return LaunchRequestResponse(**request)


@router.get(
    "/progress",
    response_model=ProgressResponse | None,
    summary="Get launch progress",
    description="Returns the progress of the caller's launch, or null before it is started.",
)
async def get_my_progress(
    actor: CurrentActor,
    service: ProgressServiceDep,
) -> ProgressResponse | None:
    progress = await service.get_for_owner(actor.user_id)
    return ProgressResponse.from_row(progress) if progress else None


@router.get(
    "/messages",
    response_model=list[TeamMessageResponse],
    summary="List my messages",
    description="Returns the team's messages on the caller's launch request, oldest first.",
)
async def list_my_messages(
    actor: CurrentActor,
    service: MessageServiceDep,
) -> list[TeamMessageResponse]:
    messages = await service.list_for_owner(actor.user_id)
    return [TeamMessageResponse(**message) for message in messages]


@router.post(
    "/payment-intent",
    response_model=PaymentIntentResponse,
    summary="Create payment intent",
    description="Creates a Stripe PaymentIntent for the Launch plan (base price plus IVA).",
)
async def create_payment_intent(
    actor: CurrentActor,
    service: PaymentServiceDep,
) -> PaymentIntentResponse:
    result = await service.create_payment_intent(actor.user_id)
    return PaymentIntentResponse(**result)


@router.post(
    "/confirm-payment",
    response_model=LaunchRequestResponse,
    summary="Confirm payment",
    description="Verifies the PaymentIntent with Stripe and marks the request paid.",
)
async def confirm_payment(
    data: ConfirmPaymentRequest,
    actor: CurrentActor,
    service: PaymentServiceDep,
) -> LaunchRequestResponse:
    request = await service.confirm_payment(actor.user_id, data.payment_intent_id)
    return LaunchRequestResponse(**request)


@router.post(
    "/test-complete-payment",
    response_model=LaunchRequestResponse,
    summary="Complete a test payment",
    description="Marks the request paid without Stripe. Only available when test payments are enabled.",
)
async def test_complete_payment(
    actor: CurrentActor,
    service: PaymentServiceDep,
) -> LaunchRequestResponse:
    request = await service.complete_test_payment(actor.user_id)
    return LaunchRequestResponse(**request)
