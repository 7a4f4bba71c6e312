"""Launch request lifecycle: wizard saves, payment state and start.

States, as seen from the stored row:

    DRAFT (current_step 1..8)  --save_step-->  DRAFT
    DRAFT (step 8, complete)   --payment-->    PAYMENT_COMPLETE
    PAYMENT_COMPLETE           --start-->      STARTED (progress tracker created)

STARTED is terminal here; later changes only touch progress,
assignment and admin_status.
"""

import logging
from typing import Any
from uuid import UUID

from src.api.middleware.error_handler import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from src.core.permissions import Action, require
from src.models.launch_request import (
    FINAL_STEP,
    FIRST_STEP,
    INITIAL_ADMIN_STATUS,
    PaymentStatus,
)
from src.models.progress import initial_progress_row
from src.repositories.base import LaunchRequestStore, ProgressStore, Row
from src.repositories.supabase_stores import SupabaseLaunchRequestStore, SupabaseProgressStore
from src.schemas.auth import Actor
from src.schemas.launch import LaunchAnswers

logger = logging.getLogger(__name__)


def new_draft(user_id: UUID) -> Row:
    """Unsaved request shown to a client who has not submitted step 1 yet."""
    return {
        "id": None,
        "user_id": str(user_id),
        "current_step": FIRST_STEP,
        "is_form_complete": False,
        "payment_status": PaymentStatus.PENDING.value,
        "paid_amount": None,
        "stripe_payment_intent_id": None,
        "is_started": False,
        "admin_status": None,
        "assigned_to": None,
    }


class LaunchService:
    """Service for the Launch wizard and the start transition."""

    def __init__(
        self,
        requests: LaunchRequestStore | None = None,
        progress: ProgressStore | None = None,
    ) -> None:
        """Initialize launch service with its stores.

        Args:
            requests: Launch request store (Supabase-backed by default).
            progress: Progress store (Supabase-backed by default).
        """
        self.requests = requests or SupabaseLaunchRequestStore()
        self.progress = progress or SupabaseProgressStore()

    async def get_for_user(self, user_id: UUID) -> Row | None:
        """Get the user's launch request, if they have saved one."""
        return await self.requests.get_by_user(user_id)

    async def load_or_create(self, user_id: UUID) -> Row:
        """Get the user's launch request or an empty unsaved draft.

        Nothing is persisted here; the request row is created by the
        first save_step call.
        """
        existing = await self.requests.get_by_user(user_id)
        return existing if existing else new_draft(user_id)

    async def get_request(self, request_id: UUID) -> Row:
        """Get a launch request by ID.

        Raises:
            NotFoundError: If the request does not exist.
        """
        request = await self.requests.get(request_id)
        if not request:
            raise NotFoundError("Launch request not found")
        return request

    async def get_request_for_actor(self, request_id: UUID, actor: Actor) -> Row:
        """Get a launch request the actor is allowed to see."""
        request = await self.get_request(request_id)
        require(actor, Action.VIEW_REQUEST, request, "Not allowed to view this launch request")
        return request

    async def save_step(self, user_id: UUID, step_number: int, answers: LaunchAnswers) -> Row:
        """Persist a wizard step.

        Merges the answers that were sent into the stored request, sets
        current_step to step_number and is_form_complete to whether this
        is the final step. Steps may be saved in any order.

        Args:
            user_id: Owner of the request.
            step_number: Wizard step being saved (1-8).
            answers: Answer fields sent with this step.

        Returns:
            dict: The stored request.

        Raises:
            ValidationError: If step_number is outside 1-8.
            PreconditionFailedError: If the launch was already started.
            ConflictError: If the request changed while saving.
        """
        if not FIRST_STEP <= step_number <= FINAL_STEP:
            raise ValidationError(
                f"step_number must be between {FIRST_STEP} and {FINAL_STEP}",
                details=[{"loc": ["path", "step_number"], "msg": "out of range", "type": "value_error"}],
            )

        changes: dict[str, Any] = {
            **answers.to_changes(),
            "current_step": step_number,
            "is_form_complete": step_number == FINAL_STEP,
        }

        existing = await self.requests.get_by_user(user_id)
        if existing is None:
            created = await self.requests.create(
                {
                    "user_id": user_id,
                    "payment_status": PaymentStatus.PENDING,
                    "is_started": False,
                    "version": 0,
                    **changes,
                }
            )
            if created is not None:
                logger.info("Created launch request %s for user %s", created["id"], user_id)
                return created
            # Another save created the row first
            existing = await self.requests.get_by_user(user_id)
            if existing is None:
                raise ConflictError("Launch request could not be created")

        if existing.get("is_started"):
            raise PreconditionFailedError("Launch already started; the form can no longer be changed")

        updated = await self.requests.update(existing["id"], changes, existing["version"])
        if updated is None:
            raise ConflictError("Launch request was modified concurrently; reload and try again")

        logger.debug("Saved step %d for launch request %s", step_number, existing["id"])
        return updated

    async def start(self, user_id: UUID) -> Row:
        """Start the launch and create its progress tracker.

        Idempotent: once started, further calls return the started
        request and never create a second tracker.

        Args:
            user_id: Owner of the request.

        Returns:
            dict: The started request.

        Raises:
            NotFoundError: If the user has no launch request.
            PreconditionFailedError: If payment or the form is incomplete.
            ConflictError: If the request changed in a way other than being started.
        """
        request = await self.requests.get_by_user(user_id)
        if not request:
            raise NotFoundError("Launch request not found")

        if request.get("is_started"):
            await self._ensure_progress(request["id"])
            return request

        if request.get("payment_status") != PaymentStatus.COMPLETED.value:
            raise PreconditionFailedError("Payment must be completed before starting the launch")
        if not request.get("is_form_complete"):
            raise PreconditionFailedError("The Launch form must be completed before starting the launch")

        updated = await self.requests.update(
            request["id"],
            {"is_started": True, "admin_status": INITIAL_ADMIN_STATUS},
            request["version"],
        )
        if updated is None:
            current = await self.requests.get(request["id"])
            if current and current.get("is_started"):
                logger.info("Launch request %s was started by a concurrent call", request["id"])
                return current
            raise ConflictError("Launch request was modified concurrently; reload and try again")

        await self._ensure_progress(updated["id"])
        logger.info("Started launch request %s", updated["id"])
        return updated

    async def _ensure_progress(self, request_id: Any) -> Row:
        existing = await self.progress.get_by_request(request_id)
        if existing:
            return existing

        row = initial_progress_row(str(request_id))
        row["version"] = 0
        created = await self.progress.create(row)
        if created is not None:
            logger.info("Created progress tracker for launch request %s", request_id)
            return created

        existing = await self.progress.get_by_request(request_id)
        if existing is None:
            raise ConflictError("Progress tracker could not be created")
        return existing

    async def record_payment_intent(
        self, request_id: UUID, payment_intent_id: str, amount: str
    ) -> Row:
        """Remember the PaymentIntent created for a request."""
        request = await self.get_request(request_id)
        return await self._write(
            request,
            {"stripe_payment_intent_id": payment_intent_id, "paid_amount": amount},
        )

    async def mark_payment_completed(
        self,
        request_id: UUID,
        payment_intent_id: str | None = None,
        paid_amount: str | None = None,
    ) -> Row:
        """Record that the payment collaborator settled the Launch payment.

        Safe to call more than once (webhook and client confirmation can
        both arrive).
        """
        request = await self.get_request(request_id)
        if request.get("payment_status") == PaymentStatus.COMPLETED.value:
            return request

        changes: dict[str, Any] = {"payment_status": PaymentStatus.COMPLETED}
        if payment_intent_id:
            changes["stripe_payment_intent_id"] = payment_intent_id
        if paid_amount:
            changes["paid_amount"] = paid_amount

        updated = await self.requests.update(request["id"], changes, request["version"])
        if updated is None:
            current = await self.get_request(request_id)
            if current.get("payment_status") == PaymentStatus.COMPLETED.value:
                return current
            raise ConflictError("Launch request was modified concurrently; reload and try again")

        logger.info("Payment completed for launch request %s", request_id)
        return updated

    async def update_admin_status(self, request_id: UUID, admin_status: str, actor: Actor) -> Row:
        """Move a request to another column of the team board."""
        require(actor, Action.MANAGE_REQUEST)
        request = await self.get_request(request_id)
        updated = await self._write(request, {"admin_status": admin_status})
        logger.info("User %s moved launch request %s to %s", actor.user_id, request_id, admin_status)
        return updated

    async def _write(self, request: Row, changes: dict[str, Any]) -> Row:
        updated = await self.requests.update(request["id"], changes, request["version"])
        if updated is None:
            raise ConflictError("Launch request was modified concurrently; reload and try again")
        return updated
