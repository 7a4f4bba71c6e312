"""Integration tests for webhook API endpoints."""

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.schemas.auth import Actor
from tests.fakes import InMemoryLaunchRequestStore, InMemoryProgressStore


@pytest.fixture
def verify_signature(
    api: TestClient,
    request_store: InMemoryLaunchRequestStore,
    progress_store: InMemoryProgressStore,
) -> Generator[MagicMock, None, None]:
    """Serve webhooks through a PaymentService on the in-memory stores."""
    from src.api.deps import get_payment_service
    from src.main import app
    from src.services.launch_service import LaunchService
    from src.services.payment_service import PaymentService

    with patch("src.services.payment_service.get_stripe"):
        service = PaymentService(launch_service=LaunchService(requests=request_store, progress=progress_store))
    app.dependency_overrides[get_payment_service] = lambda: service

    with patch.object(service, "verify_webhook_signature") as mock:
        yield mock


def payment_succeeded(request_id: str, payment_type: str = "launch") -> dict:
    return {
        "id": "evt_123",
        "type": "payment_intent.succeeded",
        "data": {
            "object": {
                "id": "pi_123",
                "amount_received": 172385,
                "metadata": {"type": payment_type, "request_id": request_id},
            }
        },
    }


class TestStripeWebhook:
    """Tests for POST /api/v1/webhooks/stripe endpoint."""

    def test_payment_succeeded_marks_request_paid(
        self,
        api: TestClient,
        verify_signature: MagicMock,
        request_store: InMemoryLaunchRequestStore,
        client_actor: Actor,
    ) -> None:
        """Test that payment_intent.succeeded completes the Launch payment."""
        request = request_store.seed(client_actor.user_id, current_step=8, is_form_complete=True)
        verify_signature.return_value = payment_succeeded(request["id"])

        response = api.post(
            "/api/v1/webhooks/stripe",
            content=b'{"test": "payload"}',
            headers={"stripe-signature": "valid_signature"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "received"
        stored = request_store.rows[request["id"]]
        assert stored["payment_status"] == "completed"
        assert stored["paid_amount"] == "1723.85"
        verify_signature.assert_called_once_with(b'{"test": "payload"}', "valid_signature")

    def test_other_payment_types_are_acknowledged(
        self,
        api: TestClient,
        verify_signature: MagicMock,
        request_store: InMemoryLaunchRequestStore,
        client_actor: Actor,
    ) -> None:
        """Test that payments for other products are acknowledged and ignored."""
        request = request_store.seed(client_actor.user_id, current_step=8, is_form_complete=True)
        verify_signature.return_value = payment_succeeded(request["id"], payment_type="subscription")

        response = api.post(
            "/api/v1/webhooks/stripe",
            content=b"{}",
            headers={"stripe-signature": "valid_signature"},
        )

        assert response.status_code == 200
        assert request_store.rows[request["id"]]["payment_status"] == "pending"

    def test_malformed_request_id_is_acknowledged(self, api: TestClient, verify_signature: MagicMock) -> None:
        """Test a Launch event with a non-UUID request_id returns 200 so Stripe stops retrying."""
        verify_signature.return_value = payment_succeeded("not-a-uuid")

        response = api.post(
            "/api/v1/webhooks/stripe",
            content=b"{}",
            headers={"stripe-signature": "valid_signature"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "received"

    def test_unhandled_event_types_are_acknowledged(self, api: TestClient, verify_signature: MagicMock) -> None:
        """Test that unrelated events return 200."""
        verify_signature.return_value = {"id": "evt_456", "type": "customer.created", "data": {"object": {}}}

        response = api.post(
            "/api/v1/webhooks/stripe",
            content=b"{}",
            headers={"stripe-signature": "valid_signature"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "received"

    def test_returns_400_for_missing_signature(self, api: TestClient, verify_signature: MagicMock) -> None:
        """Test that missing signature header returns 400."""
        response = api.post("/api/v1/webhooks/stripe", content=b"{}")

        assert response.status_code == 400
        verify_signature.assert_not_called()

    def test_returns_400_for_invalid_signature(self, api: TestClient, verify_signature: MagicMock) -> None:
        """Test that invalid signature returns 400."""
        verify_signature.side_effect = ValueError("Invalid webhook signature")

        response = api.post(
            "/api/v1/webhooks/stripe",
            content=b"{}",
            headers={"stripe-signature": "invalid_signature"},
        )

        assert response.status_code == 400
