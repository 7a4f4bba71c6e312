"""Integration tests for the message respond and resolve endpoints."""

from collections.abc import Callable
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from src.schemas.auth import Actor
from tests.fakes import InMemoryLaunchRequestStore, InMemoryMessageStore


@pytest.fixture
def message(request_store: InMemoryLaunchRequestStore, message_store: InMemoryMessageStore, client_actor: Actor) -> dict:
    request = request_store.seed(client_actor.user_id, is_started=True, payment_status="completed")
    row = {
        "id": str(uuid4()),
        "launch_request_id": request["id"],
        "message": "¿Cuál es tu nombre comercial preferido?",
        "sender_role": "admin",
        "sender_name": "Ana Simplificadora",
        "client_response": None,
        "responded_at": None,
        "is_resolved": False,
        "created_at": "2025-01-01T00:00:00+00:00",
    }
    message_store.rows[row["id"]] = row
    return dict(row)


class TestRespond:
    """Tests for PATCH /api/v1/messages/{id}/respond."""

    def test_owner_responds(
        self, api: TestClient, act_as: Callable[[Actor], None], client_actor: Actor, message: dict
    ) -> None:
        """Test the owner's response is stored with a timestamp."""
        act_as(client_actor)

        response = api.patch(f"/api/v1/messages/{message['id']}/respond", json={"response": "Andes"})
        data = response.json()

        assert response.status_code == 200
        assert data["client_response"] == "Andes"
        assert data["responded_at"] is not None

    def test_second_response_conflicts(
        self,
        api: TestClient,
        act_as: Callable[[Actor], None],
        client_actor: Actor,
        message: dict,
        message_store: InMemoryMessageStore,
    ) -> None:
        """Test a message accepts only one response."""
        act_as(client_actor)
        url = f"/api/v1/messages/{message['id']}/respond"
        api.patch(url, json={"response": "Andes"})

        response = api.patch(url, json={"response": "Pacífico"})

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"
        assert message_store.rows[message["id"]]["client_response"] == "Andes"

    def test_other_user_cannot_respond(
        self, api: TestClient, act_as: Callable[[Actor], None], simplificador: Actor, message: dict
    ) -> None:
        """Test only the request owner may respond."""
        act_as(simplificador)

        response = api.patch(f"/api/v1/messages/{message['id']}/respond", json={"response": "Andes"})

        assert response.status_code == 403

    def test_empty_response(
        self, api: TestClient, act_as: Callable[[Actor], None], client_actor: Actor, message: dict
    ) -> None:
        """Test blank responses are validation errors."""
        act_as(client_actor)

        response = api.patch(f"/api/v1/messages/{message['id']}/respond", json={"response": ""})

        assert response.status_code == 422

    def test_unknown_message(self, api: TestClient, act_as: Callable[[Actor], None], client_actor: Actor) -> None:
        """Test unknown message IDs are NotFound."""
        act_as(client_actor)

        response = api.patch(f"/api/v1/messages/{uuid4()}/respond", json={"response": "Andes"})

        assert response.status_code == 404


class TestResolve:
    """Tests for PATCH /api/v1/messages/{id}/resolve."""

    def test_owner_and_team_toggle(
        self,
        api: TestClient,
        act_as: Callable[[Actor], None],
        client_actor: Actor,
        simplificador: Actor,
        message: dict,
    ) -> None:
        """Test both the owner and the team can set the flag."""
        url = f"/api/v1/messages/{message['id']}/resolve"

        act_as(client_actor)
        resolved = api.patch(url, json={"is_resolved": True})
        act_as(simplificador)
        reopened = api.patch(url, json={"is_resolved": False})

        assert resolved.json()["is_resolved"] is True
        assert reopened.json()["is_resolved"] is False

    def test_flag_must_be_boolean(
        self, api: TestClient, act_as: Callable[[Actor], None], client_actor: Actor, message: dict
    ) -> None:
        """Test non-boolean values are rejected."""
        act_as(client_actor)

        response = api.patch(f"/api/v1/messages/{message['id']}/resolve", json={"is_resolved": "yes"})

        assert response.status_code == 422
