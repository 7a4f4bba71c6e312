"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("SUPABASE_SIGNING_KEY_JWK", "test-signing-key-jwk")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_stripe_secret_key")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_webhook_secret")
os.environ.setdefault("STRIPE_PUBLISHABLE_KEY", "pk_test_stripe_publishable_key")

from src.models.profile import UserRole  # noqa: E402
from src.schemas.auth import Actor  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeProfileDirectory,
    InMemoryLaunchRequestStore,
    InMemoryMessageStore,
    InMemoryNoteStore,
    InMemoryProgressStore,
    make_actor,
)


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()

    settings = get_settings()
    yield settings

    get_settings.cache_clear()


@pytest.fixture
def mock_supabase_client() -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = MagicMock()

    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )

    with patch("src.core.supabase.get_supabase_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def client(mock_supabase_client: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Dependency overrides set by a test are cleared afterwards.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.main import app

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# In-memory stores


@pytest.fixture
def request_store() -> InMemoryLaunchRequestStore:
    return InMemoryLaunchRequestStore()


@pytest.fixture
def progress_store() -> InMemoryProgressStore:
    return InMemoryProgressStore()


@pytest.fixture
def message_store() -> InMemoryMessageStore:
    return InMemoryMessageStore()


@pytest.fixture
def note_store() -> InMemoryNoteStore:
    return InMemoryNoteStore()


@pytest.fixture
def profile_directory() -> FakeProfileDirectory:
    return FakeProfileDirectory()


# Actors


@pytest.fixture
def client_actor(profile_directory: FakeProfileDirectory) -> Actor:
    """A client who owns (or will own) a launch request."""
    return profile_directory.add(make_actor(UserRole.CLIENT, full_name="María Pérez"))


@pytest.fixture
def simplificador(profile_directory: FakeProfileDirectory) -> Actor:
    return profile_directory.add(make_actor(UserRole.SIMPLIFICADOR, full_name="Ana Simplificadora"))


@pytest.fixture
def other_simplificador(profile_directory: FakeProfileDirectory) -> Actor:
    return profile_directory.add(make_actor(UserRole.SIMPLIFICADOR, full_name="Luis Simplificador"))


@pytest.fixture
def superadmin(profile_directory: FakeProfileDirectory) -> Actor:
    return profile_directory.add(make_actor(UserRole.SUPERADMIN, full_name="Carla Admin"))


# API wiring


@pytest.fixture
def api(
    client: TestClient,
    request_store: InMemoryLaunchRequestStore,
    progress_store: InMemoryProgressStore,
    message_store: InMemoryMessageStore,
    note_store: InMemoryNoteStore,
    profile_directory: FakeProfileDirectory,
) -> TestClient:
    """Test client whose services run on the in-memory stores.

    Stripe is never called: payment routes are covered by
    test_launch_routes with get_stripe patched.
    """
    from src.api import deps
    from src.main import app
    from src.services.assignment_service import AssignmentService
    from src.services.launch_service import LaunchService
    from src.services.message_service import MessageService
    from src.services.note_service import NoteService
    from src.services.progress_service import ProgressService

    app.dependency_overrides[deps.get_launch_service] = lambda: LaunchService(
        requests=request_store, progress=progress_store
    )
    app.dependency_overrides[deps.get_progress_service] = lambda: ProgressService(
        progress=progress_store, requests=request_store
    )
    app.dependency_overrides[deps.get_message_service] = lambda: MessageService(
        messages=message_store, requests=request_store
    )
    app.dependency_overrides[deps.get_note_service] = lambda: NoteService(notes=note_store, requests=request_store)
    app.dependency_overrides[deps.get_assignment_service] = lambda: AssignmentService(
        requests=request_store, profiles=profile_directory
    )
    return client


@pytest.fixture
def act_as() -> Any:
    """Return a function that makes the given actor the authenticated caller."""
    from src.api.deps import get_current_actor
    from src.main import app

    def _act_as(actor: Actor) -> None:
        app.dependency_overrides[get_current_actor] = lambda: actor

    return _act_as
