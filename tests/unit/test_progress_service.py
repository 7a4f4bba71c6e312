"""Unit tests for ProgressService."""

from uuid import uuid4

import pytest
import pytest_asyncio
from pydantic import ValidationError as PydanticValidationError

from src.api.middleware.error_handler import AuthorizationError, ConflictError, NotFoundError
from src.models.progress import initial_progress_row
from src.schemas.auth import Actor
from src.schemas.progress import ProgressResponse, ProgressUpdate
from src.services.progress_service import ProgressService
from tests.fakes import InMemoryLaunchRequestStore, InMemoryProgressStore


@pytest.fixture
def service(progress_store: InMemoryProgressStore, request_store: InMemoryLaunchRequestStore) -> ProgressService:
    return ProgressService(progress=progress_store, requests=request_store)


@pytest_asyncio.fixture
async def tracker(
    request_store: InMemoryLaunchRequestStore,
    progress_store: InMemoryProgressStore,
    client_actor: Actor,
) -> dict:
    request = request_store.seed(client_actor.user_id, is_started=True, payment_status="completed")
    return await progress_store.create({**initial_progress_row(request["id"]), "version": 0})


class TestGetProgress:
    """Tests for get_for_request and get_for_owner."""

    @pytest.mark.asyncio
    async def test_owner_and_team_read_progress(
        self, service: ProgressService, tracker: dict, client_actor: Actor, simplificador: Actor
    ) -> None:
        """Test both the owner and the team can read a tracker."""
        for actor in (client_actor, simplificador):
            result = await service.get_for_request(tracker["launch_request_id"], actor)
            assert result["id"] == tracker["id"]

    @pytest.mark.asyncio
    async def test_other_client_cannot_read_progress(self, service: ProgressService, tracker: dict) -> None:
        """Test a stranger is forbidden."""
        with pytest.raises(AuthorizationError):
            await service.get_for_request(tracker["launch_request_id"], Actor(user_id=uuid4()))

    @pytest.mark.asyncio
    async def test_not_started_request_has_no_progress(
        self, service: ProgressService, request_store: InMemoryLaunchRequestStore, client_actor: Actor
    ) -> None:
        """Test None is returned before the launch is started."""
        request = request_store.seed(client_actor.user_id)

        assert await service.get_for_request(request["id"], client_actor) is None

    @pytest.mark.asyncio
    async def test_unknown_request(self, service: ProgressService, simplificador: Actor) -> None:
        """Test unknown request IDs are NotFound."""
        with pytest.raises(NotFoundError):
            await service.get_for_request(uuid4(), simplificador)

    @pytest.mark.asyncio
    async def test_get_for_owner(self, service: ProgressService, tracker: dict, client_actor: Actor) -> None:
        """Test the owner's own tracker is found through their user ID."""
        result = await service.get_for_owner(client_actor.user_id)

        assert result["id"] == tracker["id"]
        assert await service.get_for_owner(uuid4()) is None


class TestUpdateProgress:
    """Tests for update_progress."""

    @pytest.mark.asyncio
    async def test_partial_update_touches_only_sent_fields(
        self, service: ProgressService, tracker: dict, simplificador: Actor
    ) -> None:
        """Test a patch changes only the named pipeline fields."""
        update = ProgressUpdate(logo={"status": "in_progress", "progress": 40})

        result = await service.update_progress(tracker["id"], update, simplificador)

        assert result["logo_status"] == "in_progress"
        assert result["logo_progress"] == 40
        assert result["logo_current_step"] == tracker["logo_current_step"]
        assert result["website_status"] == "pending"
        assert result["version"] == 1

    @pytest.mark.asyncio
    async def test_status_and_progress_are_independent(
        self, service: ProgressService, tracker: dict, superadmin: Actor
    ) -> None:
        """Test completed status with partial percentage is accepted as sent."""
        update = ProgressUpdate(company={"status": "completed", "progress": 70})

        result = await service.update_progress(tracker["id"], update, superadmin)

        assert result["company_status"] == "completed"
        assert result["company_progress"] == 70

    @pytest.mark.asyncio
    async def test_null_clears_step_text(
        self, service: ProgressService, tracker: dict, simplificador: Actor
    ) -> None:
        """Test an explicit null next_step empties the stored text."""
        result = await service.update_progress(tracker["id"], ProgressUpdate(logo={"next_step": None}), simplificador)

        assert result["logo_next_step"] is None
        assert result["logo_current_step"] == tracker["logo_current_step"]

    @pytest.mark.asyncio
    async def test_client_cannot_update(self, service: ProgressService, tracker: dict, client_actor: Actor) -> None:
        """Test clients cannot update progress, even on their own launch."""
        with pytest.raises(AuthorizationError):
            await service.update_progress(tracker["id"], ProgressUpdate(logo={"progress": 10}), client_actor)

    @pytest.mark.asyncio
    async def test_unknown_tracker(self, service: ProgressService, simplificador: Actor) -> None:
        """Test unknown progress IDs are NotFound."""
        with pytest.raises(NotFoundError):
            await service.update_progress(uuid4(), ProgressUpdate(logo={"progress": 10}), simplificador)

    @pytest.mark.asyncio
    async def test_empty_patch_returns_current(
        self, service: ProgressService, tracker: dict, simplificador: Actor
    ) -> None:
        """Test an empty patch writes nothing."""
        result = await service.update_progress(tracker["id"], ProgressUpdate(), simplificador)

        assert result["version"] == 0

    @pytest.mark.asyncio
    async def test_lost_race_is_conflict(
        self,
        request_store: InMemoryLaunchRequestStore,
        progress_store: InMemoryProgressStore,
        tracker: dict,
        simplificador: Actor,
    ) -> None:
        """Test an update against a stale version is reported."""

        class StaleProgressStore(InMemoryProgressStore):
            async def get(self, progress_id):
                row = await super().get(progress_id)
                self.rows[row["id"]]["version"] += 1
                return row

        stale = StaleProgressStore()
        stale.rows = progress_store.rows
        service = ProgressService(progress=stale, requests=request_store)

        with pytest.raises(ConflictError):
            await service.update_progress(tracker["id"], ProgressUpdate(logo={"progress": 10}), simplificador)


class TestProgressSchemas:
    """Structural validation of progress patches."""

    @pytest.mark.parametrize("value", [-1, 101])
    def test_progress_out_of_range(self, value: int) -> None:
        """Test percentages outside 0-100 are rejected."""
        with pytest.raises(PydanticValidationError):
            ProgressUpdate(logo={"progress": value})

    def test_unknown_status(self) -> None:
        """Test unknown status values are rejected."""
        with pytest.raises(PydanticValidationError):
            ProgressUpdate(website={"status": "blocked"})

    def test_unknown_pipeline(self) -> None:
        """Test unknown pipelines are rejected."""
        with pytest.raises(PydanticValidationError):
            ProgressUpdate(marketing={"progress": 10})

    def test_response_nests_flat_columns(self) -> None:
        """Test the flat row is grouped per pipeline."""
        row = {"id": str(uuid4()), **initial_progress_row(str(uuid4())), "signature_progress": 55}

        response = ProgressResponse.from_row(row)

        assert response.signature.progress == 55
        assert response.logo.status.value == "pending"
        assert response.logo.current_step == "Revisión inicial de brief"

    def test_explicit_null_step_is_kept(self) -> None:
        """Test a null step text is sent as a column update."""
        assert ProgressUpdate(logo={"next_step": None}).to_columns() == {"logo_next_step": None}

    def test_null_status_and_progress_are_skipped(self) -> None:
        """Test null status and progress leave their columns untouched."""
        update = ProgressUpdate(website={"status": None, "progress": None, "current_step": "Diseño"}, logo=None)

        assert update.to_columns() == {"website_current_step": "Diseño"}
