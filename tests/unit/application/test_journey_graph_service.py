"""Unit tests for JourneyGraphService."""

import pytest

from posta.application.services.journey_graph_service import JourneyGraphService
from posta.config.task_tracks import DEFAULT_TASK_TRACKS, parse_task_catalog
from posta.domain.errors.sequence import SequenceViolationError
from posta.domain.errors.validation import TaskNotInPathError, ValidationError
from posta.infrastructure.adapters.in_memory import InMemoryJourneyRepository


@pytest.fixture
def repository() -> InMemoryJourneyRepository:
    """Provide an empty journey repository."""
    return InMemoryJourneyRepository()


@pytest.fixture
def service(repository: InMemoryJourneyRepository) -> JourneyGraphService:
    """Provide a journey graph over the default education track."""
    return JourneyGraphService(
        catalog=parse_task_catalog(DEFAULT_TASK_TRACKS),
        journey_repository=repository,
    )


class TestGetOrCreateJourney:
    """Tests for lazy journey creation."""

    @pytest.mark.asyncio
    async def test_cursor_starts_at_first_task(self, service: JourneyGraphService) -> None:
        journey = await service.get_or_create_journey("ben_1")
        assert journey.goal_tag == "SDG_4"
        assert journey.current_task_id == "ENROLL"
        assert journey.completed_task_ids == set()

    @pytest.mark.asyncio
    async def test_idempotent(self, service: JourneyGraphService) -> None:
        first = await service.get_or_create_journey("ben_1")
        second = await service.get_or_create_journey("ben_1", "SDG_4")
        assert first is second

    @pytest.mark.asyncio
    async def test_unknown_track(self, service: JourneyGraphService) -> None:
        with pytest.raises(ValidationError, match="SDG_99"):
            await service.get_or_create_journey("ben_1", "SDG_99")


class TestCanAdvance:
    """Tests for dependency checks."""

    @pytest.mark.asyncio
    async def test_first_task_allowed(self, service: JourneyGraphService) -> None:
        assert (await service.can_advance("ben_1", "ENROLL")).allowed

    @pytest.mark.asyncio
    async def test_missing_dependency_blocks_with_reason(
        self, service: JourneyGraphService
    ) -> None:
        decision = await service.can_advance("ben_1", "ATTEND")
        assert not decision.allowed
        assert decision.reason == 'Prerequisite "School Enrollment" not met.'
        assert decision.blocking_task_id == "ENROLL"

    @pytest.mark.asyncio
    async def test_allowed_once_dependency_completed(self, service: JourneyGraphService) -> None:
        await service.complete_task("ben_1", "ENROLL")
        assert (await service.can_advance("ben_1", "ATTEND")).allowed
        assert not (await service.can_advance("ben_1", "MODULE_1")).allowed

    @pytest.mark.asyncio
    async def test_unknown_task(self, service: JourneyGraphService) -> None:
        with pytest.raises(TaskNotInPathError):
            await service.can_advance("ben_1", "GRADUATE")


class TestCompleteTask:
    """Tests for completion and cursor movement."""

    @pytest.mark.asyncio
    async def test_completion_moves_cursor(self, service: JourneyGraphService) -> None:
        journey = await service.complete_task("ben_1", "ENROLL")
        assert journey.completed_task_ids == {"ENROLL"}
        assert journey.current_task_id == "ATTEND"

    @pytest.mark.asyncio
    async def test_unknown_task_rejected(self, service: JourneyGraphService) -> None:
        with pytest.raises(TaskNotInPathError) as exc_info:
            await service.complete_task("ben_1", "GRADUATE")
        assert exc_info.value.task_id == "GRADUATE"

    @pytest.mark.asyncio
    async def test_cursor_stays_on_last_task(self, service: JourneyGraphService) -> None:
        for task_id in ("ENROLL", "ATTEND", "MODULE_1"):
            journey = await service.complete_task("ben_1", task_id)
        assert journey.current_task_id == "MODULE_1"
        assert journey.completed_task_ids == {"ENROLL", "ATTEND", "MODULE_1"}

    @pytest.mark.asyncio
    async def test_repeat_completion_is_noop(self, service: JourneyGraphService) -> None:
        await service.complete_task("ben_1", "ENROLL")
        await service.complete_task("ben_1", "ATTEND")
        journey = await service.complete_task("ben_1", "ENROLL")
        assert journey.current_task_id == "MODULE_1"

    @pytest.mark.asyncio
    async def test_unmet_dependency_raises(self, service: JourneyGraphService) -> None:
        with pytest.raises(SequenceViolationError) as exc_info:
            await service.complete_task("ben_1", "MODULE_1")
        assert exc_info.value.blocking_task_id == "ATTEND"
        journey = await service.get_or_create_journey("ben_1")
        assert journey.completed_task_ids == set()

    @pytest.mark.asyncio
    async def test_journeys_are_per_beneficiary(
        self, service: JourneyGraphService, repository: InMemoryJourneyRepository
    ) -> None:
        await service.complete_task("ben_1", "ENROLL")
        other = await service.get_or_create_journey("ben_2")
        assert other.completed_task_ids == set()
        saved = await repository.get("ben_1", "SDG_4")
        assert saved is not None and saved.has_completed("ENROLL")
