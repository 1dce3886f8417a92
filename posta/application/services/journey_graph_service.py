"""Dependency-gated beneficiary journeys.

A journey tracks one beneficiary through one task track. A task may only be
completed once all of its dependencies are; the cursor (current_task_id)
then moves to the next task by order. The cursor is informational: it never
grants permission to skip a dependency.

All operations for one beneficiary are serialized under that beneficiary's
lock.
"""

from __future__ import annotations

from typing import Optional

from posta.application.ports.journey_repository import JourneyRepositoryProtocol
from posta.application.services.base import LoggingMixin
from posta.application.services.keyed_lock import KeyedLock
from posta.domain.errors.sequence import SequenceViolationError
from posta.domain.errors.validation import TaskNotInPathError, ValidationError
from posta.domain.models.journey import AdvanceDecision, Journey, Task, TaskCatalog, TaskTrack


class JourneyGraphService(LoggingMixin):
    """Creates journeys and gates task completion on dependencies."""

    def __init__(
        self,
        catalog: TaskCatalog,
        journey_repository: JourneyRepositoryProtocol,
    ) -> None:
        self._catalog = catalog
        self._journeys = journey_repository
        self._locks = KeyedLock()
        self._init_logger(component="journey")

    @property
    def catalog(self) -> TaskCatalog:
        return self._catalog

    async def get_or_create_journey(
        self,
        beneficiary_id: str,
        goal_tag: Optional[str] = None,
    ) -> Journey:
        """Return the beneficiary's journey on a track, creating it if absent.

        Args:
            beneficiary_id: Whose journey.
            goal_tag: Track to follow. Defaults to the catalog's default track.

        Raises:
            ValidationError: If beneficiary_id is missing or the track is unknown.
        """
        if not beneficiary_id:
            raise ValidationError("beneficiary_id")
        track = self._resolve_track(goal_tag)
        async with self._locks.hold(beneficiary_id):
            return await self._load_or_create(beneficiary_id, track)

    async def can_advance(self, beneficiary_id: str, task_id: str) -> AdvanceDecision:
        """Check whether every dependency of task_id is completed.

        Returns:
            AdvanceDecision naming the first unmet dependency (by task order)
            when the task is blocked.

        Raises:
            ValidationError: If beneficiary_id is missing.
            TaskNotInPathError: If task_id is not in any configured track.
        """
        if not beneficiary_id:
            raise ValidationError("beneficiary_id")
        track, task = self._locate(task_id)
        async with self._locks.hold(beneficiary_id):
            journey = await self._load_or_create(beneficiary_id, track)
            return self._decide(journey, track, task)

    async def complete_task(self, beneficiary_id: str, task_id: str) -> Journey:
        """Mark a task completed and move the cursor to the next task by order.

        Completing an already completed task is a no-op.

        Raises:
            ValidationError: If beneficiary_id is missing.
            TaskNotInPathError: If task_id is not in any configured track.
            SequenceViolationError: If a dependency is not yet completed.
        """
        if not beneficiary_id:
            raise ValidationError("beneficiary_id")
        track, task = self._locate(task_id)
        log = self._log_operation(
            "complete_task", beneficiary_id=beneficiary_id, task_id=task_id
        )

        async with self._locks.hold(beneficiary_id):
            journey = await self._load_or_create(beneficiary_id, track)
            if journey.has_completed(task_id):
                return journey

            decision = self._decide(journey, track, task)
            if not decision.allowed:
                log.info("task_blocked", blocking_task_id=decision.blocking_task_id)
                raise SequenceViolationError(
                    beneficiary_id=beneficiary_id,
                    task_id=task_id,
                    reason=decision.reason or "",
                    blocking_task_id=decision.blocking_task_id,
                )

            journey.completed_task_ids.add(task_id)
            next_task = track.next_after(task_id)
            if next_task is not None:
                journey.current_task_id = next_task.task_id
            await self._journeys.save(journey)

        log.info("task_completed", current_task_id=journey.current_task_id)
        return journey

    def _resolve_track(self, goal_tag: Optional[str]) -> TaskTrack:
        if goal_tag is None:
            return self._catalog.default_track
        track = self._catalog.track(goal_tag)
        if track is None:
            raise ValidationError("goal_tag", f"No task track configured for {goal_tag}")
        return track

    def _locate(self, task_id: str) -> tuple[TaskTrack, Task]:
        if not task_id:
            raise ValidationError("task_id")
        track = self._catalog.track_for_task(task_id)
        task = track.get(task_id) if track is not None else None
        if track is None or task is None:
            raise TaskNotInPathError(task_id)
        return track, task

    async def _load_or_create(self, beneficiary_id: str, track: TaskTrack) -> Journey:
        journey = await self._journeys.get(beneficiary_id, track.goal_tag)
        if journey is None:
            journey = Journey(
                beneficiary_id=beneficiary_id,
                goal_tag=track.goal_tag,
                current_task_id=track.first_task.task_id,
            )
            await self._journeys.save(journey)
            self._log.info(
                "journey_created",
                beneficiary_id=beneficiary_id,
                goal_tag=track.goal_tag,
            )
        return journey

    @staticmethod
    def _decide(journey: Journey, track: TaskTrack, task: Task) -> AdvanceDecision:
        for candidate in track.tasks:
            if candidate.task_id in task.dependencies and not journey.has_completed(
                candidate.task_id
            ):
                return AdvanceDecision.block(candidate)
        return AdvanceDecision.permit()
