"""Journey and task track domain models.

A task track is the dependency graph of tasks for one goal tag. A journey is
one beneficiary's progress through a track.

Invariants:
- A track's dependency edges form a DAG over tasks of the same track.
- Task orders are unique within a track (they define the cursor order).
- A task may only be completed once every dependency is completed.
- The journey cursor (current_task_id) follows task order, not dependencies;
  moving the cursor never grants permission to start the next task.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional


@dataclass(frozen=True, eq=True)
class Task:
    """One step of a task track. Static configuration, read-only at runtime.

    Attributes:
        task_id: Unique identifier across all tracks (e.g. "ENROLL").
        order: Position in the track's total order (1-based).
        label: Human-readable label used in block reasons.
        goal_tag: Goal tag of the owning track.
        dependencies: Task ids that must be completed first.
    """

    task_id: str
    order: int
    label: str
    goal_tag: str
    dependencies: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not self.task_id:
            raise ValueError("task_id must be non-empty")
        if self.order < 1:
            raise ValueError(f"order must be positive, got {self.order} for {self.task_id}")
        if not isinstance(self.dependencies, frozenset):
            object.__setattr__(self, "dependencies", frozenset(self.dependencies))
        if self.task_id in self.dependencies:
            raise ValueError(f"Task {self.task_id} cannot depend on itself")


@dataclass(frozen=True)
class TaskTrack:
    """The task DAG for one goal tag, kept in ascending task order."""

    goal_tag: str
    tasks: tuple[Task, ...]

    def __post_init__(self) -> None:
        if not self.tasks:
            raise ValueError(f"Track {self.goal_tag} must contain at least one task")
        ordered = tuple(sorted(self.tasks, key=lambda t: t.order))
        object.__setattr__(self, "tasks", ordered)

        ids = [t.task_id for t in ordered]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Track {self.goal_tag} has duplicate task ids")
        orders = [t.order for t in ordered]
        if len(set(orders)) != len(orders):
            raise ValueError(f"Track {self.goal_tag} has duplicate task orders")

        known = set(ids)
        for task in ordered:
            if task.goal_tag != self.goal_tag:
                raise ValueError(
                    f"Task {task.task_id} belongs to {task.goal_tag}, not {self.goal_tag}"
                )
            dangling = task.dependencies - known
            if dangling:
                raise ValueError(
                    f"Task {task.task_id} depends on unknown tasks: {sorted(dangling)}"
                )
        self._check_acyclic()

    def _check_acyclic(self) -> None:
        # Kahn's algorithm over dependency edges.
        remaining = {t.task_id: set(t.dependencies) for t in self.tasks}
        while remaining:
            ready = [tid for tid, deps in remaining.items() if not deps]
            if not ready:
                raise ValueError(
                    f"Track {self.goal_tag} has a dependency cycle among {sorted(remaining)}"
                )
            for tid in ready:
                del remaining[tid]
            for deps in remaining.values():
                deps.difference_update(ready)

    @property
    def first_task(self) -> Task:
        return self.tasks[0]

    def get(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.task_id == task_id:
                return task
        return None

    def next_after(self, task_id: str) -> Optional[Task]:
        """Return the first task whose order is greater than task_id's order."""
        current = self.get(task_id)
        if current is None:
            return None
        for task in self.tasks:
            if task.order > current.order:
                return task
        return None

    def __contains__(self, task_id: object) -> bool:
        return isinstance(task_id, str) and self.get(task_id) is not None


@dataclass(frozen=True)
class TaskCatalog:
    """All configured task tracks, keyed by goal tag.

    Task ids are unique across tracks, so the owning track of any task can be
    found from its id alone.
    """

    tracks: Mapping[str, TaskTrack]
    default_goal_tag: str

    def __post_init__(self) -> None:
        if self.default_goal_tag not in self.tracks:
            raise ValueError(f"Default track {self.default_goal_tag} is not configured")
        seen: dict[str, str] = {}
        for goal_tag, track in self.tracks.items():
            if track.goal_tag != goal_tag:
                raise ValueError(f"Track keyed {goal_tag} declares goal {track.goal_tag}")
            for task in track.tasks:
                if task.task_id in seen:
                    raise ValueError(
                        f"Task id {task.task_id} appears in both "
                        f"{seen[task.task_id]} and {goal_tag}"
                    )
                seen[task.task_id] = goal_tag
        object.__setattr__(self, "tracks", MappingProxyType(dict(self.tracks)))

    @classmethod
    def from_tracks(cls, tracks: Iterable[TaskTrack], default_goal_tag: str) -> TaskCatalog:
        return cls(tracks={t.goal_tag: t for t in tracks}, default_goal_tag=default_goal_tag)

    @property
    def default_track(self) -> TaskTrack:
        return self.tracks[self.default_goal_tag]

    def track(self, goal_tag: str) -> Optional[TaskTrack]:
        return self.tracks.get(goal_tag)

    def track_for_task(self, task_id: str) -> Optional[TaskTrack]:
        for track in self.tracks.values():
            if task_id in track:
                return track
        return None


@dataclass
class Journey:
    """A beneficiary's progress through one task track.

    Attributes:
        beneficiary_id: Whose journey this is.
        goal_tag: The track being followed.
        current_task_id: Cursor over the track's task order.
        completed_task_ids: Tasks completed so far.
    """

    beneficiary_id: str
    goal_tag: str
    current_task_id: str
    completed_task_ids: set[str] = field(default_factory=set)

    @property
    def journey_id(self) -> str:
        return f"journey_{self.beneficiary_id}_{self.goal_tag}"

    def has_completed(self, task_id: str) -> bool:
        return task_id in self.completed_task_ids

    def to_dict(self) -> dict[str, Any]:
        return {
            "journey_id": self.journey_id,
            "beneficiary_id": self.beneficiary_id,
            "goal_tag": self.goal_tag,
            "current_task_id": self.current_task_id,
            "completed_task_ids": sorted(self.completed_task_ids),
        }


@dataclass(frozen=True, eq=True)
class AdvanceDecision:
    """Whether a beneficiary may start a task, with a reason when not.

    Attributes:
        allowed: True if every dependency is completed.
        reason: Human-readable reason naming the first unmet dependency.
        blocking_task_id: The first unmet dependency, if any.
    """

    allowed: bool
    reason: Optional[str] = None
    blocking_task_id: Optional[str] = None

    @classmethod
    def permit(cls) -> AdvanceDecision:
        return cls(allowed=True)

    @classmethod
    def block(cls, blocking_task: Task) -> AdvanceDecision:
        return cls(
            allowed=False,
            reason=f'Prerequisite "{blocking_task.label}" not met.',
            blocking_task_id=blocking_task.task_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "allowed": self.allowed,
            "reason": self.reason,
            "blocking_task_id": self.blocking_task_id,
        }
