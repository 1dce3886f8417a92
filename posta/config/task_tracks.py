"""Task track configuration.

Task tracks are data, not code: each goal tag has its own dependency graph
of tasks. Tracks are loaded from a JSON file (POSTA_TASK_TRACKS_PATH) or
fall back to the built-in defaults below.

File format:
    {
        "default_track": "SDG_4",
        "tracks": [
            {
                "goal_tag": "SDG_4",
                "tasks": [
                    {"id": "ENROLL", "order": 1, "label": "School Enrollment"},
                    {"id": "ATTEND", "order": 2, "label": "Consistent Attendance",
                     "dependencies": ["ENROLL"]}
                ]
            }
        ]
    }

The schema is checked with pydantic; graph rules (unknown dependencies,
cycles, duplicate ids across tracks) are checked by the domain models.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from structlog import get_logger

from posta.domain.errors.configuration import TaskTrackConfigError
from posta.domain.models.journey import Task, TaskCatalog, TaskTrack

logger = get_logger(__name__)

TASK_TRACKS_PATH_ENV = "POSTA_TASK_TRACKS_PATH"

DEFAULT_TASK_TRACKS: dict[str, Any] = {
    "default_track": "SDG_4",
    "tracks": [
        {
            "goal_tag": "SDG_4",
            "tasks": [
                {"id": "ENROLL", "order": 1, "label": "School Enrollment"},
                {
                    "id": "ATTEND",
                    "order": 2,
                    "label": "Consistent Attendance",
                    "dependencies": ["ENROLL"],
                },
                {
                    "id": "MODULE_1",
                    "order": 3,
                    "label": "Basic Literacy",
                    "dependencies": ["ATTEND"],
                },
            ],
        }
    ],
}


class TaskSpec(BaseModel):
    """One task entry in the configuration file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    order: int = Field(ge=1)
    label: str = Field(min_length=1)
    dependencies: list[str] = Field(default_factory=list)


class TrackSpec(BaseModel):
    """One goal track entry in the configuration file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    goal_tag: str = Field(min_length=1)
    tasks: list[TaskSpec] = Field(min_length=1)


class TaskTrackFile(BaseModel):
    """Top-level task track configuration document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    default_track: str = Field(min_length=1)
    tracks: list[TrackSpec] = Field(min_length=1)

    @field_validator("tracks")
    @classmethod
    def _unique_goal_tags(cls, tracks: list[TrackSpec]) -> list[TrackSpec]:
        tags = [t.goal_tag for t in tracks]
        if len(set(tags)) != len(tags):
            raise ValueError("goal_tag values must be unique across tracks")
        return tracks

    def to_catalog(self) -> TaskCatalog:
        """Build the domain TaskCatalog.

        Raises:
            ValueError: If the graph rules are violated.
        """
        tracks = [
            TaskTrack(
                goal_tag=track.goal_tag,
                tasks=tuple(
                    Task(
                        task_id=task.id,
                        order=task.order,
                        label=task.label,
                        goal_tag=track.goal_tag,
                        dependencies=frozenset(task.dependencies),
                    )
                    for task in track.tasks
                ),
            )
            for track in self.tracks
        ]
        return TaskCatalog.from_tracks(tracks, default_goal_tag=self.default_track)


def parse_task_catalog(data: dict[str, Any]) -> TaskCatalog:
    """Validate a task track document and build the catalog.

    Raises:
        TaskTrackConfigError: If the document fails schema or graph checks.
    """
    try:
        return TaskTrackFile.model_validate(data).to_catalog()
    except ValidationError as exc:
        raise TaskTrackConfigError(f"Invalid task track configuration: {exc}") from exc
    except ValueError as exc:
        raise TaskTrackConfigError(f"Invalid task track graph: {exc}") from exc


def load_task_catalog(path: Optional[Path] = None) -> TaskCatalog:
    """Load the task catalog from a file, the environment, or the defaults.

    Args:
        path: Explicit configuration file. When omitted, POSTA_TASK_TRACKS_PATH
            is consulted, then the built-in defaults are used.

    Raises:
        TaskTrackConfigError: If the file cannot be read or is invalid.
    """
    if path is None:
        env_path = os.environ.get(TASK_TRACKS_PATH_ENV)
        path = Path(env_path) if env_path else None

    if path is None:
        return parse_task_catalog(DEFAULT_TASK_TRACKS)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise TaskTrackConfigError(f"Cannot read task tracks from {path}: {exc}") from exc

    catalog = parse_task_catalog(data)
    logger.info(
        "task_tracks_loaded",
        path=str(path),
        tracks=sorted(catalog.tracks),
        default_track=catalog.default_goal_tag,
    )
    return catalog
