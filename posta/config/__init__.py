"""Configuration for the Posta governance core."""

from posta.config.governance_config import (
    DEFAULT_GOVERNANCE_CONFIG,
    ConsensusConfig,
    GovernanceConfig,
    IntegrityConfig,
    RoutingConfig,
    StorageConfig,
)
from posta.config.task_tracks import DEFAULT_TASK_TRACKS, load_task_catalog, parse_task_catalog

__all__: list[str] = [
    "DEFAULT_GOVERNANCE_CONFIG",
    "DEFAULT_TASK_TRACKS",
    "ConsensusConfig",
    "GovernanceConfig",
    "IntegrityConfig",
    "RoutingConfig",
    "StorageConfig",
    "load_task_catalog",
    "parse_task_catalog",
]
