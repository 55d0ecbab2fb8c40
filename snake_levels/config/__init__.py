"""Configuration layer: constants and typed config dataclasses."""

from snake_levels.config.constants import (
    DEFAULT_DIFFICULTIES,
    DEFAULT_MAX_DEPTH,
    DEFAULT_WORKERS,
    PLAYBACK_DELAY_MS,
)
from snake_levels.config.types import BatchConfig, BatchMode, SolverConfig

__all__ = [
    "BatchConfig",
    "BatchMode",
    "DEFAULT_DIFFICULTIES",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_WORKERS",
    "PLAYBACK_DELAY_MS",
    "SolverConfig",
]
