"""Configuration dataclasses for solve, verify, and batch runs.

All frozen dataclasses that parameterise a single solve and a corpus-wide
batch live here. Each validates itself in ``__post_init__``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from snake_levels.config.constants import (
    DEFAULT_DIFFICULTIES,
    DEFAULT_MAX_DEPTH,
    DEFAULT_WORKERS,
    PLAYBACKS_DIR_NAME,
)
from snake_levels.domain.board import MoveSet
from snake_levels.domain.rules import StepRules

__all__ = [
    "BatchConfig",
    "BatchMode",
    "SolverConfig",
]


class BatchMode(Enum):
    """What a batch run does with each level."""

    SOLVE = "solve"
    VERIFY = "verify"


@dataclass(frozen=True)
class SolverConfig:
    """Depth bound and step rules for one solve or verify call."""

    max_depth: int = DEFAULT_MAX_DEPTH
    move_set: MoveSet = MoveSet.FOUR
    forbid_reverse: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ValueError("max_depth must be an integer")
        if self.max_depth < 1:
            raise ValueError("max_depth must be >= 1")

    @property
    def rules(self) -> StepRules:
        return StepRules(move_set=self.move_set, forbid_reverse=self.forbid_reverse)


@dataclass(frozen=True)
class BatchConfig:
    """Corpus-wide run settings."""

    levels_root: Path = Path("levels")
    playbacks_root: Path | None = None
    out_dir: Path = Path("data")
    difficulties: tuple[str, ...] = DEFAULT_DIFFICULTIES
    workers: int = DEFAULT_WORKERS
    level_timeout_s: float | None = None
    write_playbacks: bool = True
    solver: SolverConfig = SolverConfig()

    def __post_init__(self) -> None:
        if not self.difficulties:
            raise ValueError("difficulties must not be empty")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        if self.level_timeout_s is not None and self.level_timeout_s <= 0:
            raise ValueError("level_timeout_s must be > 0")

    def resolved_playbacks_root(self) -> Path:
        """Playbacks root, defaulting to a ``playbacks`` sibling of the levels root."""
        if self.playbacks_root is not None:
            return self.playbacks_root
        return self.levels_root.parent / PLAYBACKS_DIR_NAME
