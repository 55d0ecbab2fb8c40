"""Domain layer: board state, simulation step, fingerprints, and analysis."""

from snake_levels.domain.analysis import LevelAnalysis, ObstaclePattern, analyze_level
from snake_levels.domain.board import BoardState, Cell, Direction, MoveSet, Playback
from snake_levels.domain.fingerprint import StateKey, fingerprint
from snake_levels.domain.level import Level, LevelMechanics
from snake_levels.domain.rules import (
    DEFAULT_RULES,
    FailureReason,
    OutcomeStatus,
    StepOutcome,
    StepRules,
    step,
)

__all__ = [
    "BoardState",
    "Cell",
    "DEFAULT_RULES",
    "Direction",
    "FailureReason",
    "Level",
    "LevelAnalysis",
    "LevelMechanics",
    "MoveSet",
    "ObstaclePattern",
    "Playback",
    "OutcomeStatus",
    "StateKey",
    "StepOutcome",
    "StepRules",
    "analyze_level",
    "fingerprint",
    "step",
]
