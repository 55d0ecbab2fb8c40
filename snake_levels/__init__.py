"""Level solving and verification engine for grid-based snake puzzles."""

from snake_levels.domain import BoardState, Direction, FailureReason, Level, MoveSet, step
from snake_levels.simulation import Exhausted, Failed, Passed, Solution, solve, verify

__all__ = [
    "BoardState",
    "Direction",
    "Exhausted",
    "Failed",
    "FailureReason",
    "Level",
    "MoveSet",
    "Passed",
    "Solution",
    "solve",
    "step",
    "verify",
]
