"""Exception hierarchy for malformed inputs and interrupted searches.

Simulation-time failures (out of bounds, obstacle, self collision, goal not
reached) are *results*, not exceptions; see ``FailureReason``.
"""

from __future__ import annotations

from pathlib import Path


class SnakeLevelsError(Exception):
    """Base class for all package errors."""


class MalformedLevel(SnakeLevelsError):
    """Level document is unreadable or structurally invalid."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        prefix = f"{path}: " if path is not None else ""
        super().__init__(f"{prefix}{message}")


class MalformedPlayback(SnakeLevelsError):
    """Playback document is unreadable or structurally invalid."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        prefix = f"{path}: " if path is not None else ""
        super().__init__(f"{prefix}{message}")


class UnsupportedMechanics(SnakeLevelsError):
    """Level uses mechanics the step function has no rules for."""

    def __init__(self, level_id: str, mechanics: tuple[str, ...]) -> None:
        self.level_id = level_id
        self.mechanics = mechanics
        super().__init__(
            f"level {level_id} uses unsupported mechanics: {', '.join(mechanics)}"
        )


class SolveCancelled(SnakeLevelsError):
    """A solve was aborted through its cancellation event."""

    def __init__(self, explored: int) -> None:
        self.explored = explored
        super().__init__(f"solve cancelled after expanding {explored} nodes")
