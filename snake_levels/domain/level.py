"""Level definition: identity metadata plus the initial board state.

Spikes are static hazards and are part of ``initial_state.obstacles``; they
are also kept on the level so layout analysis can tell them apart from
walls. Floating food, falling food and stones are recorded but have no
step rules, so levels that use them cannot be solved or verified.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from snake_levels.domain.board import BoardState, Cell


@dataclass(frozen=True)
class LevelMechanics:
    """Which special mechanics a level uses."""

    has_floating_food: bool = False
    has_falling_food: bool = False
    has_stones: bool = False
    has_spikes: bool = False

    @property
    def unsupported(self) -> tuple[str, ...]:
        """Level-document keys of mechanics the step function does not model."""
        names: list[str] = []
        if self.has_floating_food:
            names.append("floatingFood")
        if self.has_falling_food:
            names.append("fallingFood")
        if self.has_stones:
            names.append("stones")
        return tuple(names)


@dataclass(frozen=True)
class Level:
    """A parsed level, ready to be solved or verified."""

    level_id: str
    initial_state: BoardState
    name: str = ""
    difficulty: str | None = None
    path: Path | None = None
    spikes: frozenset[Cell] = frozenset()
    floating_food: frozenset[Cell] = frozenset()
    falling_food: frozenset[Cell] = frozenset()
    stones: frozenset[Cell] = frozenset()

    @property
    def walls(self) -> frozenset[Cell]:
        """Obstacles excluding spikes."""
        return self.initial_state.obstacles - self.spikes

    @property
    def mechanics(self) -> LevelMechanics:
        return LevelMechanics(
            has_floating_food=bool(self.floating_food),
            has_falling_food=bool(self.falling_food),
            has_stones=bool(self.stones),
            has_spikes=bool(self.spikes),
        )
