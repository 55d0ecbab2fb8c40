"""Immutable board state for one simulation instant.

A ``BoardState`` is a value: the step function never mutates it and always
returns a new instance. Bounds and obstacles are level-invariant and shared
by reference between all states derived from one level.

Coordinates are ``(x, y)`` with ``UP`` increasing ``y``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

Cell = tuple[int, int]


class Direction(Enum):
    """Directional move; the value is the ``(dx, dy)`` offset."""

    UP = (0, 1)
    DOWN = (0, -1)
    RIGHT = (1, 0)
    LEFT = (-1, 0)
    UP_RIGHT = (1, 1)
    UP_LEFT = (-1, 1)
    DOWN_RIGHT = (1, -1)
    DOWN_LEFT = (-1, -1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> Direction:
        return Direction((-self.dx, -self.dy))

    @property
    def key(self) -> str:
        """Canonical playback key, e.g. ``"Up"`` or ``"UpRight"``."""
        return _KEY_NAMES[self]

    def apply(self, cell: Cell) -> Cell:
        return (cell[0] + self.dx, cell[1] + self.dy)

    @classmethod
    def parse(cls, raw: str) -> Direction:
        """Parse a playback key.

        Accepts Up/Down/Left/Right, North/South/East/West, single letters
        U/D/L/R and diagonal names such as ``UpRight`` or ``up-right``.
        """
        normalized = raw.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        try:
            return _ALIASES[normalized]
        except KeyError:
            raise ValueError(
                f"Invalid key '{raw}'. Use Right/Left/Up/Down (or R/L/U/D)."
            ) from None


_KEY_NAMES: dict[Direction, str] = {
    Direction.UP: "Up",
    Direction.DOWN: "Down",
    Direction.RIGHT: "Right",
    Direction.LEFT: "Left",
    Direction.UP_RIGHT: "UpRight",
    Direction.UP_LEFT: "UpLeft",
    Direction.DOWN_RIGHT: "DownRight",
    Direction.DOWN_LEFT: "DownLeft",
}

_ALIASES: dict[str, Direction] = {
    "u": Direction.UP,
    "up": Direction.UP,
    "north": Direction.UP,
    "d": Direction.DOWN,
    "down": Direction.DOWN,
    "south": Direction.DOWN,
    "r": Direction.RIGHT,
    "right": Direction.RIGHT,
    "east": Direction.RIGHT,
    "l": Direction.LEFT,
    "left": Direction.LEFT,
    "west": Direction.LEFT,
    "upright": Direction.UP_RIGHT,
    "northeast": Direction.UP_RIGHT,
    "upleft": Direction.UP_LEFT,
    "northwest": Direction.UP_LEFT,
    "downright": Direction.DOWN_RIGHT,
    "southeast": Direction.DOWN_RIGHT,
    "downleft": Direction.DOWN_LEFT,
    "southwest": Direction.DOWN_LEFT,
}


class MoveSet(Enum):
    """Move vocabulary a level is played with."""

    FOUR = "four"
    EIGHT = "eight"

    @property
    def directions(self) -> tuple[Direction, ...]:
        """Directions in the fixed expansion order used by the solver."""
        return _MOVE_SET_DIRECTIONS[self]


_CARDINAL = (Direction.UP, Direction.DOWN, Direction.RIGHT, Direction.LEFT)
_DIAGONAL = (Direction.UP_RIGHT, Direction.UP_LEFT, Direction.DOWN_RIGHT, Direction.DOWN_LEFT)
_MOVE_SET_DIRECTIONS: dict[MoveSet, tuple[Direction, ...]] = {
    MoveSet.FOUR: _CARDINAL,
    MoveSet.EIGHT: _CARDINAL + _DIAGONAL,
}

Playback = tuple[Direction, ...]
"""Ordered move sequence claimed to solve a level."""


@dataclass(frozen=True)
class BoardState:
    """Snake body, obstacles and remaining goal at one instant.

    The plain constructor performs no checks so the step function can build
    successor states cheaply; use :meth:`create` for untrusted input.
    """

    width: int
    height: int
    body: tuple[Cell, ...]  # head first
    obstacles: frozenset[Cell]
    food: frozenset[Cell] = frozenset()
    exit_cell: Cell | None = None
    target_length: int | None = None
    heading: Direction | None = None
    moves: int = 0

    @classmethod
    def create(
        cls,
        *,
        width: int,
        height: int,
        body: Iterable[Cell],
        obstacles: Iterable[Cell] = (),
        food: Iterable[Cell] = (),
        exit_cell: Cell | None = None,
        target_length: int | None = None,
        heading: Direction | None = None,
    ) -> BoardState:
        """Build an initial state and check every settled-state invariant."""
        state = cls(
            width=width,
            height=height,
            body=tuple((int(x), int(y)) for x, y in body),
            obstacles=frozenset((int(x), int(y)) for x, y in obstacles),
            food=frozenset((int(x), int(y)) for x, y in food),
            exit_cell=None if exit_cell is None else (int(exit_cell[0]), int(exit_cell[1])),
            target_length=target_length,
            heading=heading,
        )
        state.validate()
        return state

    @property
    def head(self) -> Cell:
        return self.body[0]

    @property
    def tail(self) -> Cell:
        return self.body[-1]

    @property
    def length(self) -> int:
        return len(self.body)

    @property
    def area(self) -> int:
        return self.width * self.height

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def has_goal(self) -> bool:
        """True if the level encodes any goal at all."""
        return bool(self.food) or self.exit_cell is not None or self.target_length is not None

    def goal_satisfied(self) -> bool:
        """All food consumed, head on the exit (if any), length reached (if any)."""
        if self.food:
            return False
        if self.exit_cell is not None and self.head != self.exit_cell:
            return False
        if self.target_length is not None and len(self.body) < self.target_length:
            return False
        return True

    def validate(self) -> None:
        """Raise ``ValueError`` if any settled-state invariant is violated."""
        if self.width < 1 or self.height < 1:
            raise ValueError("grid dimensions must be >= 1")
        if not self.body:
            raise ValueError("snake body must not be empty")
        for cell in self.body:
            if not self.in_bounds(cell):
                raise ValueError(f"snake cell {cell} is outside the grid")
        if len(set(self.body)) != len(self.body):
            raise ValueError("snake body contains duplicate cells")
        for cell in self.obstacles:
            if not self.in_bounds(cell):
                raise ValueError(f"obstacle {cell} is outside the grid")
        overlap = self.obstacles.intersection(self.body)
        if overlap:
            raise ValueError(f"snake overlaps obstacles at {sorted(overlap)}")
        for cell in self.food:
            if not self.in_bounds(cell):
                raise ValueError(f"food {cell} is outside the grid")
            if cell in self.obstacles:
                raise ValueError(f"food {cell} is on an obstacle")
            if cell in self.body:
                raise ValueError(f"food {cell} is under the snake")
        if self.exit_cell is not None:
            if not self.in_bounds(self.exit_cell):
                raise ValueError(f"exit {self.exit_cell} is outside the grid")
            if self.exit_cell in self.obstacles:
                raise ValueError(f"exit {self.exit_cell} is on an obstacle")
        if self.target_length is not None and self.target_length < 1:
            raise ValueError("target_length must be >= 1")
        if self.moves < 0:
            raise ValueError("moves must be >= 0")
