"""Level document parsing.

Levels use the gSnake JSON layout::

    {"id": 1, "name": "...", "difficulty": "easy",
     "gridSize": {"width": 5, "height": 5},
     "snake": [{"x": 0, "y": 0}], "snakeDirection": "East",
     "obstacles": [...], "spikes": [...], "food": [...],
     "exit": {"x": 4, "y": 0}, "targetLength": null}

Spikes are static hazards: the step function treats them as obstacles,
but the level keeps them apart so layout analysis only sees walls.
``floatingFood``, ``fallingFood`` and ``stones`` are recorded on the level
without step rules; solving or verifying such a level is refused. Other
unknown keys are ignored. Cells may also be given as ``[x, y]`` pairs.
"""

from __future__ import annotations

import json
from pathlib import Path

from snake_levels.domain.board import BoardState, Cell, Direction
from snake_levels.domain.level import Level
from snake_levels.errors import MalformedLevel


def _require_int(raw: object, field: str, path: Path | None) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise MalformedLevel(f"{field} must be an integer, got {raw!r}", path)
    return raw


def _parse_cell(raw: object, field: str, path: Path | None) -> Cell:
    if isinstance(raw, dict):
        if "x" not in raw or "y" not in raw:
            raise MalformedLevel(f"{field} entries need 'x' and 'y'", path)
        return (
            _require_int(raw["x"], f"{field}.x", path),
            _require_int(raw["y"], f"{field}.y", path),
        )
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return (
            _require_int(raw[0], f"{field}[0]", path),
            _require_int(raw[1], f"{field}[1]", path),
        )
    raise MalformedLevel(f"{field} entries must be {{x, y}} objects or [x, y] pairs", path)


def _parse_cells(payload: dict[str, object], key: str, path: Path | None) -> list[Cell]:
    raw = payload.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise MalformedLevel(f"{key} must be a list", path)
    return [_parse_cell(item, key, path) for item in raw]


def parse_level(payload: object, *, path: Path | None = None) -> Level:
    """Build a :class:`Level` from a decoded JSON document."""
    if not isinstance(payload, dict):
        raise MalformedLevel("level document must be a JSON object", path)

    grid = payload.get("gridSize")
    if not isinstance(grid, dict):
        raise MalformedLevel("gridSize is required", path)
    width = _require_int(grid.get("width"), "gridSize.width", path)
    height = _require_int(grid.get("height"), "gridSize.height", path)

    body = _parse_cells(payload, "snake", path)
    if not body:
        raise MalformedLevel("snake must contain at least one cell", path)
    walls = _parse_cells(payload, "obstacles", path)
    spikes = frozenset(_parse_cells(payload, "spikes", path))
    overlap = spikes.intersection(walls)
    if overlap:
        raise MalformedLevel(f"spikes overlap obstacles at {sorted(overlap)}", path)
    food = _parse_cells(payload, "food", path)
    floating_food = frozenset(_parse_cells(payload, "floatingFood", path))
    falling_food = frozenset(_parse_cells(payload, "fallingFood", path))
    stones = frozenset(_parse_cells(payload, "stones", path))

    raw_exit = payload.get("exit")
    exit_cell = None if raw_exit is None else _parse_cell(raw_exit, "exit", path)

    raw_target = payload.get("targetLength")
    target_length = None if raw_target is None else _require_int(raw_target, "targetLength", path)

    raw_heading = payload.get("snakeDirection")
    heading: Direction | None = None
    if raw_heading is not None:
        if not isinstance(raw_heading, str):
            raise MalformedLevel("snakeDirection must be a string", path)
        try:
            heading = Direction.parse(raw_heading)
        except ValueError as exc:
            raise MalformedLevel(f"snakeDirection: {exc}", path) from exc

    try:
        state = BoardState.create(
            width=width,
            height=height,
            body=body,
            obstacles=[*walls, *spikes],
            food=food,
            exit_cell=exit_cell,
            target_length=target_length,
            heading=heading,
        )
    except ValueError as exc:
        raise MalformedLevel(str(exc), path) from exc
    if not state.has_goal() and not floating_food and not falling_food:
        raise MalformedLevel("level has no goal (no food, exit, or targetLength)", path)

    raw_id = payload.get("id")
    if raw_id is not None and not isinstance(raw_id, bool) and isinstance(raw_id, (int, str)):
        level_id = str(raw_id)
    elif path is not None:
        level_id = path.stem
    else:
        raise MalformedLevel("level needs an 'id' when not loaded from a file", path)

    name = payload.get("name")
    difficulty = payload.get("difficulty")
    return Level(
        level_id=level_id,
        initial_state=state,
        name=name if isinstance(name, str) else "",
        difficulty=difficulty if isinstance(difficulty, str) else None,
        path=path,
        spikes=spikes,
        floating_food=floating_food,
        falling_food=falling_food,
        stones=stones,
    )


def load_level(path: Path) -> Level:
    """Read and parse a level file; every failure is a :class:`MalformedLevel`."""
    path = Path(path)
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedLevel(f"Failed to read level file: {exc}", path) from exc
    except UnicodeDecodeError as exc:
        raise MalformedLevel(f"Failed to decode level file as UTF-8: {exc}", path) from exc
    try:
        payload = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise MalformedLevel(f"Failed to parse level JSON: {exc}", path) from exc
    return parse_level(payload, path=path)
