"""Playback documents: a JSON array of ``{"key": ..., "delay_ms": ...}`` steps.

A bare array of key strings is accepted on read. ``delay_ms`` only matters
to replay tooling and is dropped on parse.
"""

from __future__ import annotations

import json
from pathlib import Path

from snake_levels.config.constants import PLAYBACK_DELAY_MS
from snake_levels.domain.board import Direction, Playback
from snake_levels.errors import MalformedPlayback


def _step_key(raw: object, index: int, path: Path | None) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, dict) and isinstance(raw.get("key"), str):
        return raw["key"]
    raise MalformedPlayback(
        f"Failed to parse playback JSON: step {index + 1} needs a string 'key'", path
    )


def parse_playback(payload: object, *, path: Path | None = None) -> Playback:
    """Convert a decoded playback document into a move sequence."""
    if not isinstance(payload, list):
        raise MalformedPlayback("Failed to parse playback JSON: expected a list of steps", path)
    if not payload:
        raise MalformedPlayback("Playback input file is empty", path)
    moves: list[Direction] = []
    for index, raw in enumerate(payload):
        key = _step_key(raw, index, path)
        try:
            moves.append(Direction.parse(key))
        except ValueError as exc:
            raise MalformedPlayback(
                f"Failed to parse playback step {index + 1}: {exc}", path
            ) from exc
    return tuple(moves)


def load_playback(path: Path) -> Playback:
    """Read and parse a playback file; every failure is a :class:`MalformedPlayback`."""
    path = Path(path)
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedPlayback(f"Failed to read playback file: {exc}", path) from exc
    except UnicodeDecodeError as exc:
        raise MalformedPlayback(f"Failed to decode playback file as UTF-8: {exc}", path) from exc
    try:
        payload = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise MalformedPlayback(f"Failed to parse playback JSON: {exc}", path) from exc
    return parse_playback(payload, path=path)


def playback_to_json(
    playback: Playback, delay_ms: int = PLAYBACK_DELAY_MS
) -> list[dict[str, str | int]]:
    return [{"key": move.key, "delay_ms": delay_ms} for move in playback]


def write_playback(path: Path, playback: Playback, delay_ms: int = PLAYBACK_DELAY_MS) -> Path:
    """Write ``playback`` as pretty JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(playback_to_json(playback, delay_ms), ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return path
