"""Tests for snake_levels.io.levels module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from snake_levels.domain.board import Direction
from snake_levels.errors import MalformedLevel
from snake_levels.io.levels import load_level, parse_level


def _payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": 4,
        "name": "Corner",
        "difficulty": "easy",
        "gridSize": {"width": 5, "height": 4},
        "snake": [{"x": 1, "y": 1}, {"x": 0, "y": 1}],
        "snakeDirection": "East",
        "obstacles": [{"x": 3, "y": 3}],
        "food": [{"x": 2, "y": 2}],
        "exit": {"x": 4, "y": 0},
        "targetLength": None,
    }
    payload.update(overrides)
    return payload


class TestParseLevel:
    def test_full_document(self) -> None:
        level = parse_level(_payload())
        state = level.initial_state
        assert level.level_id == "4"
        assert level.name == "Corner"
        assert level.difficulty == "easy"
        assert (state.width, state.height) == (5, 4)
        assert state.body == ((1, 1), (0, 1))
        assert state.heading is Direction.RIGHT
        assert state.obstacles == frozenset({(3, 3)})
        assert state.food == frozenset({(2, 2)})
        assert state.exit_cell == (4, 0)
        assert state.target_length is None

    def test_spikes_block_movement_but_stay_apart_from_walls(self) -> None:
        level = parse_level(_payload(spikes=[{"x": 4, "y": 3}]))
        assert level.initial_state.obstacles == frozenset({(3, 3), (4, 3)})
        assert level.spikes == frozenset({(4, 3)})
        assert level.walls == frozenset({(3, 3)})
        assert level.mechanics.has_spikes
        assert level.mechanics.unsupported == ()

    def test_spike_on_obstacle(self) -> None:
        with pytest.raises(MalformedLevel, match="spikes overlap obstacles"):
            parse_level(_payload(spikes=[{"x": 3, "y": 3}]))

    def test_unmodelled_mechanics_are_recorded(self) -> None:
        level = parse_level(
            _payload(
                floatingFood=[{"x": 0, "y": 0}],
                fallingFood=[[0, 3]],
                stones=[{"x": 2, "y": 1}],
            )
        )
        assert level.floating_food == frozenset({(0, 0)})
        assert level.falling_food == frozenset({(0, 3)})
        assert level.stones == frozenset({(2, 1)})
        assert level.mechanics.unsupported == ("floatingFood", "fallingFood", "stones")

    def test_floating_food_counts_as_a_goal(self) -> None:
        level = parse_level(_payload(food=[], exit=None, floatingFood=[{"x": 0, "y": 0}]))
        assert level.mechanics.has_floating_food

    def test_malformed_mechanic_cells(self) -> None:
        with pytest.raises(MalformedLevel, match="stones"):
            parse_level(_payload(stones=[{"x": 1}]))

    def test_pair_cells_and_unknown_keys(self) -> None:
        level = parse_level(
            _payload(snake=[[1, 1]], food=[[2, 2]], theme="forest")
        )
        assert level.initial_state.body == ((1, 1),)

    def test_id_falls_back_to_file_stem(self) -> None:
        payload = _payload()
        del payload["id"]
        level = parse_level(payload, path=Path("levels/easy/017.json"))
        assert level.level_id == "017"

    def test_missing_id_without_path(self) -> None:
        payload = _payload()
        del payload["id"]
        with pytest.raises(MalformedLevel, match="needs an 'id'"):
            parse_level(payload)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"gridSize": None},
            {"gridSize": {"width": "5", "height": 4}},
            {"snake": []},
            {"snake": [{"x": 1}]},
            {"snake": [{"x": 9, "y": 9}]},
            {"food": {"x": 1, "y": 1}},
            {"snakeDirection": "Sideways"},
            {"targetLength": True},
        ],
    )
    def test_malformed(self, overrides: dict[str, object]) -> None:
        with pytest.raises(MalformedLevel):
            parse_level(_payload(**overrides))

    def test_level_without_goal(self) -> None:
        with pytest.raises(MalformedLevel, match="no goal"):
            parse_level(_payload(food=[], exit=None))

    def test_not_an_object(self) -> None:
        with pytest.raises(MalformedLevel):
            parse_level([1, 2, 3])


class TestLoadLevel:
    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "level.json"
        path.write_text(json.dumps(_payload()))
        level = load_level(path)
        assert level.path == path
        assert level.level_id == "4"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MalformedLevel, match="Failed to read level file"):
            load_level(tmp_path / "absent.json")

    def test_non_utf8_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"name": "\xff"}')
        with pytest.raises(MalformedLevel, match="Failed to decode level file as UTF-8"):
            load_level(path)

    def test_invalid_json_mentions_path(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{")
        with pytest.raises(MalformedLevel, match="Failed to parse level JSON") as excinfo:
            load_level(path)
        assert str(path) in str(excinfo.value)
