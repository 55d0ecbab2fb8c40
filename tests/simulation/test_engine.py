"""Tests for snake_levels.simulation.engine batch orchestration."""

from __future__ import annotations

import json
from pathlib import Path

import pyarrow.parquet as pq
import pytest

from snake_levels.config.types import BatchConfig, BatchMode, SolverConfig
from snake_levels.domain.board import Direction
from snake_levels.errors import UnsupportedMechanics
from snake_levels.io.levels import parse_level
from snake_levels.io.playback import load_playback, write_playback
from snake_levels.simulation.engine import (
    RunStatus,
    run_batch,
    run_batch_solve,
    run_batch_verify,
    solve_level,
    summarize,
    verify_level,
)
from snake_levels.simulation.solver import Solution
from snake_levels.simulation.verifier import Passed

SOLVABLE = {
    "id": 1,
    "gridSize": {"width": 3, "height": 3},
    "snake": [{"x": 1, "y": 1}],
    "food": [{"x": 1, "y": 2}],
}

WALLED = {
    "id": 2,
    "gridSize": {"width": 3, "height": 3},
    "snake": [{"x": 0, "y": 0}],
    "food": [{"x": 2, "y": 2}],
    "obstacles": [{"x": 1, "y": 2}, {"x": 2, "y": 1}],
}


def _write_level(root: Path, difficulty: str, name: str, payload: object) -> Path:
    path = root / "levels" / difficulty / f"{name}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload)
    return path


def _config(root: Path, **kwargs: object) -> BatchConfig:
    params: dict[str, object] = {
        "levels_root": root / "levels",
        "out_dir": root / "data",
        "solver": SolverConfig(max_depth=20),
    }
    params.update(kwargs)
    return BatchConfig(**params)


class TestPerLevel:
    def test_solve_level(self) -> None:
        level = parse_level(SOLVABLE)
        result = solve_level(level, SolverConfig(max_depth=5))
        assert isinstance(result, Solution)
        assert result.playback == (Direction.UP,)

    def test_verify_level(self) -> None:
        level = parse_level(SOLVABLE)
        assert verify_level(level, (Direction.UP,)) == Passed(moves_applied=1)

    def test_unsupported_mechanics_are_refused(self) -> None:
        level = parse_level({**SOLVABLE, "stones": [{"x": 0, "y": 0}]})
        with pytest.raises(UnsupportedMechanics, match="stones"):
            solve_level(level, SolverConfig(max_depth=5))
        with pytest.raises(UnsupportedMechanics):
            verify_level(level, (Direction.UP,))


class TestBatchSolve:
    def test_solves_and_writes_playbacks(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", SOLVABLE)
        _write_level(tmp_path, "hard", "002", WALLED)
        results = run_batch_solve(_config(tmp_path))

        assert [r.status for r in results] == [RunStatus.SOLVED, RunStatus.EXHAUSTED]
        assert results[0].difficulty == "easy"
        assert results[0].moves == 1
        playback_path = tmp_path / "playbacks" / "easy" / "001.json"
        assert load_playback(playback_path) == (Direction.UP,)
        assert not (tmp_path / "playbacks" / "hard" / "002.json").exists()

    def test_writes_parquet_log_and_summary(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", SOLVABLE)
        _write_level(tmp_path, "medium", "002", WALLED)
        run_batch_solve(_config(tmp_path))

        table = pq.read_table(tmp_path / "data" / "logs" / "batch_runs.parquet")
        assert table.num_rows == 2
        assert {"level_id", "status", "moves", "explored", "elapsed_ms"}.issubset(
            table.column_names
        )
        assert table.column("status").to_pylist() == ["solved", "exhausted"]

        summary = json.loads((tmp_path / "data" / "logs" / "batch_summary.json").read_text())
        assert summary["mode"] == "solve"
        assert summary["succeeded"] == 1
        assert summary["unsucceeded_ids"] == ["2"]

    def test_malformed_level_does_not_abort(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", "{not json")
        _write_level(tmp_path, "easy", "002", SOLVABLE)
        results = run_batch_solve(_config(tmp_path))
        assert results[0].status is RunStatus.MALFORMED_LEVEL
        assert "Failed to parse level JSON" in (results[0].error or "")
        assert results[1].status is RunStatus.SOLVED

    def test_difficulty_filter(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", SOLVABLE)
        _write_level(tmp_path, "hard", "002", WALLED)
        results = run_batch_solve(_config(tmp_path, difficulties=("hard",)))
        assert [r.level_id for r in results] == ["2"]

    def test_skip_writing_playbacks(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", SOLVABLE)
        run_batch_solve(_config(tmp_path, write_playbacks=False))
        assert not (tmp_path / "playbacks").exists()

    def test_multiple_workers_keep_corpus_order(self, tmp_path: Path) -> None:
        for index in range(4):
            _write_level(tmp_path, "easy", f"00{index}", {**SOLVABLE, "id": index})
        results = run_batch_solve(_config(tmp_path, workers=2))
        assert [r.level_id for r in results] == ["0", "1", "2", "3"]
        assert all(r.status is RunStatus.SOLVED for r in results)

    def test_level_timeout_cancels(self, tmp_path: Path) -> None:
        # Long snake on a large grid with an unreachable food: the search space is huge.
        big = {
            "id": 9,
            "gridSize": {"width": 20, "height": 20},
            "snake": [{"x": x, "y": 0} for x in range(8, 0, -1)],
            "food": [{"x": 19, "y": 19}],
            "obstacles": [{"x": 18, "y": 19}, {"x": 19, "y": 18}],
        }
        _write_level(tmp_path, "hard", "009", big)
        config = _config(
            tmp_path, level_timeout_s=0.05, solver=SolverConfig(max_depth=10_000)
        )
        results = run_batch_solve(config)
        assert results[0].status is RunStatus.CANCELLED
        assert results[0].explored is not None

    def test_non_utf8_level_does_not_abort(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "a", SOLVABLE)
        bad = tmp_path / "levels" / "easy" / "b.json"
        bad.write_bytes(b'{"name": "\xff"}')
        results = run_batch_solve(_config(tmp_path))
        assert [r.status for r in results] == [RunStatus.SOLVED, RunStatus.MALFORMED_LEVEL]
        assert (tmp_path / "data" / "logs" / "batch_runs.parquet").exists()

    def test_unsupported_level_is_reported(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", {**SOLVABLE, "floatingFood": [{"x": 0, "y": 0}]})
        results = run_batch_solve(_config(tmp_path))
        assert results[0].status is RunStatus.UNSUPPORTED_LEVEL
        assert "floatingFood" in (results[0].error or "")
        assert not (tmp_path / "playbacks").exists()


class TestBatchVerify:
    def test_pass_fail_and_missing(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", SOLVABLE)
        _write_level(tmp_path, "easy", "002", {**SOLVABLE, "id": 2})
        _write_level(tmp_path, "easy", "003", {**SOLVABLE, "id": 3})
        write_playback(tmp_path / "playbacks" / "easy" / "001.json", (Direction.UP,))
        write_playback(tmp_path / "playbacks" / "easy" / "002.json", (Direction.DOWN,))

        results = run_batch_verify(_config(tmp_path))
        statuses = [r.status for r in results]
        assert statuses == [RunStatus.PASSED, RunStatus.FAILED, RunStatus.MISSING_PLAYBACK]
        assert results[1].failed_at == 1
        assert results[1].reason is not None
        assert results[1].reason.value == "goal_not_reached"

        summary = summarize(results, BatchMode.VERIFY)
        assert summary["total_levels"] == 3
        assert summary["attempted"] == 2
        assert summary["succeeded_ids"] == ["1"]
        assert summary["unsucceeded_ids"] == ["2"]

    def test_malformed_playback(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", SOLVABLE)
        target = tmp_path / "playbacks" / "easy" / "001.json"
        target.parent.mkdir(parents=True)
        target.write_text("[]")
        results = run_batch_verify(_config(tmp_path))
        assert results[0].status is RunStatus.MALFORMED_PLAYBACK
        assert "Playback input file is empty" in (results[0].error or "")

    def test_solve_then_verify_round_trip(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", SOLVABLE)
        _write_level(
            tmp_path,
            "medium",
            "002",
            {
                "id": 2,
                "gridSize": {"width": 5, "height": 5},
                "snake": [{"x": 0, "y": 0}, {"x": 0, "y": 1}],
                "food": [{"x": 2, "y": 0}, {"x": 4, "y": 4}],
                "exit": {"x": 4, "y": 0},
            },
        )
        config = _config(tmp_path, solver=SolverConfig(max_depth=30))
        run_batch(config, BatchMode.SOLVE)
        results = run_batch(config, BatchMode.VERIFY)
        assert all(r.status is RunStatus.PASSED for r in results)

    def test_non_utf8_playback(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", SOLVABLE)
        _write_level(tmp_path, "easy", "002", {**SOLVABLE, "id": 2})
        bad = tmp_path / "playbacks" / "easy" / "001.json"
        bad.parent.mkdir(parents=True)
        bad.write_bytes(b'[{"key": "\xff"}]')
        write_playback(tmp_path / "playbacks" / "easy" / "002.json", (Direction.UP,))
        results = run_batch_verify(_config(tmp_path))
        assert [r.status for r in results] == [RunStatus.MALFORMED_PLAYBACK, RunStatus.PASSED]

    def test_unsupported_level_is_reported(self, tmp_path: Path) -> None:
        _write_level(tmp_path, "easy", "001", {**SOLVABLE, "fallingFood": [[0, 0]]})
        write_playback(tmp_path / "playbacks" / "easy" / "001.json", (Direction.UP,))
        results = run_batch_verify(_config(tmp_path))
        assert results[0].status is RunStatus.UNSUPPORTED_LEVEL
        assert not results[0].ok


class TestBatchConfigValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [{"workers": 0}, {"difficulties": ()}, {"level_timeout_s": 0.0}],
    )
    def test_rejects_invalid(self, tmp_path: Path, kwargs: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            _config(tmp_path, **kwargs)
