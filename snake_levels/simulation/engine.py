"""Batch orchestration: solve or verify every level of a corpus.

Per-level work is independent and side-effect free, so levels fan out over
a process pool with no shared state. Results come back in corpus order; the
parent process writes playbacks and the Parquet run log.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from snake_levels.config.types import BatchConfig, BatchMode, SolverConfig
from snake_levels.domain.board import Playback
from snake_levels.domain.level import Level
from snake_levels.domain.rules import FailureReason
from snake_levels.errors import (
    MalformedLevel,
    MalformedPlayback,
    SolveCancelled,
    UnsupportedMechanics,
)
from snake_levels.io.levels import load_level
from snake_levels.io.paths import discover_levels, playback_path_for
from snake_levels.io.playback import load_playback, write_playback
from snake_levels.simulation.persistence import write_batch_runs, write_batch_summary
from snake_levels.simulation.solver import SolveResult, Solution, solve
from snake_levels.simulation.verifier import Passed, VerificationResult, verify

logger = logging.getLogger(__name__)


class RunStatus(Enum):
    """Per-level batch outcome."""

    SOLVED = "solved"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"
    PASSED = "passed"
    FAILED = "failed"
    MALFORMED_LEVEL = "malformed_level"
    UNSUPPORTED_LEVEL = "unsupported_level"
    MALFORMED_PLAYBACK = "malformed_playback"
    MISSING_PLAYBACK = "missing_playback"


_SUCCESS = {RunStatus.SOLVED, RunStatus.PASSED}


@dataclass(frozen=True)
class LevelRunResult:
    """Outcome of one level in a batch run."""

    level_id: str
    level_path: str
    difficulty: str | None
    mode: BatchMode
    status: RunStatus
    moves: int | None = None
    failed_at: int | None = None
    reason: FailureReason | None = None
    explored: int | None = None
    elapsed_ms: float = 0.0
    max_depth: int | None = None
    error: str | None = None
    playback: Playback | None = None

    @property
    def ok(self) -> bool:
        return self.status in _SUCCESS


# ---------------------------------------------------------------------------
# Per-level API
# ---------------------------------------------------------------------------


def _require_supported(level: Level) -> None:
    unsupported = level.mechanics.unsupported
    if unsupported:
        raise UnsupportedMechanics(level.level_id, unsupported)


def solve_level(
    level: Level,
    config: SolverConfig = SolverConfig(),
    *,
    cancel_event: threading.Event | None = None,
) -> SolveResult:
    """Solve one level under ``config``'s depth bound and step rules.

    Raises :class:`UnsupportedMechanics` for levels whose floating food,
    falling food or stones the step function cannot simulate.
    """
    _require_supported(level)
    return solve(
        level.initial_state,
        config.max_depth,
        rules=config.rules,
        cancel_event=cancel_event,
    )


def verify_level(
    level: Level, playback: Playback, config: SolverConfig = SolverConfig()
) -> VerificationResult:
    """Replay ``playback`` against one level under ``config``'s step rules."""
    _require_supported(level)
    return verify(level.initial_state, playback, rules=config.rules)


def _difficulty_of(level_path: Path, difficulties: tuple[str, ...]) -> str | None:
    folder = level_path.parent.name
    return folder if folder in difficulties else None


def _solve_task(
    level_path: Path,
    config: SolverConfig,
    difficulties: tuple[str, ...],
    timeout_s: float | None,
) -> LevelRunResult:
    started = time.perf_counter()
    difficulty = _difficulty_of(level_path, difficulties)
    try:
        level = load_level(level_path)
    except MalformedLevel as exc:
        return LevelRunResult(
            level_id=level_path.stem,
            level_path=str(level_path),
            difficulty=difficulty,
            mode=BatchMode.SOLVE,
            status=RunStatus.MALFORMED_LEVEL,
            max_depth=config.max_depth,
            error=str(exc),
        )
    difficulty = difficulty or level.difficulty
    try:
        _require_supported(level)
    except UnsupportedMechanics as exc:
        return LevelRunResult(
            level_id=level.level_id,
            level_path=str(level_path),
            difficulty=difficulty,
            mode=BatchMode.SOLVE,
            status=RunStatus.UNSUPPORTED_LEVEL,
            max_depth=config.max_depth,
            error=str(exc),
        )

    cancel_event = threading.Event()
    timer = threading.Timer(timeout_s, cancel_event.set) if timeout_s is not None else None
    if timer is not None:
        timer.daemon = True
        timer.start()
    try:
        result = solve_level(level, config, cancel_event=cancel_event)
    except SolveCancelled as exc:
        return LevelRunResult(
            level_id=level.level_id,
            level_path=str(level_path),
            difficulty=difficulty,
            mode=BatchMode.SOLVE,
            status=RunStatus.CANCELLED,
            explored=exc.explored,
            elapsed_ms=(time.perf_counter() - started) * 1000.0,
            max_depth=config.max_depth,
            error=f"Solve cancelled after {timeout_s}s",
        )
    finally:
        if timer is not None:
            timer.cancel()

    elapsed_ms = (time.perf_counter() - started) * 1000.0
    if isinstance(result, Solution):
        return LevelRunResult(
            level_id=level.level_id,
            level_path=str(level_path),
            difficulty=difficulty,
            mode=BatchMode.SOLVE,
            status=RunStatus.SOLVED,
            moves=len(result.playback),
            explored=result.explored,
            elapsed_ms=elapsed_ms,
            max_depth=config.max_depth,
            playback=result.playback,
        )
    return LevelRunResult(
        level_id=level.level_id,
        level_path=str(level_path),
        difficulty=difficulty,
        mode=BatchMode.SOLVE,
        status=RunStatus.EXHAUSTED,
        explored=result.explored,
        elapsed_ms=elapsed_ms,
        max_depth=config.max_depth,
        error=f"No solution found within depth {config.max_depth}",
    )


def _verify_task(
    level_path: Path,
    playback_path: Path,
    config: SolverConfig,
    difficulties: tuple[str, ...],
) -> LevelRunResult:
    started = time.perf_counter()
    difficulty = _difficulty_of(level_path, difficulties)

    def _rejected(status: RunStatus, level_id: str, exc: Exception) -> LevelRunResult:
        return LevelRunResult(
            level_id=level_id,
            level_path=str(level_path),
            difficulty=difficulty,
            mode=BatchMode.VERIFY,
            status=status,
            error=str(exc),
        )

    try:
        level = load_level(level_path)
    except MalformedLevel as exc:
        return _rejected(RunStatus.MALFORMED_LEVEL, level_path.stem, exc)
    difficulty = difficulty or level.difficulty
    try:
        _require_supported(level)
    except UnsupportedMechanics as exc:
        return _rejected(RunStatus.UNSUPPORTED_LEVEL, level.level_id, exc)
    if not playback_path.exists():
        return LevelRunResult(
            level_id=level.level_id,
            level_path=str(level_path),
            difficulty=difficulty,
            mode=BatchMode.VERIFY,
            status=RunStatus.MISSING_PLAYBACK,
            error=f"Playback not found: {playback_path}",
        )
    try:
        playback = load_playback(playback_path)
        outcome = verify_level(level, playback, config)
    except MalformedPlayback as exc:
        return _rejected(RunStatus.MALFORMED_PLAYBACK, level.level_id, exc)

    elapsed_ms = (time.perf_counter() - started) * 1000.0
    if isinstance(outcome, Passed):
        return LevelRunResult(
            level_id=level.level_id,
            level_path=str(level_path),
            difficulty=difficulty,
            mode=BatchMode.VERIFY,
            status=RunStatus.PASSED,
            moves=outcome.moves_applied,
            elapsed_ms=elapsed_ms,
        )
    return LevelRunResult(
        level_id=level.level_id,
        level_path=str(level_path),
        difficulty=difficulty,
        mode=BatchMode.VERIFY,
        status=RunStatus.FAILED,
        moves=len(playback),
        failed_at=outcome.move_index,
        reason=outcome.reason,
        elapsed_ms=elapsed_ms,
        error=f"Playback failed at move {outcome.move_index}: {outcome.reason.value}",
    )


# ---------------------------------------------------------------------------
# Batch runs
# ---------------------------------------------------------------------------


def _run_tasks(
    task: Callable[..., LevelRunResult], arg_lists: list[tuple[object, ...]], workers: int
) -> list[LevelRunResult]:
    """Run ``task`` over ``arg_lists``, in order, in-process or on a process pool."""
    if workers == 1 or len(arg_lists) <= 1:
        return [task(*args) for args in arg_lists]
    with ProcessPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(task, *args) for args in arg_lists]
        return [future.result() for future in futures]


def summarize(results: list[LevelRunResult], mode: BatchMode) -> dict[str, object]:
    """Aggregate per-level results into pass/fail counts and id lists."""
    counts = {status.value: 0 for status in RunStatus}
    for result in results:
        counts[result.status.value] += 1
    attempted = [r for r in results if r.status is not RunStatus.MISSING_PLAYBACK]
    return {
        "mode": mode.value,
        "total_levels": len(results),
        "attempted": len(attempted),
        "succeeded": sum(1 for r in attempted if r.ok),
        "unsucceeded": sum(1 for r in attempted if not r.ok),
        "status_counts": counts,
        "succeeded_ids": [r.level_id for r in attempted if r.ok],
        "unsucceeded_ids": [r.level_id for r in attempted if not r.ok],
        "elapsed_ms_total": sum(r.elapsed_ms for r in results),
    }


def _log_failures(results: list[LevelRunResult]) -> None:
    for result in results:
        if not result.ok and result.status is not RunStatus.MISSING_PLAYBACK:
            logger.warning(
                "%s %s: %s", result.status.value, result.level_path, result.error or "no detail"
            )


def run_batch_solve(config: BatchConfig) -> list[LevelRunResult]:
    """Solve every level under ``config.levels_root`` and persist results.

    Solved playbacks are written under the playbacks root when
    ``config.write_playbacks`` is set. A level that fails to load, exhausts
    its depth bound, or runs past ``level_timeout_s`` is reported without
    aborting the batch.
    """
    level_paths = discover_levels(config.levels_root, config.difficulties)
    logger.info("solving %d levels with %d worker(s)", len(level_paths), config.workers)
    results = _run_tasks(
        _solve_task,
        [
            (path, config.solver, config.difficulties, config.level_timeout_s)
            for path in level_paths
        ],
        config.workers,
    )

    if config.write_playbacks:
        playbacks_root = config.resolved_playbacks_root()
        for path, result in zip(level_paths, results, strict=True):
            if result.playback is None:
                continue
            target = playback_path_for(path, config.levels_root, playbacks_root)
            write_playback(target, result.playback)
            logger.info("solved %s in %d moves", path, len(result.playback))

    _log_failures(results)
    write_batch_runs(results, config.out_dir)
    write_batch_summary(summarize(results, BatchMode.SOLVE), config.out_dir)
    return results


def run_batch_verify(config: BatchConfig) -> list[LevelRunResult]:
    """Verify every level that has a playback and persist results.

    Levels without a playback file are reported as ``missing_playback`` and
    excluded from the pass/fail tallies.
    """
    level_paths = discover_levels(config.levels_root, config.difficulties)
    playbacks_root = config.resolved_playbacks_root()
    logger.info("verifying %d levels with %d worker(s)", len(level_paths), config.workers)
    results = _run_tasks(
        _verify_task,
        [
            (
                path,
                playback_path_for(path, config.levels_root, playbacks_root),
                config.solver,
                config.difficulties,
            )
            for path in level_paths
        ],
        config.workers,
    )
    _log_failures(results)
    write_batch_runs(results, config.out_dir)
    write_batch_summary(summarize(results, BatchMode.VERIFY), config.out_dir)
    return results


def run_batch(config: BatchConfig, mode: BatchMode) -> list[LevelRunResult]:
    if mode is BatchMode.SOLVE:
        return run_batch_solve(config)
    return run_batch_verify(config)
