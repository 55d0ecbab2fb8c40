"""Search and replay engine: solver, verifier, and batch orchestration."""

from snake_levels.simulation.engine import (
    LevelRunResult,
    RunStatus,
    run_batch,
    run_batch_solve,
    run_batch_verify,
    solve_level,
    summarize,
    verify_level,
)
from snake_levels.simulation.solver import Exhausted, Solution, SolveResult, solve
from snake_levels.simulation.verifier import Failed, Passed, VerificationResult, verify

__all__ = [
    "Exhausted",
    "Failed",
    "LevelRunResult",
    "Passed",
    "RunStatus",
    "Solution",
    "SolveResult",
    "VerificationResult",
    "run_batch",
    "run_batch_solve",
    "run_batch_verify",
    "solve",
    "solve_level",
    "summarize",
    "verify",
    "verify_level",
]
