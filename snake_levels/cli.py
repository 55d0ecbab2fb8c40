"""CLI entrypoint for solving, verifying, and analyzing levels.

This module owns CLI argument parsing and mode dispatch. All domain logic
lives in the extracted modules:

- ``snake_levels.domain``             – board state, step rules, analysis
- ``snake_levels.simulation.solver``  – breadth-first solver
- ``snake_levels.simulation.verifier`` – playback verification
- ``snake_levels.simulation.engine``  – batch orchestration
- ``snake_levels.io``                 – level/playback documents and paths

Exit status: 0 on success, 1 when a level is unsolved or a playback fails,
2 on usage errors or malformed input.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from snake_levels.config.constants import (
    DEFAULT_DIFFICULTIES,
    DEFAULT_MAX_DEPTH,
    DEFAULT_WORKERS,
)
from snake_levels.config.types import BatchConfig, BatchMode, SolverConfig
from snake_levels.domain.analysis import analyze_level
from snake_levels.domain.board import MoveSet
from snake_levels.errors import MalformedLevel, MalformedPlayback, UnsupportedMechanics
from snake_levels.io.levels import load_level
from snake_levels.io.paths import resolve_playback_path
from snake_levels.io.playback import load_playback, write_playback
from snake_levels.simulation.engine import run_batch, solve_level, summarize, verify_level
from snake_levels.simulation.solver import Solution
from snake_levels.simulation.verifier import Passed

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNSOLVED = 1
EXIT_USAGE = 2

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _parse_move_set(raw_move_set: str) -> MoveSet:
    """Parse move-set name from CLI/config."""
    try:
        return MoveSet(raw_move_set)
    except ValueError as exc:
        valid = ", ".join(m.value for m in MoveSet)
        raise ValueError(f"move-set must be one of {valid}") from exc


def _parse_difficulties(raw: str) -> tuple[str, ...]:
    """Parse a comma-delimited difficulty filter, keeping corpus order."""
    requested = {part.strip().lower() for part in raw.split(",") if part.strip()}
    selected = tuple(d for d in DEFAULT_DIFFICULTIES if d in requested)
    if not selected:
        raise ValueError("Filter did not match any known difficulty (easy, medium, hard)")
    return selected


def _coerce_bool(raw: object, key: str) -> bool:
    """Coerce raw value to bool with strict string-check."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_optional_float(raw: object, key: str) -> float | None:
    """Coerce raw value to float or None; rejects booleans."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a float value")
    if isinstance(raw, (int, float, str)):
        return float(raw)
    raise ValueError(f"{key} must be a float value")


def _coerce_str(raw: object, key: str) -> str:
    """Coerce raw value to str; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a string-coercible value")
    if isinstance(raw, (str, Path, int, float)):
        return str(raw)
    raise ValueError(f"{key} must be a string-coercible value")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _solver_config(args: argparse.Namespace, file_cfg: dict[str, object]) -> SolverConfig:
    max_depth = _coerce_int(
        _get_val(args.max_depth, "max_depth", file_cfg, DEFAULT_MAX_DEPTH), "max_depth"
    )
    move_set = _parse_move_set(
        _coerce_str(_get_val(args.move_set, "move_set", file_cfg, MoveSet.FOUR.value), "move_set")
    )
    forbid_reverse = _coerce_bool(
        _get_val(args.forbid_reverse, "forbid_reverse", file_cfg, False), "forbid_reverse"
    )
    return SolverConfig(max_depth=max_depth, move_set=move_set, forbid_reverse=forbid_reverse)


def _load_file_config(parser: argparse.ArgumentParser, path: Path | None) -> dict[str, object]:
    if path is None:
        return {}
    try:
        loaded = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        parser.error(f"Failed to read config file: {path}: {exc}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        parser.error(f"Config file is not valid JSON: {path}: {exc}")
    if not isinstance(loaded, dict):
        parser.error(f"Config file must contain a JSON object: {path}")
    return loaded


def _add_rule_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("-d", "--max-depth", type=int, default=None)
    p.add_argument(
        "--move-set",
        type=str,
        choices=[m.value for m in MoveSet],
        default=None,
    )
    p.add_argument(
        "--forbid-reverse",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Treat a move opposite to the snake's heading as a self collision",
    )
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="snake-levels", description="Solve and verify snake puzzle levels"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("solve", help="Solve a level and write its playback")
    p.set_defaults(func=_handle_solve)
    p.add_argument("level", type=Path)
    p.add_argument("output", type=Path)
    _add_rule_arguments(p)

    p = sub.add_parser("verify", help="Verify a level against its playback")
    p.set_defaults(func=_handle_verify)
    p.add_argument("level", type=Path)
    p.add_argument("--playback", type=Path, default=None)
    _add_rule_arguments(p)

    p = sub.add_parser("batch", help="Solve or verify every level in the corpus")
    p.set_defaults(func=_handle_batch)
    p.add_argument("mode", choices=[m.value for m in BatchMode])
    p.add_argument("--levels-root", type=Path, default=None)
    p.add_argument("--playbacks-root", type=Path, default=None)
    p.add_argument("--out-dir", type=Path, default=None)
    p.add_argument("--difficulties", type=str, default=None)
    p.add_argument("--workers", type=int, default=None)
    p.add_argument("--level-timeout", type=float, default=None)
    p.add_argument(
        "--write-playbacks", action=argparse.BooleanOptionalAction, default=None
    )
    _add_rule_arguments(p)

    p = sub.add_parser("analyze", help="Print static analysis of a level")
    p.set_defaults(func=_handle_analyze)
    p.add_argument("level", type=Path)
    p.add_argument(
        "--move-set",
        type=str,
        choices=[m.value for m in MoveSet],
        default=MoveSet.FOUR.value,
    )
    return parser


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _emit(payload: dict[str, object]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _handle_solve(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    config = _solver_config(args, _load_file_config(parser, args.config))
    level = load_level(args.level)
    result = solve_level(level, config)
    if not isinstance(result, Solution):
        _emit(
            {
                "level": str(args.level),
                "solved": False,
                "max_depth": config.max_depth,
                "explored": result.explored,
                "error": f"No solution found within depth {config.max_depth}",
            }
        )
        return EXIT_UNSOLVED
    write_playback(args.output, result.playback)
    _emit(
        {
            "level": str(args.level),
            "solved": True,
            "moves": len(result.playback),
            "explored": result.explored,
            "elapsed_ms": round(result.elapsed_s * 1000.0, 3),
            "playback": str(args.output),
        }
    )
    return EXIT_OK


def _handle_verify(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    config = _solver_config(args, _load_file_config(parser, args.config))
    try:
        playback_path = resolve_playback_path(args.level, args.playback)
    except ValueError as exc:
        parser.error(str(exc))
    level = load_level(args.level)
    playback = load_playback(playback_path)
    outcome = verify_level(level, playback, config)
    if isinstance(outcome, Passed):
        _emit(
            {
                "level": str(args.level),
                "playback": str(playback_path),
                "passed": True,
                "moves_applied": outcome.moves_applied,
            }
        )
        return EXIT_OK
    _emit(
        {
            "level": str(args.level),
            "playback": str(playback_path),
            "passed": False,
            "move_index": outcome.move_index,
            "reason": outcome.reason.value,
        }
    )
    return EXIT_UNSOLVED


def _handle_batch(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    file_cfg = _load_file_config(parser, args.config)
    levels_root = Path(
        _coerce_str(_get_val(args.levels_root, "levels_root", file_cfg, "levels"), "levels_root")
    )
    raw_playbacks_root = _get_val(args.playbacks_root, "playbacks_root", file_cfg, None)
    playbacks_root = (
        None
        if raw_playbacks_root is None
        else Path(_coerce_str(raw_playbacks_root, "playbacks_root"))
    )
    out_dir = Path(_coerce_str(_get_val(args.out_dir, "out_dir", file_cfg, "data"), "out_dir"))
    difficulties = _parse_difficulties(
        _coerce_str(
            _get_val(args.difficulties, "difficulties", file_cfg, ",".join(DEFAULT_DIFFICULTIES)),
            "difficulties",
        )
    )
    workers = _coerce_int(_get_val(args.workers, "workers", file_cfg, DEFAULT_WORKERS), "workers")
    level_timeout_s = _coerce_optional_float(
        _get_val(args.level_timeout, "level_timeout_s", file_cfg, None), "level_timeout_s"
    )
    write_playbacks = _coerce_bool(
        _get_val(args.write_playbacks, "write_playbacks", file_cfg, True), "write_playbacks"
    )
    config = BatchConfig(
        levels_root=levels_root,
        playbacks_root=playbacks_root,
        out_dir=out_dir,
        difficulties=difficulties,
        workers=workers,
        level_timeout_s=level_timeout_s,
        write_playbacks=write_playbacks,
        solver=_solver_config(args, file_cfg),
    )
    mode = BatchMode(args.mode)
    results = run_batch(config, mode)
    summary = summarize(results, mode)
    _emit(summary)
    return EXIT_OK if summary["unsucceeded"] == 0 else EXIT_UNSOLVED


def _handle_analyze(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    level = load_level(args.level)
    analysis = analyze_level(level, _parse_move_set(args.move_set))
    payload = asdict(analysis)
    payload["pattern"] = analysis.pattern.value
    payload["unreachable_targets"] = [list(cell) for cell in analysis.unreachable_targets]
    _emit(payload)
    return EXIT_OK


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint.

    Supports ``--config path/to/config.json`` on every rule-taking command.
    CLI arguments override config-file values; config-file values override
    built-in defaults.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args, parser)
    except (MalformedLevel, MalformedPlayback, UnsupportedMechanics) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
