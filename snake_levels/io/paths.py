"""Path construction helpers for the level corpus and batch outputs.

Centralises the directory/file naming conventions: levels live under
``<root>/levels/<difficulty>/*.json`` and their playbacks mirror them under
``<root>/playbacks/<difficulty>/*.json``.
"""

from __future__ import annotations

from pathlib import Path, PurePath

from snake_levels.config.constants import LEVELS_DIR_NAME, PLAYBACKS_DIR_NAME


def resolve_playback_path(level_path: Path, override: Path | None = None) -> Path:
    """Return the playback path for ``level_path``.

    Uses ``override`` when given; otherwise replaces the first ``levels``
    component with ``playbacks``. Raises :exc:`ValueError` when there is no
    ``levels`` component to replace.
    """
    if override is not None:
        return Path(override)
    parts = list(PurePath(level_path).parts)
    if LEVELS_DIR_NAME not in parts:
        raise ValueError(
            f"Unable to infer playback path from {level_path}. Provide --playback."
        )
    parts[parts.index(LEVELS_DIR_NAME)] = PLAYBACKS_DIR_NAME
    return Path(*parts)


def playback_path_for(level_path: Path, levels_root: Path, playbacks_root: Path) -> Path:
    """Mirror ``level_path``'s position under ``levels_root`` into ``playbacks_root``."""
    try:
        relative = Path(level_path).relative_to(levels_root)
    except ValueError as exc:
        raise ValueError(
            f"Level path {level_path} is not under levels root {levels_root}"
        ) from exc
    return Path(playbacks_root) / relative


def discover_levels(levels_root: Path, difficulties: tuple[str, ...]) -> list[Path]:
    """List level files, difficulty by difficulty, sorted by name within each.

    Missing difficulty folders are skipped.
    """
    found: list[Path] = []
    for difficulty in difficulties:
        folder = Path(levels_root) / difficulty
        if not folder.is_dir():
            continue
        found.extend(sorted(p for p in folder.glob("*.json") if p.is_file()))
    return found


def find_levels_root(cwd: Path) -> Path:
    """Locate ``./levels`` or ``./gsnake-levels/levels`` from ``cwd``."""
    direct = cwd / LEVELS_DIR_NAME
    if direct.is_dir():
        return direct
    nested = cwd / "gsnake-levels" / LEVELS_DIR_NAME
    if nested.is_dir():
        return nested
    raise FileNotFoundError(
        "Could not find levels directory. Expected ./levels or "
        f"./gsnake-levels/levels from {cwd}"
    )


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def batch_runs_path(out_dir: Path) -> Path:
    """Return path to the per-level batch run Parquet file."""
    return logs_dir(out_dir) / "batch_runs.parquet"


def batch_summary_path(out_dir: Path) -> Path:
    """Return path to the batch summary JSON file."""
    return logs_dir(out_dir) / "batch_summary.json"
