"""Parquet/JSON persistence for batch run results."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import pyarrow as pa
import pyarrow.parquet as pq

from snake_levels.io.paths import batch_runs_path, batch_summary_path
from snake_levels.io.schemas import BATCH_RUNS_SCHEMA, BATCH_SCHEMA_VERSION

if TYPE_CHECKING:
    from snake_levels.simulation.engine import LevelRunResult


def result_rows(results: list[LevelRunResult]) -> dict[str, list[object]]:
    """Columnar view of ``results`` matching :data:`BATCH_RUNS_SCHEMA`."""
    columns: dict[str, list[object]] = {field.name: [] for field in BATCH_RUNS_SCHEMA}
    for result in results:
        columns["schema_version"].append(BATCH_SCHEMA_VERSION)
        columns["level_id"].append(result.level_id)
        columns["level_path"].append(result.level_path)
        columns["difficulty"].append(result.difficulty)
        columns["mode"].append(result.mode.value)
        columns["status"].append(result.status.value)
        columns["moves"].append(result.moves)
        columns["failed_at"].append(result.failed_at)
        columns["reason"].append(result.reason.value if result.reason is not None else None)
        columns["explored"].append(result.explored)
        columns["elapsed_ms"].append(result.elapsed_ms)
        columns["max_depth"].append(result.max_depth)
        columns["error"].append(result.error)
    return columns


def write_batch_runs(results: list[LevelRunResult], out_dir: Path) -> Path:
    """Write one row per level to ``logs/batch_runs.parquet`` under ``out_dir``."""
    path = batch_runs_path(Path(out_dir))
    path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pydict(result_rows(results), schema=BATCH_RUNS_SCHEMA)
    pq.write_table(table, path)
    return path


def write_batch_summary(summary: dict[str, object], out_dir: Path) -> Path:
    """Write the aggregate summary to ``logs/batch_summary.json`` under ``out_dir``."""
    path = batch_summary_path(Path(out_dir))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summary, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
