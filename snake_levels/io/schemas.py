"""Arrow schema for batch run logs.

Every batch run, solve or verify, writes one row per level against this
column contract so downstream regression tooling can diff runs.
"""

from __future__ import annotations

import pyarrow as pa

BATCH_SCHEMA_VERSION = 1

BATCH_RUNS_SCHEMA = pa.schema(
    [
        ("schema_version", pa.int64()),
        ("level_id", pa.string()),
        ("level_path", pa.string()),
        ("difficulty", pa.string()),
        ("mode", pa.string()),
        ("status", pa.string()),
        ("moves", pa.int64()),
        ("failed_at", pa.int64()),
        ("reason", pa.string()),
        ("explored", pa.int64()),
        ("elapsed_ms", pa.float64()),
        ("max_depth", pa.int64()),
        ("error", pa.string()),
    ]
)
