"""Centralized domain constants for level solving and verification.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

DEFAULT_MAX_DEPTH = 500
"""Default solver depth bound in moves."""

DEFAULT_DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")
"""Difficulty folders scanned under a levels root, in corpus order."""

PLAYBACK_DELAY_MS = 200
"""Per-step delay written into generated playback files."""

DEFAULT_WORKERS = 1
"""Default batch worker count (1 = in-process, sequential)."""

WALL_ALIGNMENT_PERCENT = 40
"""Percentage of obstacles sharing one row/column to classify the layout as a wall."""

LEVELS_DIR_NAME = "levels"
"""Directory component that holds level files."""

PLAYBACKS_DIR_NAME = "playbacks"
"""Directory component that mirrors LEVELS_DIR_NAME for playback files."""
