"""Canonical equality keys for search-time state deduplication.

Two states share a key iff they behave identically under every future move
sequence: same ordered body (head first) and same remaining food. Bounds,
obstacles, exit and target length are level-invariant and left out; the
move counter is path history and left out too.
"""

from __future__ import annotations

from typing import TypeAlias

from snake_levels.domain.board import BoardState, Cell, Direction

StateKey: TypeAlias = tuple[tuple[Cell, ...], frozenset[Cell], Direction | None]


def fingerprint(state: BoardState, *, include_heading: bool = False) -> StateKey:
    """Return the dedup key of ``state``.

    ``include_heading`` must be set when the step forbids reversing: the
    heading then changes which moves are legal, so it is part of the
    behaviour. For bodies longer than one cell it is implied by the first
    two segments after any move.
    """
    return (state.body, state.food, state.heading if include_heading else None)
