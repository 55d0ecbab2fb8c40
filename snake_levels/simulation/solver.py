"""Depth-bounded breadth-first level solver.

Each call owns its frontier and visited set; nothing is shared between
calls, so solves for different levels can run concurrently without locks.
Breadth-first order means the first solving path found is a shortest one.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass

from snake_levels.domain.board import BoardState, Direction, Playback
from snake_levels.domain.fingerprint import StateKey, fingerprint
from snake_levels.domain.rules import DEFAULT_RULES, StepRules, step
from snake_levels.errors import SolveCancelled

logger = logging.getLogger(__name__)

# Parent-pointer chain of moves; sibling nodes share their common prefix.
_PathLink = tuple[Direction, "_PathLink | None"]


@dataclass(frozen=True)
class Solution:
    """A shortest solving playback within the depth bound."""

    playback: Playback
    explored: int
    elapsed_s: float


@dataclass(frozen=True)
class Exhausted:
    """No solution exists within ``max_depth`` moves of distinct states.

    This is not an unsolvability proof; a larger bound may still succeed.
    """

    max_depth: int
    explored: int
    elapsed_s: float


SolveResult = Solution | Exhausted


def _unwind(link: _PathLink | None) -> Playback:
    moves: list[Direction] = []
    while link is not None:
        move, link = link
        moves.append(move)
    moves.reverse()
    return tuple(moves)


def solve(
    initial_state: BoardState,
    max_depth: int,
    *,
    rules: StepRules = DEFAULT_RULES,
    cancel_event: threading.Event | None = None,
) -> SolveResult:
    """Search for a shortest playback reaching the goal in at most ``max_depth`` moves.

    Moves are expanded in the fixed order of ``rules.move_set`` so repeated
    runs return identical playbacks. Setting ``cancel_event`` from another
    thread aborts the search with :class:`SolveCancelled`.
    """
    if isinstance(max_depth, bool) or not isinstance(max_depth, int):
        raise ValueError("max_depth must be an integer")
    if max_depth < 1:
        raise ValueError("max_depth must be >= 1")

    started = time.perf_counter()
    if initial_state.goal_satisfied():
        return Solution(playback=(), explored=0, elapsed_s=time.perf_counter() - started)

    include_heading = rules.forbid_reverse
    directions = rules.move_set.directions
    frontier: deque[tuple[BoardState, _PathLink | None, int]] = deque()
    frontier.append((initial_state, None, 0))
    visited: set[StateKey] = {fingerprint(initial_state, include_heading=include_heading)}
    explored = 0

    while frontier:
        if cancel_event is not None and cancel_event.is_set():
            raise SolveCancelled(explored)
        state, link, depth = frontier.popleft()
        explored += 1
        child_depth = depth + 1
        for move in directions:
            outcome = step(state, move, rules)
            child = outcome.state
            if child is None:  # failed move
                continue
            if outcome.solved:
                playback = _unwind((move, link))
                elapsed = time.perf_counter() - started
                logger.debug(
                    "solved in %d moves after expanding %d nodes (%.3fs)",
                    len(playback),
                    explored,
                    elapsed,
                )
                return Solution(playback=playback, explored=explored, elapsed_s=elapsed)
            # Children at the bound can never be expanded.
            if child_depth >= max_depth:
                continue
            key = fingerprint(child, include_heading=include_heading)
            if key in visited:
                continue
            visited.add(key)
            frontier.append((child, (move, link), child_depth))

    elapsed = time.perf_counter() - started
    logger.debug(
        "exhausted depth %d after expanding %d nodes (%.3fs)", max_depth, explored, elapsed
    )
    return Exhausted(max_depth=max_depth, explored=explored, elapsed_s=elapsed)
