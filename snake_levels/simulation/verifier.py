"""Playback verification by replaying moves through the simulation step."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from snake_levels.domain.board import BoardState, Playback
from snake_levels.domain.rules import DEFAULT_RULES, FailureReason, StepRules, step
from snake_levels.errors import MalformedPlayback

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Passed:
    """The playback reached the goal after ``moves_applied`` moves."""

    moves_applied: int

    @property
    def passed(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """Move ``move_index`` (zero-based) failed, or the playback ran out."""

    move_index: int
    reason: FailureReason

    @property
    def passed(self) -> bool:
        return False


VerificationResult = Passed | Failed


def verify(
    initial_state: BoardState,
    playback: Playback,
    *,
    rules: StepRules = DEFAULT_RULES,
) -> VerificationResult:
    """Replay ``playback`` from ``initial_state``.

    Stops at the first failing move, or as soon as the goal is reached (later
    moves are not replayed). A playback that runs out before the goal yields
    ``Failed(len(playback), GOAL_NOT_REACHED)``.
    """
    allowed = rules.move_set.directions
    for index, move in enumerate(playback):
        if move not in allowed:
            raise MalformedPlayback(
                f"step {index + 1} uses {move.key}, "
                f"which is not in the {rules.move_set.value} move set"
            )

    if initial_state.goal_satisfied():
        return Passed(moves_applied=0)

    state = initial_state
    for index, move in enumerate(playback):
        outcome = step(state, move, rules)
        if outcome.reason is not None:
            logger.debug("move %d (%s) failed: %s", index, move.key, outcome.reason.value)
            return Failed(move_index=index, reason=outcome.reason)
        if outcome.solved:
            return Passed(moves_applied=index + 1)
        if outcome.state is None:
            raise RuntimeError(f"step returned no successor state for move {index}")
        state = outcome.state

    return Failed(move_index=len(playback), reason=FailureReason.GOAL_NOT_REACHED)
