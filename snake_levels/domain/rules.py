"""Simulation step: the single source of truth for game rules.

``step`` is pure. It classifies one move against a settled state in a fixed
order (first match wins):

1. new head outside the grid        -> FAILED(OUT_OF_BOUNDS)
2. new head on an obstacle          -> FAILED(HIT_OBSTACLE)
3. new head on a non-vacating body  -> FAILED(SELF_COLLISION)
4. build the new body (grow on food, otherwise drop the tail)
5. goal satisfied                   -> SOLVED, else CONTINUING

When ``StepRules.forbid_reverse`` is set, a move opposite to the current
heading is rejected as SELF_COLLISION before rule 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from snake_levels.domain.board import BoardState, Direction, MoveSet


class OutcomeStatus(Enum):
    CONTINUING = "continuing"
    SOLVED = "solved"
    FAILED = "failed"


class FailureReason(Enum):
    """Classified reason a move or a playback failed."""

    OUT_OF_BOUNDS = "out_of_bounds"
    HIT_OBSTACLE = "hit_obstacle"
    SELF_COLLISION = "self_collision"
    GOAL_NOT_REACHED = "goal_not_reached"


@dataclass(frozen=True)
class StepRules:
    """Move vocabulary and reversal policy of the simulation step."""

    move_set: MoveSet = MoveSet.FOUR
    forbid_reverse: bool = False


DEFAULT_RULES = StepRules()


@dataclass(frozen=True)
class StepOutcome:
    """Result of applying one move: new state, or the reason it failed."""

    status: OutcomeStatus
    state: BoardState | None = None
    reason: FailureReason | None = None

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILED

    @property
    def solved(self) -> bool:
        return self.status is OutcomeStatus.SOLVED


def _failed(reason: FailureReason) -> StepOutcome:
    return StepOutcome(status=OutcomeStatus.FAILED, reason=reason)


def step(state: BoardState, move: Direction, rules: StepRules = DEFAULT_RULES) -> StepOutcome:
    """Apply ``move`` to ``state`` and classify the outcome."""
    if move not in rules.move_set.directions:
        raise ValueError(f"move {move.key} is not in the {rules.move_set.value} move set")

    if rules.forbid_reverse and state.heading is not None and move is state.heading.opposite:
        return _failed(FailureReason.SELF_COLLISION)

    body = state.body
    new_head = move.apply(body[0])
    if not state.in_bounds(new_head):
        return _failed(FailureReason.OUT_OF_BOUNDS)
    if new_head in state.obstacles:
        return _failed(FailureReason.HIT_OBSTACLE)

    grows = new_head in state.food
    # The tail vacates this move unless the snake grows.
    blocking = body if grows else body[:-1]
    if new_head in blocking:
        return _failed(FailureReason.SELF_COLLISION)

    if grows:
        new_body = (new_head,) + body
        new_food = state.food - {new_head}
    else:
        new_body = (new_head,) + body[:-1]
        new_food = state.food

    new_state = BoardState(
        width=state.width,
        height=state.height,
        body=new_body,
        obstacles=state.obstacles,
        food=new_food,
        exit_cell=state.exit_cell,
        target_length=state.target_length,
        heading=move,
        moves=state.moves + 1,
    )
    if new_state.goal_satisfied():
        return StepOutcome(status=OutcomeStatus.SOLVED, state=new_state)
    return StepOutcome(status=OutcomeStatus.CONTINUING, state=new_state)
