"""Static level analysis: obstacle layout, density, and goal reachability.

Pattern and density count walls only; spikes are reported as a mechanic.
Reachability runs on the free-cell grid graph (cells that are neither
obstacles nor out of bounds) and ignores the snake's own body, so it is an
optimistic check: an unreachable goal proves the level unsolvable at any
depth, a reachable one proves nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import networkx as nx

from snake_levels.config.constants import WALL_ALIGNMENT_PERCENT
from snake_levels.domain.board import BoardState, Cell, MoveSet
from snake_levels.domain.level import Level, LevelMechanics


class ObstaclePattern(Enum):
    VERTICAL_WALL = "vertical_wall"
    HORIZONTAL_WALL = "horizontal_wall"
    SCATTERED = "scattered"
    NONE = "none"


@dataclass(frozen=True)
class LevelAnalysis:
    """Summary of a level's layout and goal."""

    level_id: str
    mechanics: LevelMechanics
    pattern: ObstaclePattern
    obstacle_density: float
    food_count: int
    grid_area: int
    snake_length: int
    has_exit: bool
    goal_reachable: bool
    unreachable_targets: tuple[Cell, ...]


def detect_obstacle_pattern(obstacles: frozenset[Cell]) -> ObstaclePattern:
    """Classify obstacles as a vertical wall, horizontal wall, or scattered.

    A wall is declared when at least ``WALL_ALIGNMENT_PERCENT`` percent of obstacles
    share one column (vertical, checked first) or one row.
    """
    if not obstacles:
        return ObstaclePattern.NONE
    threshold = len(obstacles) * WALL_ALIGNMENT_PERCENT // 100
    column_counts: dict[int, int] = {}
    row_counts: dict[int, int] = {}
    for x, y in obstacles:
        column_counts[x] = column_counts.get(x, 0) + 1
        row_counts[y] = row_counts.get(y, 0) + 1
    if max(column_counts.values()) >= threshold:
        return ObstaclePattern.VERTICAL_WALL
    if max(row_counts.values()) >= threshold:
        return ObstaclePattern.HORIZONTAL_WALL
    return ObstaclePattern.SCATTERED


def free_cell_graph(state: BoardState, move_set: MoveSet = MoveSet.FOUR) -> nx.Graph:
    """Build the undirected adjacency graph of non-obstacle cells."""
    graph = nx.Graph()
    for x in range(state.width):
        for y in range(state.height):
            cell = (x, y)
            if cell in state.obstacles:
                continue
            graph.add_node(cell)
            for direction in move_set.directions:
                neighbor = direction.apply(cell)
                if state.in_bounds(neighbor) and neighbor not in state.obstacles:
                    graph.add_edge(cell, neighbor)
    return graph


def unreachable_targets(state: BoardState, move_set: MoveSet = MoveSet.FOUR) -> tuple[Cell, ...]:
    """Food cells and exit that no path from the head can ever reach."""
    graph = free_cell_graph(state, move_set)
    reachable = nx.node_connected_component(graph, state.head)
    targets = set(state.food)
    if state.exit_cell is not None:
        targets.add(state.exit_cell)
    return tuple(sorted(targets - reachable))


def analyze_level(level: Level, move_set: MoveSet = MoveSet.FOUR) -> LevelAnalysis:
    """Analyze the level's initial state."""
    state = level.initial_state
    missing = unreachable_targets(state, move_set)
    return LevelAnalysis(
        level_id=level.level_id,
        mechanics=level.mechanics,
        pattern=detect_obstacle_pattern(level.walls),
        obstacle_density=len(level.walls) / state.area,
        food_count=len(state.food) + len(level.floating_food) + len(level.falling_food),
        grid_area=state.area,
        snake_length=state.length,
        has_exit=state.exit_cell is not None,
        goal_reachable=not missing,
        unreachable_targets=missing,
    )
