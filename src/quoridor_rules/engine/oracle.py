from __future__ import annotations
from collections import deque
from typing import AbstractSet, Callable, Dict, List, Optional

from .state import BOARD_SIZE, BoardState, Cell, Wall
from .geometry import neighbours

# Reachability search used for the anti-stuck rule and by agents that want a route.
# The opponent pawn is ignored: it can always be stepped around or jumped.

CELL_COUNT = BOARD_SIZE * BOARD_SIZE


def _search(
    start: Cell, is_target: Callable[[Cell], bool], walls: AbstractSet[Wall]
) -> Optional[List[Cell]]:
    """Breadth-first search from start; returns the cells of a shortest path
    (start and target included) to the first dequeued target cell, or None."""
    seen = [False] * CELL_COUNT
    parent: Dict[Cell, Cell] = {}
    q = deque([start])
    seen[start.index()] = True
    while q:
        cur = q.popleft()
        if is_target(cur):
            path = [cur]
            while cur in parent:
                cur = parent[cur]
                path.append(cur)
            path.reverse()
            return path
        for nxt in neighbours(cur, walls):
            i = nxt.index()
            if not seen[i]:
                seen[i] = True
                parent[nxt] = cur
                q.append(nxt)
    return None


def connectivity_path(
    player: int, board: BoardState, walls: AbstractSet[Wall] | None = None
) -> Optional[List[Cell]]:
    """Shortest route for `player` to its goal row, or None if walled off.

    `walls` overrides the board's wall set, which lets the validator probe a
    hypothetical placement without touching the board.
    """
    state = board.players[player]
    goal = state.goal_row
    return _search(
        state.pawn,
        lambda c: c.y == goal,
        board.walls if walls is None else walls,
    )


def progress_path(
    player: int, board: BoardState, walls: AbstractSet[Wall] | None = None
) -> Optional[List[Cell]]:
    """Route to the nearest cell one row closer to the goal than the pawn is now."""
    state = board.players[player]
    goal = state.goal_row
    wanted = state.goal_distance() - 1
    if wanted < 0:
        return None
    return _search(
        state.pawn,
        lambda c: abs(c.y - goal) == wanted,
        board.walls if walls is None else walls,
    )


def has_path(
    player: int, board: BoardState, walls: AbstractSet[Wall] | None = None
) -> bool:
    return connectivity_path(player, board, walls) is not None


def path_length(player: int, board: BoardState) -> Optional[int]:
    """Number of steps on a shortest route to the goal row."""
    path = connectivity_path(player, board)
    return None if path is None else len(path) - 1
