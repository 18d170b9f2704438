from __future__ import annotations
from typing import AbstractSet, Iterable, List, Tuple

from .state import (
    BOARD_SIZE,
    MAX_ROW,
    MIN_ROW,
    Cell,
    Move,
    Orientation,
    PlaceWall,
    PAWN_MOVE_TYPES,
    Wall,
)

# Walls sit on grid intersections and cover two unit edges each.
# Horizontal wall (x, y): blocks stepping between rows y-1 and y in columns x and x+1.
# Vertical wall (x, y): blocks stepping between columns x-1 and x in rows y and y+1.

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL

# (x range, y range) of legal anchors, inclusive
WALL_ANCHOR_BOUNDS = {
    H: ((0, BOARD_SIZE - 2), (MIN_ROW + 1, MAX_ROW)),
    V: ((1, BOARD_SIZE - 1), (MIN_ROW, MAX_ROW - 1)),
}

# Directions: right, left, down (towards row 1), up (towards row 9)
DIRS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, -1), (0, 1))


def wall_blocks(a: Cell, b: Cell, walls: AbstractSet[Wall]) -> bool:
    """True if a placed wall sits on the edge between two adjacent cells."""
    if a.distance(b) != 1:
        raise ValueError(f"cells {a} and {b} are not orthogonally adjacent")
    if a.x == b.x:
        # vertical step: the edge is covered by a horizontal wall anchored on the upper row
        upper = max(a.y, b.y)
        return Wall(a.x, upper, H) in walls or Wall(a.x - 1, upper, H) in walls
    right = max(a.x, b.x)
    return Wall(right, a.y, V) in walls or Wall(right, a.y - 1, V) in walls


def conflicting_walls(candidate: Wall) -> List[Wall]:
    """Every wall that would share an edge with, or cross, the candidate."""
    x, y = candidate.x, candidate.y
    if candidate.orientation is H:
        return [
            Wall(x - 1, y, H),
            Wall(x, y, H),
            Wall(x + 1, y, H),
            Wall(x + 1, y - 1, V),
        ]
    return [
        Wall(x, y - 1, V),
        Wall(x, y, V),
        Wall(x, y + 1, V),
        Wall(x - 1, y + 1, H),
    ]


def overlaps(candidate: Wall, walls: AbstractSet[Wall]) -> bool:
    return any(w in walls for w in conflicting_walls(candidate))


def _is_coord(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def cell_in_bounds(cell: object) -> bool:
    return (
        isinstance(cell, Cell)
        and _is_coord(cell.x)
        and _is_coord(cell.y)
        and cell.in_bounds()
    )


def wall_in_bounds(wall: object) -> bool:
    if not isinstance(wall, Wall) or not (_is_coord(wall.x) and _is_coord(wall.y)):
        return False
    if not isinstance(wall.orientation, Orientation):
        return False
    (x_lo, x_hi), (y_lo, y_hi) = WALL_ANCHOR_BOUNDS[wall.orientation]
    return x_lo <= wall.x <= x_hi and y_lo <= wall.y <= y_hi


def in_bounds(move: Move) -> bool:
    if isinstance(move, PlaceWall):
        return wall_in_bounds(move.wall)
    if isinstance(move, PAWN_MOVE_TYPES):
        return cell_in_bounds(move.to)
    return False


def all_walls() -> Iterable[Wall]:
    """Every in-bounds wall anchor, horizontal before vertical."""
    for orientation, ((x_lo, x_hi), (y_lo, y_hi)) in WALL_ANCHOR_BOUNDS.items():
        for y in range(y_lo, y_hi + 1):
            for x in range(x_lo, x_hi + 1):
                yield Wall(x, y, orientation)


def neighbours(cell: Cell, walls: AbstractSet[Wall]) -> List[Cell]:
    """On-board orthogonal neighbours reachable without crossing a wall."""
    result = []
    for dx, dy in DIRS:
        nxt = cell.offset(dx, dy)
        if nxt.in_bounds() and not wall_blocks(cell, nxt, walls):
            result.append(nxt)
    return result
