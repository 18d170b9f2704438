from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, List, Optional

from .state import (
    BoardState,
    Cell,
    DiagonalJump,
    Jump,
    Move,
    PawnMove,
    PlaceWall,
    Step,
    Wall,
)
from .geometry import DIRS, all_walls, in_bounds, overlaps, wall_blocks
from .oracle import has_path

logger = logging.getLogger(__name__)

# Legality checks never raise: every candidate move, however malformed, gets a
# classified outcome. Wall placements are probed on a copy of the wall set.


class Reason(str, Enum):
    OUT_OF_BOUNDS = "OutOfBounds"
    NOT_ADJACENT = "NotAdjacent"
    BLOCKED = "Blocked"
    OCCUPIED = "Occupied"
    NO_WALLS_REMAINING = "NoWallsRemaining"
    WALL_CONFLICT = "WallConflict"
    WOULD_TRAP_PLAYER = "WouldTrapPlayer"


@dataclass(frozen=True)
class Legality:
    legal: bool
    reason: Optional[Reason] = None

    @staticmethod
    def ok() -> "Legality":
        return _LEGAL

    @staticmethod
    def rejected(reason: Reason) -> "Legality":
        return Legality(False, reason)

    def __bool__(self) -> bool:
        return self.legal


_LEGAL = Legality(True)


def _direction(a: Cell, b: Cell) -> tuple[int, int]:
    return (b.x - a.x, b.y - a.y)


def _check_step(to: Cell, player: int, board: BoardState) -> Legality:
    me = board.pawn(player)
    if me.distance(to) != 1:
        return Legality.rejected(Reason.NOT_ADJACENT)
    if wall_blocks(me, to, board.walls):
        return Legality.rejected(Reason.BLOCKED)
    if board.pawn_at(to) is not None:
        return Legality.rejected(Reason.OCCUPIED)
    return Legality.ok()


def _check_jump(to: Cell, player: int, board: BoardState) -> Legality:
    me = board.pawn(player)
    opp = board.pawn(board.opponent(player))
    if me.distance(opp) != 1:
        return Legality.rejected(Reason.NOT_ADJACENT)
    dx, dy = _direction(me, opp)
    if to != opp.offset(dx, dy):
        return Legality.rejected(Reason.NOT_ADJACENT)
    if wall_blocks(me, opp, board.walls) or wall_blocks(opp, to, board.walls):
        return Legality.rejected(Reason.BLOCKED)
    return Legality.ok()


def _check_diagonal_jump(to: Cell, player: int, board: BoardState) -> Legality:
    me = board.pawn(player)
    opp = board.pawn(board.opponent(player))
    if me.distance(opp) != 1:
        return Legality.rejected(Reason.NOT_ADJACENT)
    dx, dy = _direction(me, opp)
    sx, sy = _direction(opp, to)
    # destination must sit beside the opponent, perpendicular to the approach
    if abs(sx) + abs(sy) != 1 or sx * dx + sy * dy != 0:
        return Legality.rejected(Reason.NOT_ADJACENT)
    if wall_blocks(me, opp, board.walls):
        return Legality.rejected(Reason.BLOCKED)
    beyond = opp.offset(dx, dy)
    if beyond.in_bounds() and not wall_blocks(opp, beyond, board.walls):
        # straight jump is open, so the side-step is not available
        return Legality.rejected(Reason.NOT_ADJACENT)
    if wall_blocks(opp, to, board.walls):
        return Legality.rejected(Reason.BLOCKED)
    return Legality.ok()


def _both_players_have_path(board: BoardState, walls: AbstractSet[Wall]) -> bool:
    return all(has_path(p, board, walls) for p in range(len(board.players)))


def _check_wall(wall: Wall, player: int, board: BoardState) -> Legality:
    if board.players[player].walls_remaining <= 0:
        return Legality.rejected(Reason.NO_WALLS_REMAINING)
    if overlaps(wall, board.walls):
        return Legality.rejected(Reason.WALL_CONFLICT)
    probe = set(board.walls)
    probe.add(wall)
    if not _both_players_have_path(board, probe):
        return Legality.rejected(Reason.WOULD_TRAP_PLAYER)
    return Legality.ok()


def is_legal(move: Move, player: int, board: BoardState) -> Legality:
    """Classify `move` by `player` on `board` as legal or illegal with a reason."""
    if not in_bounds(move):
        result = Legality.rejected(Reason.OUT_OF_BOUNDS)
    elif isinstance(move, PlaceWall):
        result = _check_wall(move.wall, player, board)
    elif isinstance(move, Step):
        result = _check_step(move.to, player, board)
    elif isinstance(move, Jump):
        result = _check_jump(move.to, player, board)
    else:
        result = _check_diagonal_jump(move.to, player, board)
    if not result:
        logger.debug("move_rejected player=%d move=%r reason=%s", player, move, result.reason.value)
    return result


def pawn_move_to(board: BoardState, player: int, to: Cell) -> PawnMove:
    """Pick the pawn move variant whose geometry matches a bare destination.

    Two cells away in a straight line is a Jump, one diagonal is a DiagonalJump,
    anything else is a Step (which `is_legal` then classifies).
    """
    me = board.pawn(player)
    dx, dy = _direction(me, to)
    if (abs(dx), abs(dy)) in ((2, 0), (0, 2)):
        return Jump(to)
    if abs(dx) == 1 and abs(dy) == 1:
        return DiagonalJump(to)
    return Step(to)


def generate_pawn_moves(board: BoardState, player: int) -> List[PawnMove]:
    me = board.pawn(player)
    candidates: List[PawnMove] = []
    for dx, dy in DIRS:
        candidates.append(Step(me.offset(dx, dy)))
        candidates.append(Jump(me.offset(2 * dx, 2 * dy)))
    for dx in (-1, 1):
        for dy in (-1, 1):
            candidates.append(DiagonalJump(me.offset(dx, dy)))
    return [m for m in candidates if is_legal(m, player, board)]


def generate_wall_moves(board: BoardState, player: int) -> List[PlaceWall]:
    """Wall placements that keep a path open for both players."""
    if board.players[player].walls_remaining <= 0:
        return []
    moves = []
    for wall in all_walls():
        move = PlaceWall(wall)
        if is_legal(move, player, board):
            moves.append(move)
    return moves


def legal_moves(board: BoardState, player: int) -> List[Move]:
    if winner(board) is not None:
        return []
    return generate_pawn_moves(board, player) + generate_wall_moves(board, player)


def apply_move(move: Move, player: int, board: BoardState) -> BoardState:
    """Return the board after `move`; the move must already be known legal."""
    new_board = board.clone()
    actor = new_board.players[player]
    if isinstance(move, PlaceWall):
        new_board.walls.add(move.wall)
        actor.walls_remaining -= 1
    else:
        actor.pawn = move.to
        actor.history.append(move.to)
    return new_board


def winner(board: BoardState) -> Optional[int]:
    for i, p in enumerate(board.players):
        if p.pawn.y == p.goal_row:
            return i
    return None
