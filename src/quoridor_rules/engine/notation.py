"""Algebraic move notation.

Columns are letters a-i, rows are numbers 1-9. A pawn move is written as its
destination cell (``e8``); a wall is its anchor followed by ``h`` or ``v``
(``e3h``, ``d4v``). A move list is whitespace separated tokens.
"""
from __future__ import annotations
import re
from typing import List, Union

from .state import (
    COLUMN_LETTERS,
    PAWN_MOVE_TYPES,
    BoardState,
    Cell,
    Move,
    Orientation,
    PlaceWall,
    Wall,
)
from .rules import pawn_move_to

_TOKEN = re.compile(r"^([a-i])([1-9])([hv]?)$")


class NotationError(ValueError):
    pass


def parse_token(text: str) -> Union[Cell, Wall]:
    """Parse one token into a destination cell or a wall, without a board."""
    token = text.strip().lower()
    m = _TOKEN.match(token)
    if not m:
        raise NotationError(f"Unrecognised move: {text!r}")
    col, row, orient = m.groups()
    x = COLUMN_LETTERS.index(col)
    y = int(row)
    if orient:
        return Wall(x, y, Orientation(orient))
    return Cell(x, y)


def parse_move(text: str, board: BoardState, player: int) -> Move:
    """Parse a token into the move variant it denotes for `player` on `board`."""
    parsed = parse_token(text)
    if isinstance(parsed, Wall):
        return PlaceWall(parsed)
    return pawn_move_to(board, player, parsed)


def format_move(move: Move) -> str:
    """Token for a move; off-board coordinates fall back to `(x,y)` form."""
    if isinstance(move, PlaceWall):
        w = move.wall
        orient = getattr(w.orientation, "value", w.orientation)
        return f"{Cell(w.x, w.y)}{orient}"
    if not isinstance(move, PAWN_MOVE_TYPES):
        return repr(move)
    return str(move.to)


def split_moves(text: str) -> List[str]:
    return text.split()


def format_moves(moves: List[Move]) -> str:
    return " ".join(format_move(m) for m in moves)
