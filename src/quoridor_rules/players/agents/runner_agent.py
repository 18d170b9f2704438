from __future__ import annotations
from typing import Optional
from .base import GameView
from ...engine.state import Move
from ...engine import oracle, rules


def progress_move(view: GameView) -> Optional[Move]:
    """Pawn move along the oracle's route to the next row towards the goal.

    Returns None when the route's first cell cannot be entered directly
    (usually because the opponent is standing on it).
    """
    board = view.board
    player = view.current_player()
    path = oracle.progress_path(player, board)
    if not path or len(path) < 2:
        return None
    move = rules.pawn_move_to(board, player, path[1])
    if rules.is_legal(move, player, board):
        return move
    return None


class RunnerAgent:
    """Never places walls; walks the shortest route and jumps when blocked."""

    name = "Runner Bot"
    is_human = False

    def choose_move(self, view: GameView) -> Move:
        move = progress_move(view)
        if move is not None:
            return move
        pawn_moves = list(view.pawn_moves())
        if not pawn_moves:
            raise RuntimeError("No legal pawn moves available for runner agent")
        board = view.board
        player = view.current_player()

        def remaining(m: Move) -> int:
            after = rules.apply_move(m, player, board)
            length = oracle.path_length(player, after)
            return length if length is not None else 10**6

        return min(pawn_moves, key=remaining)
