from __future__ import annotations
from typing import List, Optional, Protocol, Sequence
from ...engine.state import BoardState, Move
from ...engine import rules


class GameView:
    """Read-only adapter given to agents."""

    def __init__(self, board: BoardState, player: int):
        self._board = board
        self._player = player
        self._legal: Optional[List[Move]] = None

    @property
    def board(self) -> BoardState:
        return self._board

    def current_player(self) -> int:
        return self._player

    def legal_moves(self) -> Sequence[Move]:
        if self._legal is None:
            self._legal = rules.legal_moves(self._board, self._player)
        return self._legal

    def pawn_moves(self) -> Sequence[Move]:
        return rules.generate_pawn_moves(self._board, self._player)


class Agent(Protocol):
    name: str
    is_human: bool

    def choose_move(self, view: GameView) -> Move: ...
