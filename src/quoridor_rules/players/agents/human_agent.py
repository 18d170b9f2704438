from __future__ import annotations
from typing import Optional
from .base import GameView
from ...engine.state import Move


class HumanAgent:
    """Plays whatever move the console hands it; legality is the session's job."""

    is_human = True

    def __init__(self, name: str = "Human"):
        self.name = name
        self._pending: Optional[Move] = None

    def set_pending(self, move: Move) -> None:
        self._pending = move

    def choose_move(self, view: GameView) -> Move:
        if self._pending is None:
            raise RuntimeError(f"No move pending for {self.name}")
        move, self._pending = self._pending, None
        return move
