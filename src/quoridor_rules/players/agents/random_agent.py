from __future__ import annotations
import random
from typing import Optional
from .base import GameView
from ...engine.state import Move


class RandomAgent:
    name = "Random Bot"
    is_human = False

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def choose_move(self, view: GameView) -> Move:
        moves = list(view.legal_moves())
        if not moves:
            raise RuntimeError("No legal moves available for random agent")
        return self._rng.choice(moves)
