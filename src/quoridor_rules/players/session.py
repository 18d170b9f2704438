from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Tuple

from ..engine.state import BoardState, Move, PlaceWall, MAX_WALLS_PER_PLAYER
from ..engine import rules
from ..engine.notation import format_move, format_moves, parse_move, split_moves
from ..engine.rules import Legality, Reason

logger = logging.getLogger(__name__)


class IllegalMoveError(ValueError):
    def __init__(self, move: Move, reason: Reason, index: int | None = None):
        where = "" if index is None else f" at position {index + 1}"
        super().__init__(f"Illegal move {format_move(move)}{where}: {reason.value}")
        self.move = move
        self.reason = reason
        self.index = index


class GameSession:
    """Owns one game: the board, whose turn it is, and the move history.

    Every move goes through ``rules.is_legal`` before it is applied, so the
    board always satisfies the reachability invariant.
    """

    def __init__(
        self,
        board: Optional[BoardState] = None,
        walls_per_player: int = MAX_WALLS_PER_PLAYER,
        names: Optional[List[str]] = None,
    ):
        self.board = board if board is not None else BoardState.new_game(walls_per_player)
        self.walls_per_player = walls_per_player
        self.current_player: int = 0
        self.history: List[Tuple[int, Move]] = []
        self._undone: List[Tuple[int, Move]] = []
        self.names: List[str] = names or ["Player 1", "Player 2"]

    @classmethod
    def from_moves(
        cls, tokens: Iterable[str], walls_per_player: int = MAX_WALLS_PER_PLAYER
    ) -> "GameSession":
        """Start a new game and replay a move list, stopping at the first illegal move."""
        session = cls(walls_per_player=walls_per_player)
        for i, token in enumerate(tokens):
            if session.is_over():
                raise ValueError(
                    f"Move {token} at position {i + 1} comes after the game has ended"
                )
            move = parse_move(token, session.board, session.current_player)
            result = session.play(move)
            if not result:
                raise IllegalMoveError(move, result.reason, i)
        return session

    @classmethod
    def load(cls, path: str, walls_per_player: int = MAX_WALLS_PER_PLAYER) -> "GameSession":
        with open(path, "r", encoding="utf-8") as f:
            tokens = split_moves(f.read())
        session = cls.from_moves(tokens, walls_per_player=walls_per_player)
        logger.info("game_loaded path=%s moves=%d", path, len(tokens))
        return session

    def save(self, path: str) -> str:
        line = self.move_list()
        with open(path, "w", encoding="utf-8") as f:
            f.write(line + "\n")
        logger.info("game_saved path=%s moves=%d", path, len(self.history))
        return line

    def move_list(self) -> str:
        return format_moves([m for _, m in self.history])

    @property
    def winner(self) -> Optional[int]:
        return rules.winner(self.board)

    def is_over(self) -> bool:
        return self.winner is not None

    @property
    def turn(self) -> int:
        return len(self.history)

    def legal_moves(self) -> List[Move]:
        return rules.legal_moves(self.board, self.current_player)

    def check(self, move: Move) -> Legality:
        return rules.is_legal(move, self.current_player, self.board)

    def play(self, move: Move) -> Legality:
        """Validate and apply a move for the player to act."""
        if self.is_over():
            raise RuntimeError("Game is already over")
        result = self.check(move)
        if not result:
            logger.info(
                "move_rejected player=%d move=%s reason=%s",
                self.current_player,
                format_move(move),
                result.reason.value,
            )
            return result
        self._apply(move)
        self._undone.clear()
        return result

    def play_token(self, text: str) -> Legality:
        return self.play(parse_move(text, self.board, self.current_player))

    def _apply(self, move: Move) -> None:
        player = self.current_player
        self.board = rules.apply_move(move, player, self.board)
        self.history.append((player, move))
        logger.info("move_played player=%d move=%s turn=%d", player, format_move(move), self.turn)
        if not self.is_over():
            self.current_player = self.board.opponent(player)

    def undo(self) -> bool:
        if not self.history:
            logger.info("undo_refused reason=no_moves")
            return False
        player, move = self.history.pop()
        board = self.board.clone()
        actor = board.players[player]
        if isinstance(move, PlaceWall):
            board.walls.discard(move.wall)
            actor.walls_remaining += 1
        else:
            actor.history.pop()
            actor.pawn = actor.history[-1]
        self.board = board
        self.current_player = player
        self._undone.append((player, move))
        logger.info("move_undone player=%d move=%s", player, format_move(move))
        return True

    def redo(self) -> bool:
        if not self._undone:
            return False
        _, move = self._undone.pop()
        self._apply(move)
        return True

    def snapshot(self, include_legal_moves: bool = True) -> dict:
        """JSON-ready description of the current turn."""
        moves = self.legal_moves() if include_legal_moves and not self.is_over() else []
        snap = describe_board(self.board, self.names)
        snap.update(
            {
                "schema": "quoridor.v1",
                "turn": self.turn,
                "current_player": {
                    "id": self.current_player,
                    "name": self.names[self.current_player],
                },
                "legal_moves": serialize_moves(moves),
            }
        )
        return snap


def serialize_moves(moves: List[Move]) -> List[dict]:
    """Legal moves as `M<idx>` entries; agents answer with the id."""
    return [
        {
            "id": f"M{idx}",
            "action": "place_wall" if isinstance(m, PlaceWall) else "move_pawn",
            "move": format_move(m),
        }
        for idx, m in enumerate(moves)
    ]


def describe_board(board: BoardState, names: Optional[List[str]] = None) -> dict:
    names = names or [f"Player {i + 1}" for i in range(len(board.players))]
    players = []
    for i, p in enumerate(board.players):
        players.append(
            {
                "id": i,
                "name": names[i],
                "pawn": str(p.pawn),
                "goal_row": p.goal_row,
                "walls_remaining": p.walls_remaining,
            }
        )
    winner = rules.winner(board)
    return {
        "players": players,
        "walls": board.to_dict()["walls"],
        "winner": None if winner is None else {"id": winner, "name": names[winner]},
    }
