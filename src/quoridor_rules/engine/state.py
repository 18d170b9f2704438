from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Set, Tuple, Union

BOARD_SIZE = 9
MIN_ROW = 1
MAX_ROW = BOARD_SIZE
MAX_WALLS_PER_PLAYER = 10  # canonical rules; GameSession may override

COLUMN_LETTERS = "abcdefghi"


class Orientation(str, Enum):
    HORIZONTAL = "h"
    VERTICAL = "v"


@dataclass(frozen=True)
class Cell:
    x: int  # column, 0..8 (a..i)
    y: int  # row, 1..9

    def in_bounds(self) -> bool:
        return 0 <= self.x < BOARD_SIZE and MIN_ROW <= self.y <= MAX_ROW

    def offset(self, dx: int, dy: int) -> "Cell":
        return Cell(self.x + dx, self.y + dy)

    def distance(self, other: "Cell") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def index(self) -> int:
        """Flat index into an 81-slot array, valid only for in-bounds cells."""
        return (self.y - MIN_ROW) * BOARD_SIZE + self.x

    def __str__(self) -> str:
        if 0 <= self.x < BOARD_SIZE:
            return f"{COLUMN_LETTERS[self.x]}{self.y}"
        return f"({self.x},{self.y})"


@dataclass(frozen=True)
class Wall:
    x: int  # anchor intersection
    y: int
    orientation: Orientation  # HORIZONTAL blocks rows y-1/y, VERTICAL blocks cols x-1/x

    @property
    def horizontal(self) -> bool:
        return self.orientation is Orientation.HORIZONTAL

    def key(self) -> Tuple[int, int, str]:
        return (self.x, self.y, self.orientation.value)


# Moves form a closed set of variants; rules dispatch on the concrete type.


@dataclass(frozen=True)
class Step:
    to: Cell


@dataclass(frozen=True)
class Jump:
    to: Cell


@dataclass(frozen=True)
class DiagonalJump:
    to: Cell


@dataclass(frozen=True)
class PlaceWall:
    wall: Wall


PawnMove = Union[Step, Jump, DiagonalJump]
Move = Union[Step, Jump, DiagonalJump, PlaceWall]
PAWN_MOVE_TYPES = (Step, Jump, DiagonalJump)


@dataclass
class PlayerState:
    pawn: Cell
    goal_row: int
    walls_remaining: int = MAX_WALLS_PER_PLAYER
    history: List[Cell] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.pawn)

    def goal_distance(self) -> int:
        return abs(self.pawn.y - self.goal_row)

    def clone(self) -> "PlayerState":
        return PlayerState(
            pawn=self.pawn,
            goal_row=self.goal_row,
            walls_remaining=self.walls_remaining,
            history=list(self.history),
        )


@dataclass
class BoardState:
    players: List[PlayerState]
    walls: Set[Wall] = field(default_factory=set)

    @staticmethod
    def new_game(walls_per_player: int = MAX_WALLS_PER_PLAYER) -> "BoardState":
        # Player A starts on e9 heading for row 1, player B on e1 heading for row 9.
        mid = BOARD_SIZE // 2
        return BoardState(
            players=[
                PlayerState(Cell(mid, MAX_ROW), MIN_ROW, walls_per_player),
                PlayerState(Cell(mid, MIN_ROW), MAX_ROW, walls_per_player),
            ]
        )

    def clone(self) -> "BoardState":
        return BoardState(
            players=[p.clone() for p in self.players],
            walls=set(self.walls),
        )

    def pawn(self, player: int) -> Cell:
        return self.players[player].pawn

    def opponent(self, player: int) -> int:
        return 1 - player

    def pawn_at(self, cell: Cell) -> int | None:
        for i, p in enumerate(self.players):
            if p.pawn == cell:
                return i
        return None

    def to_dict(self) -> dict:
        return {
            "players": [
                {
                    "pawn": str(p.pawn),
                    "goal_row": p.goal_row,
                    "walls_remaining": p.walls_remaining,
                }
                for p in self.players
            ],
            "walls": [
                {"x": w.x, "y": w.y, "orientation": w.orientation.value}
                for w in sorted(self.walls, key=Wall.key)
            ],
        }
