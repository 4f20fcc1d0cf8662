"""
Type definitions for the arcade checkers engine.

This module provides:
- Enums for sides, ranks and AI difficulty
- Frozen dataclasses for pieces and moves
- Type aliases and board constants shared by every other module
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

# Basic type aliases
Square = Tuple[int, int]  # (row, col), 0..7 each
Direction = Tuple[int, int]  # (d_row, d_col)

BOARD_SIZE: int = 8
SQUARES: int = 32  # playable (dark) squares
ROWS_PER_SIDE: int = 3


class Side(str, Enum):
    """The two players. Black starts on rows 0-2, Red on rows 5-7."""

    BLACK = "black"
    RED = "red"

    @property
    def other(self) -> "Side":
        return Side.RED if self is Side.BLACK else Side.BLACK

    @property
    def sign(self) -> int:
        """Sign used in the numeric board encoding (+ black, - red)."""
        return 1 if self is Side.BLACK else -1

    @property
    def forward(self) -> int:
        """Row delta of a forward step for this side's men."""
        return 1 if self is Side.BLACK else -1

    @property
    def promotion_row(self) -> int:
        """The opponent's back rank, where this side's men are crowned."""
        return BOARD_SIZE - 1 if self is Side.BLACK else 0


class Rank(str, Enum):
    MAN = "man"
    KING = "king"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class Piece:
    owner: Side
    rank: Rank = Rank.MAN

    @property
    def is_king(self) -> bool:
        return self.rank is Rank.KING

    def crowned(self) -> "Piece":
        return Piece(self.owner, Rank.KING)

    @property
    def code(self) -> int:
        """Signed board code: 1/2 for black man/king, -1/-2 for red."""
        return self.owner.sign * (2 if self.is_king else 1)

    @classmethod
    def from_code(cls, code: int) -> Optional["Piece"]:
        if code == 0:
            return None
        owner = Side.BLACK if code > 0 else Side.RED
        rank = Rank.KING if abs(code) == 2 else Rank.MAN
        return cls(owner, rank)

    def to_dict(self) -> Dict[str, str]:
        return {"owner": self.owner.value, "rank": self.rank.value}


@dataclass(frozen=True)
class Move:
    """A single step: a diagonal slide or one jump over an opposing piece."""

    from_sq: Square
    to_sq: Square
    captured: Optional[Square] = None
    promotes: bool = False

    @property
    def is_capture(self) -> bool:
        return self.captured is not None


# A maximal sequence of jumps by one piece; link i's to_sq is link i+1's from_sq.
JumpChain = Tuple[Move, ...]

ALL_DIRECTIONS: List[Direction] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]


def directions_for(piece: Piece) -> List[Direction]:
    """Diagonal directions a piece may move or capture in."""
    if piece.is_king:
        return ALL_DIRECTIONS
    dr = piece.owner.forward
    return [(dr, -1), (dr, 1)]


def on_board(square: Square) -> bool:
    r, c = square
    return 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE


def is_playable(square: Square) -> bool:
    """Dark squares only: (row + col) odd."""
    return on_board(square) and (square[0] + square[1]) % 2 == 1
