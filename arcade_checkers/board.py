"""
Immutable 8x8 board model.

The grid is a read-only numpy int8 array using the signed encoding
0 empty, +1/+2 black man/king, -1/-2 red man/king. Every "mutation"
returns a fresh Board; nothing here validates moves.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from .types import (
    BOARD_SIZE,
    ROWS_PER_SIDE,
    SQUARES,
    Move,
    Piece,
    Rank,
    Side,
    Square,
    is_playable,
    on_board,
)

# -----------------------------
# Square numbering (1..32 dark squares, row-major)
# -----------------------------
_sq_of: List[Optional[Square]] = [None] * (SQUARES + 1)
idx_map: Dict[Square, int] = {}


def _build_mappings() -> None:
    i: int = 1
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            if (r + c) % 2 == 1:
                _sq_of[i] = (r, c)
                idx_map[(r, c)] = i
                i += 1


_build_mappings()


def index_to_square(i: int) -> Optional[Square]:
    if 1 <= i <= SQUARES:
        return _sq_of[i]
    return None


def square_to_index(square: Square) -> Optional[int]:
    return idx_map.get(square)


class Board:
    """Immutable board value; equal boards hash equally."""

    __slots__ = ("_grid",)

    def __init__(self, grid: Optional[np.ndarray] = None) -> None:
        if grid is None:
            arr = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        else:
            arr = np.array(grid, dtype=np.int8, copy=True)
            if arr.shape != (BOARD_SIZE, BOARD_SIZE):
                raise ValueError(f"Board grid must be {BOARD_SIZE}x{BOARD_SIZE}, got {arr.shape}")
            if np.any(np.abs(arr) > 2):
                raise ValueError("Board codes must be in -2..2")
            rows, cols = np.nonzero(arr)
            for r, c in zip(rows.tolist(), cols.tolist()):
                if (r + c) % 2 == 0:
                    raise ValueError(f"Piece on non-playable square {(r, c)}")
        arr.flags.writeable = False
        self._grid = arr

    # --- construction ---
    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def from_pieces(cls, pieces: Mapping[Square, Piece]) -> "Board":
        grid = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        for (r, c), piece in pieces.items():
            if not on_board((r, c)):
                raise ValueError(f"Square {(r, c)} is off the board")
            grid[r, c] = piece.code
        return cls(grid)

    @classmethod
    def from_rows(cls, rows: List[List[Optional[Mapping[str, str]]]]) -> "Board":
        """Inverse of to_rows(): 8x8 nested list of nullable {owner, rank}."""
        try:
            shaped = len(rows) == BOARD_SIZE and all(len(row) == BOARD_SIZE for row in rows)
        except TypeError as e:
            raise ValueError("Board rows must be 8x8") from e
        if not shaped:
            raise ValueError("Board rows must be 8x8")
        pieces: Dict[Square, Piece] = {}
        for r, row in enumerate(rows):
            for c, cell in enumerate(row):
                if cell is None:
                    continue
                try:
                    pieces[(r, c)] = Piece(Side(cell["owner"]), Rank(cell.get("rank", "man")))
                except (KeyError, TypeError, ValueError, AttributeError) as e:
                    raise ValueError(f"Bad cell at {(r, c)}: {cell!r}") from e
        return cls.from_pieces(pieces)

    # --- queries ---
    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the underlying codes."""
        return self._grid

    def __getitem__(self, square: Square) -> Optional[Piece]:
        return piece_at(self, square)

    def pieces(self, owner: Optional[Side] = None) -> Iterator[Tuple[Square, Piece]]:
        """Yield (square, piece) in row-major order, optionally for one side."""
        if owner is None:
            mask = self._grid != 0
        else:
            mask = np.sign(self._grid) == owner.sign
        rows, cols = np.nonzero(mask)
        for r, c in zip(rows.tolist(), cols.tolist()):
            yield (r, c), Piece.from_code(int(self._grid[r, c]))  # type: ignore[misc]

    def to_rows(self) -> List[List[Optional[Dict[str, str]]]]:
        out: List[List[Optional[Dict[str, str]]]] = []
        for r in range(BOARD_SIZE):
            row: List[Optional[Dict[str, str]]] = []
            for c in range(BOARD_SIZE):
                p = Piece.from_code(int(self._grid[r, c]))
                row.append(p.to_dict() if p else None)
            out.append(row)
        return out

    def copy_grid(self) -> np.ndarray:
        return self._grid.copy()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self._grid, other._grid))

    def __hash__(self) -> int:
        return hash(self._grid.tobytes())

    def __repr__(self) -> str:
        return f"Board(black={count_pieces(self, Side.BLACK)}, red={count_pieces(self, Side.RED)})"

    def __str__(self) -> str:
        return render_board(self)


# -----------------------------
# Functional API
# -----------------------------
def initial_board() -> Board:
    """Black men on rows 0..2, Red men on rows 5..7, dark squares only."""
    grid = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            if not is_playable((r, c)):
                continue
            if r < ROWS_PER_SIDE:
                grid[r, c] = Side.BLACK.sign
            elif r >= BOARD_SIZE - ROWS_PER_SIDE:
                grid[r, c] = Side.RED.sign
    return Board(grid)


def piece_at(board: Board, square: Square) -> Optional[Piece]:
    if not on_board(square):
        return None
    return Piece.from_code(int(board.grid[square[0], square[1]]))


def count_pieces(board: Board, owner: Side) -> int:
    return int(np.count_nonzero(np.sign(board.grid) == owner.sign))


def count_kings(board: Board, owner: Side) -> int:
    return int(np.count_nonzero(board.grid == 2 * owner.sign))


def with_piece_moved(board: Board, move: Move) -> Board:
    """Relocate the mover, drop the captured piece, crown if move.promotes."""
    grid = board.copy_grid()
    fr, fc = move.from_sq
    tr, tc = move.to_sq
    code = int(grid[fr, fc])
    grid[fr, fc] = 0
    if move.captured is not None:
        grid[move.captured[0], move.captured[1]] = 0
    if move.promotes and code != 0:
        code = 2 if code > 0 else -2
    grid[tr, tc] = code
    return Board(grid)


# -----------------------------
# Notation and display
# -----------------------------
_GLYPHS = {0: ".", 1: "b", 2: "B", -1: "r", -2: "R"}


def render_board(board: Board, show_indices: bool = False) -> str:
    """ASCII diagram, row 0 at the top. Lowercase men, uppercase kings."""
    lines: List[str] = ["   " + " ".join(str(c) for c in range(BOARD_SIZE))]
    for r in range(BOARD_SIZE):
        cells: List[str] = []
        for c in range(BOARD_SIZE):
            if not is_playable((r, c)):
                cells.append(" ")
                continue
            code = int(board.grid[r, c])
            if code == 0 and show_indices:
                cells.append(str(idx_map[(r, c)] % 10))
            else:
                cells.append(_GLYPHS[code])
        lines.append(f"{r}  " + " ".join(cells))
    return "\n".join(lines)


def move_to_str(move: Move) -> str:
    """Dark-square notation: '9-13' for a slide, '9x18' for a jump."""
    a = square_to_index(move.from_sq)
    b = square_to_index(move.to_sq)
    sep = "x" if move.is_capture else "-"
    return f"{a}{sep}{b}"


def chain_to_str(moves: List[Move]) -> str:
    if not moves:
        return ""
    parts = [str(square_to_index(moves[0].from_sq))]
    parts.extend(str(square_to_index(m.to_sq)) for m in moves)
    sep = "x" if moves[0].is_capture else "-"
    return sep.join(parts)


def parse_square(s: str) -> Optional[Square]:
    """Accept a dark-square number ('14') or 'row,col' ('3,2')."""
    s = s.strip().replace(" ", "")
    if not s:
        return None
    try:
        if "," in s:
            r_str, c_str = s.split(",", 1)
            sq = (int(r_str), int(c_str))
            return sq if is_playable(sq) else None
        return index_to_square(int(s))
    except ValueError:
        return None
