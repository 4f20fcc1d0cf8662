"""
Rules engine: the game state machine over immutable boards.

A turn is played one step at a time. After a capture, if the landed piece can
jump again, the state enters a chain: the turn stays with the same side and
only that square may move. Illegal input never raises; it comes back as a
MoveResult carrying an IllegalMove and the untouched state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from . import moves as _moves
from .board import Board, count_pieces, initial_board, piece_at, with_piece_moved
from .types import Move, Side, Square, is_playable

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    SELECTING_SOURCE = "selecting_source"
    CONTINUING_CHAIN = "continuing_chain"
    TURN_COMPLETE = "turn_complete"
    GAME_OVER = "game_over"


class IllegalMoveReason(str, Enum):
    NO_PIECE = "no_piece"
    NOT_LEGAL = "not_legal"
    WRONG_CHAIN_SQUARE = "wrong_chain_square"
    GAME_OVER = "game_over"


class IllegalMove(Exception):
    """A rejected move. Returned in MoveResult; raised only on request."""

    def __init__(self, reason: IllegalMoveReason, move: Move) -> None:
        super().__init__(f"illegal move {move.from_sq}->{move.to_sq}: {reason.value}")
        self.reason = reason
        self.move = move


@dataclass(frozen=True)
class GameState:
    """
    Immutable snapshot of a game.

    chain_square is set while the side to move is in the middle of a jump
    chain; terminal holds the winner once the game is over.
    """
    board: Board
    turn: Side = Side.BLACK
    chain_square: Optional[Square] = None
    terminal: Optional[Side] = None
    ply: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.board, Board):
            raise ValueError("board must be a Board")
        if self.chain_square is not None and not is_playable(self.chain_square):
            raise ValueError(f"chain square {self.chain_square} is not playable")
        if self.ply < 0:
            raise ValueError("ply must be non-negative")

    @property
    def phase(self) -> Phase:
        if self.terminal is not None:
            return Phase.GAME_OVER
        if self.chain_square is not None:
            return Phase.CONTINUING_CHAIN
        return Phase.SELECTING_SOURCE


@dataclass(frozen=True)
class MoveResult:
    state: GameState
    phase: Phase
    error: Optional[IllegalMove] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def new_game(first: Side = Side.BLACK) -> GameState:
    return GameState(board=initial_board(), turn=first)


def legal_moves(state: GameState, square: Square) -> List[Move]:
    """Moves the side to move may make from `square` right now."""
    if state.terminal is not None:
        return []
    if state.chain_square is not None and square != state.chain_square:
        return []
    return _moves.legal_moves(state.board, square, state.turn)


def find_move(state: GameState, from_sq: Square, to_sq: Square) -> Optional[Move]:
    """The legal step between two squares, if any. Endpoints identify a step uniquely."""
    for m in legal_moves(state, from_sq):
        if m.to_sq == to_sq:
            return m
    return None


def all_legal_moves(state: GameState) -> List[Move]:
    if state.terminal is not None:
        return []
    if state.chain_square is not None:
        return legal_moves(state, state.chain_square)
    return _moves.all_moves(state.board, state.turn)


def _reject(state: GameState, reason: IllegalMoveReason, move: Move) -> MoveResult:
    err = IllegalMove(reason, move)
    logger.debug("Rejected %s", err)
    return MoveResult(state=state, phase=state.phase, error=err)


def apply_move(state: GameState, move: Move) -> MoveResult:
    """Advance the game by one step, or reject the move without side effects."""
    if state.terminal is not None:
        return _reject(state, IllegalMoveReason.GAME_OVER, move)
    if state.chain_square is not None and move.from_sq != state.chain_square:
        return _reject(state, IllegalMoveReason.WRONG_CHAIN_SQUARE, move)
    piece = piece_at(state.board, move.from_sq)
    if piece is None or piece.owner is not state.turn:
        return _reject(state, IllegalMoveReason.NO_PIECE, move)

    if move not in legal_moves(state, move.from_sq):
        return _reject(state, IllegalMoveReason.NOT_LEGAL, move)

    board = with_piece_moved(state.board, move)
    if move.is_capture and not move.promotes and _moves.single_jumps(board, move.to_sq):
        nxt = replace(state, board=board, chain_square=move.to_sq)
        return MoveResult(state=nxt, phase=Phase.CONTINUING_CHAIN)

    nxt = GameState(board=board, turn=state.turn.other, ply=state.ply + 1)
    won = is_terminal(nxt)
    if won is not None:
        logger.info("Game over after %d plies: %s wins", nxt.ply, won.value)
        return MoveResult(state=replace(nxt, terminal=won), phase=Phase.GAME_OVER)
    return MoveResult(state=nxt, phase=Phase.TURN_COMPLETE)


def is_terminal(state: GameState) -> Optional[Side]:
    """Winner if the side to move has no pieces or no legal move, else None."""
    if state.terminal is not None:
        return state.terminal
    side = state.turn
    if count_pieces(state.board, side) == 0 or not all_legal_moves(state):
        return side.other
    return None


def winner(state: GameState) -> Optional[Side]:
    return is_terminal(state)


# -----------------------------
# Plain-data conversion
# -----------------------------
def state_to_dict(state: GameState) -> Dict[str, Any]:
    return {
        "board": state.board.to_rows(),
        "turn": state.turn.value,
        "chain_square": list(state.chain_square) if state.chain_square is not None else None,
        "winner": state.terminal.value if state.terminal is not None else None,
        "ply": state.ply,
    }


def state_from_dict(data: Dict[str, Any]) -> GameState:
    try:
        chain = data.get("chain_square")
        won = data.get("winner")
        return GameState(
            board=Board.from_rows(data["board"]),
            turn=Side(data["turn"]),
            chain_square=(int(chain[0]), int(chain[1])) if chain is not None else None,
            terminal=Side(won) if won is not None else None,
            ply=int(data.get("ply", 0)),
        )
    except (KeyError, TypeError, IndexError, AttributeError) as e:
        raise ValueError(f"Malformed game state: {e}") from e
