"""
AI opponent: one-ply heuristic move selection in three difficulty tiers.

Every tier looks only at the positions reachable with a single step; there is
no lookahead. Ties and pools are resolved by uniform random choice from an
injectable random.Random so games can be replayed with a seed.
"""
from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Type, Union

from .board import Board, count_pieces, piece_at, with_piece_moved
from .engine import GameState, Phase, all_legal_moves, apply_move
from .types import BOARD_SIZE, Difficulty, Move, Side

logger = logging.getLogger(__name__)

CAPTURE_BONUS = 15
KING_MOVE_BONUS = 2
BACK_RANK_BONUS = 5
MATERIAL_WEIGHT = 10
MAX_MATERIAL_DEFICIT = -1


def material_after(board: Board, move: Move, side: Side) -> Tuple[int, int]:
    """(own, opponent) piece counts after playing `move`."""
    after = with_piece_moved(board, move)
    return count_pieces(after, side), count_pieces(after, side.other)


class MoveStrategy(ABC):
    """Abstract interface for picking one move from a legal set."""

    @abstractmethod
    def choose(self, board: Board, side: Side, moves: List[Move], rng: random.Random) -> Move:  # pragma: no cover
        raise NotImplementedError

    @staticmethod
    def _captures_first(moves: List[Move]) -> List[Move]:
        captures = [m for m in moves if m.is_capture]
        return captures if captures else moves


class EasyStrategy(MoveStrategy):
    """Uniform random, captures preferred."""

    def choose(self, board: Board, side: Side, moves: List[Move], rng: random.Random) -> Move:
        return rng.choice(self._captures_first(moves))


class MediumStrategy(MoveStrategy):
    """Random among moves that do not leave us more than one piece behind."""

    def choose(self, board: Board, side: Side, moves: List[Move], rng: random.Random) -> Move:
        candidates = self._captures_first(moves)
        pool: List[Move] = []
        for m in candidates:
            own, opp = material_after(board, m, side)
            if own - opp >= MAX_MATERIAL_DEFICIT:
                pool.append(m)
        return rng.choice(pool if pool else candidates)


class HardStrategy(MoveStrategy):
    """Greedy depth-1 scoring; best score wins, ties broken at random."""

    @staticmethod
    def score(board: Board, side: Side, move: Move) -> int:
        own, opp = material_after(board, move, side)
        sc = MATERIAL_WEIGHT * own - MATERIAL_WEIGHT * opp
        if move.is_capture:
            sc += CAPTURE_BONUS
        piece = piece_at(board, move.from_sq)
        if piece is not None and piece.is_king:
            sc += KING_MOVE_BONUS
        if piece is not None and not piece.is_king and move.to_sq[0] in (0, BOARD_SIZE - 1):
            sc += BACK_RANK_BONUS
        return sc

    def choose(self, board: Board, side: Side, moves: List[Move], rng: random.Random) -> Move:
        best_score: Optional[int] = None
        best: List[Move] = []
        for m in self._captures_first(moves):
            sc = self.score(board, side, m)
            if best_score is None or sc > best_score:
                best_score = sc
                best = [m]
            elif sc == best_score:
                best.append(m)
        return rng.choice(best)


_STRATEGIES: Dict[Difficulty, Type[MoveStrategy]] = {
    Difficulty.EASY: EasyStrategy,
    Difficulty.MEDIUM: MediumStrategy,
    Difficulty.HARD: HardStrategy,
}


def get_strategy(difficulty: Union[Difficulty, str]) -> MoveStrategy:
    """Factory for the strategy backing a difficulty tier."""
    return _STRATEGIES[Difficulty(difficulty)]()


def ai_move(state: GameState, difficulty: Union[Difficulty, str],
            rng: Optional[random.Random] = None) -> Optional[Move]:
    """Pick a move for the side to move, or None if it has none."""
    moves = all_legal_moves(state)
    if not moves:
        return None
    rng = rng or random.Random()
    move = get_strategy(difficulty).choose(state.board, state.turn, moves, rng)
    logger.debug("AI (%s, %s) picked %s->%s from %d moves",
                 state.turn.value, Difficulty(difficulty).value, move.from_sq, move.to_sq, len(moves))
    return move


def play_ai_turn(state: GameState, difficulty: Union[Difficulty, str],
                 rng: Optional[random.Random] = None) -> Tuple[GameState, List[Move]]:
    """Play AI steps until the side to move changes or the game ends."""
    rng = rng or random.Random()
    side = state.turn
    played: List[Move] = []
    while state.terminal is None and state.turn is side:
        move = ai_move(state, difficulty, rng)
        if move is None:
            break
        result = apply_move(state, move)
        if result.error is not None:
            raise result.error
        played.append(move)
        state = result.state
        if result.phase is not Phase.CONTINUING_CHAIN:
            break
    return state, played
