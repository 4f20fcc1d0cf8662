"""
Game session management on top of the pure engine.
"""
from __future__ import annotations

import json
import logging
import os
import random
from typing import List, Optional, Protocol, Union

from .ai import play_ai_turn
from .config import get_game_rules
from .engine import (
    GameState,
    Phase,
    apply_move,
    find_move,
    legal_moves,
    new_game,
    state_from_dict,
    state_to_dict,
    winner,
)
from .types import Difficulty, Move, Side, Square

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Persistence port for game snapshots. The engine never calls it directly."""

    def save(self, state: GameState) -> None:
        ...

    def load(self) -> Optional[GameState]:
        ...


class MemoryStateStore:
    """Keeps the latest snapshot in memory."""

    def __init__(self) -> None:
        self._state: Optional[GameState] = None
        self.saves: int = 0

    def save(self, state: GameState) -> None:
        self._state = state
        self.saves += 1

    def load(self) -> Optional[GameState]:
        return self._state


class JsonFileStateStore:
    """Writes the plain-data form of the latest snapshot to a JSON file."""

    def __init__(self, filepath: str) -> None:
        self.filepath = filepath

    def save(self, state: GameState) -> None:
        with open(self.filepath, 'w') as f:
            json.dump(state_to_dict(state), f)

    def load(self) -> Optional[GameState]:
        if not os.path.exists(self.filepath):
            return None
        with open(self.filepath, 'r') as f:
            return state_from_dict(json.load(f))


class Game:
    """Holds the current state plus a stack of prior snapshots for undo."""

    def __init__(self, state: Optional[GameState] = None,
                 store: Optional[StateStore] = None,
                 allow_undo: Optional[bool] = None) -> None:
        self.state: GameState = state or new_game()
        self.history: List[GameState] = []
        self.store = store
        self.allow_undo: bool = get_game_rules().allow_undo if allow_undo is None else allow_undo

    @classmethod
    def resume(cls, store: StateStore, **kwargs) -> "Game":
        """Start from the store's snapshot, or a fresh game if it has none."""
        return cls(state=store.load(), store=store, **kwargs)

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def winner(self) -> Optional[Side]:
        return winner(self.state)

    @property
    def is_over(self) -> bool:
        return self.state.terminal is not None

    def legal_moves(self, square: Square) -> List[Move]:
        return legal_moves(self.state, square)

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.state)

    def play(self, move: Move, strict: bool = False) -> bool:
        """Apply a move; False (or IllegalMove when strict) if rejected."""
        result = apply_move(self.state, move)
        if result.error is not None:
            if strict:
                raise result.error
            return False
        self.history.append(self.state)
        self.state = result.state
        self._persist()
        return True

    def play_squares(self, from_sq: Square, to_sq: Square, strict: bool = False) -> bool:
        """Play the legal step between two squares, as picked on a board UI."""
        move = find_move(self.state, from_sq, to_sq) or Move(from_sq, to_sq)
        return self.play(move, strict=strict)

    def play_ai_turn(self, difficulty: Union[Difficulty, str],
                     rng: Optional[random.Random] = None) -> List[Move]:
        """Let the AI finish the current side's turn, chain included."""
        _, played = play_ai_turn(self.state, difficulty, rng)
        for move in played:
            self.play(move, strict=True)
        return played

    def undo(self) -> bool:
        """Restore the previous snapshot."""
        if not self.allow_undo or not self.history:
            return False
        self.state = self.history.pop()
        self._persist()
        return True

    def undo_turn(self, human_side: Side) -> bool:
        """Rewind to the last point where `human_side` was choosing a piece.

        Undoes the human's own move together with the opponent reply (and any
        chain steps in between).
        """
        if not self.allow_undo or not self.history:
            return False
        self.state = self.history.pop()
        while self.history and not (self.state.turn is human_side
                                    and self.state.phase is Phase.SELECTING_SOURCE):
            self.state = self.history.pop()
        logger.debug("Undo to ply %d (%s to move)", self.state.ply, self.state.turn.value)
        self._persist()
        return True

    def reset(self, first: Side = Side.BLACK) -> None:
        self.state = new_game(first)
        self.history.clear()
        self._persist()
