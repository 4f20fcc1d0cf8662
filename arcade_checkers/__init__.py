"""Arcade checkers: rules engine and AI opponent.

Usage examples:
    from arcade_checkers import new_game, legal_moves, apply_move
    from arcade_checkers import ai_move, Difficulty
    from arcade_checkers import Game
"""
from __future__ import annotations

# Types
from .types import Side, Rank, Piece, Move, JumpChain, Square, Difficulty

# Board model
from .board import (
    Board,
    initial_board,
    piece_at,
    count_pieces,
    with_piece_moved,
    render_board,
    move_to_str,
    parse_square,
)

# Move generation
from .moves import MoveGenerator, MoveValidator, any_jump_exists, all_moves, jump_chains

# Engine API
from .engine import (
    GameState,
    MoveResult,
    Phase,
    IllegalMove,
    IllegalMoveReason,
    new_game,
    legal_moves,
    apply_move,
    find_move,
    is_terminal,
    winner,
    state_to_dict,
    state_from_dict,
)

# AI
from .ai import ai_move, play_ai_turn, get_strategy

# Sessions
from .game import Game, StateStore, MemoryStateStore, JsonFileStateStore

# Configuration
from .config import CheckersConfig, get_config, setup_logging

__version__ = "1.0.0"
