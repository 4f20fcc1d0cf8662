from __future__ import annotations

from typing import List, Optional, Tuple

from .board import Board, piece_at, with_piece_moved
from .types import (
    JumpChain,
    Move,
    Piece,
    Side,
    Square,
    directions_for,
    on_board,
)

Jump = Tuple[Square, Square]  # (landing, captured)


def _reaches_crown(piece: Piece, square: Square) -> bool:
    return not piece.is_king and square[0] == piece.owner.promotion_row


class MoveGenerator:
    """Generates legal moves for a board and side.

    Captures are mandatory: while any piece of a side can jump, none of that
    side's pieces may make a plain diagonal step. Chains are enumerated
    recursively with the mover relocated and each captured piece removed, so a
    piece can never be jumped twice in one turn.
    """

    def simple_moves(self, board: Board, square: Square) -> List[Square]:
        piece: Optional[Piece] = piece_at(board, square)
        if piece is None:
            return []
        r, c = square
        out: List[Square] = []
        for dr, dc in directions_for(piece):
            nb = (r + dr, c + dc)
            if on_board(nb) and piece_at(board, nb) is None:
                out.append(nb)
        return out

    def single_jumps(self, board: Board, square: Square) -> List[Jump]:
        piece: Optional[Piece] = piece_at(board, square)
        if piece is None:
            return []
        r, c = square
        out: List[Jump] = []
        for dr, dc in directions_for(piece):
            mid = (r + dr, c + dc)
            end = (r + 2 * dr, c + 2 * dc)
            if not on_board(end):
                continue
            victim = piece_at(board, mid)
            if victim is not None and victim.owner is not piece.owner and piece_at(board, end) is None:
                out.append((end, mid))
        return out

    def _extend(self, board: Board, square: Square, piece: Piece) -> List[List[Move]]:
        chains: List[List[Move]] = []
        for landing, captured in self.single_jumps(board, square):
            # Rank is not re-evaluated between links; crowning happens at chain end.
            step = Move(square, landing, captured)
            tails = self._extend(with_piece_moved(board, step), landing, piece)
            if tails:
                chains.extend([step] + tail for tail in tails)
            else:
                chains.append([Move(square, landing, captured, _reaches_crown(piece, landing))])
        return chains

    def jump_chains(self, board: Board, square: Square) -> List[JumpChain]:
        piece = piece_at(board, square)
        if piece is None:
            return []
        return [tuple(chain) for chain in self._extend(board, square, piece)]

    def any_jump_exists(self, board: Board, owner: Side) -> bool:
        for square, _ in board.pieces(owner):
            if self.single_jumps(board, square):
                return True
        return False

    def _moves_from(self, board: Board, square: Square, piece: Piece, must_jump: bool) -> List[Move]:
        if must_jump:
            firsts: List[Move] = []
            for chain in self.jump_chains(board, square):
                if chain[0] not in firsts:
                    firsts.append(chain[0])
            return firsts
        return [Move(square, to, None, _reaches_crown(piece, to)) for to in self.simple_moves(board, square)]

    def legal_moves(self, board: Board, square: Square, owner: Side) -> List[Move]:
        piece = piece_at(board, square)
        if piece is None or piece.owner is not owner:
            return []
        return self._moves_from(board, square, piece, self.any_jump_exists(board, owner))

    def all_moves(self, board: Board, owner: Side) -> List[Move]:
        must_jump = self.any_jump_exists(board, owner)
        moves: List[Move] = []
        for square, piece in board.pieces(owner):
            moves.extend(self._moves_from(board, square, piece, must_jump))
        return moves


class MoveValidator:
    """Checks a submitted move against the generated legal set."""

    @staticmethod
    def match(board: Board, owner: Side, from_sq: Square, to_sq: Square) -> Optional[Move]:
        """Return the legal Move with these endpoints, if any."""
        for m in _GENERATOR.legal_moves(board, from_sq, owner):
            if m.to_sq == to_sq:
                return m
        return None

    @staticmethod
    def validate(board: Board, owner: Side, move: Move) -> bool:
        return move in _GENERATOR.legal_moves(board, move.from_sq, owner)


_GENERATOR = MoveGenerator()


# Convenience functional API

def simple_moves(board: Board, square: Square) -> List[Square]:
    return _GENERATOR.simple_moves(board, square)


def single_jumps(board: Board, square: Square) -> List[Jump]:
    return _GENERATOR.single_jumps(board, square)


def jump_chains(board: Board, square: Square) -> List[JumpChain]:
    return _GENERATOR.jump_chains(board, square)


def legal_moves(board: Board, square: Square, owner: Side) -> List[Move]:
    return _GENERATOR.legal_moves(board, square, owner)


def any_jump_exists(board: Board, owner: Side) -> bool:
    return _GENERATOR.any_jump_exists(board, owner)


def all_moves(board: Board, owner: Side) -> List[Move]:
    return _GENERATOR.all_moves(board, owner)
