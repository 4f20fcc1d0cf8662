from __future__ import annotations

import random

import pytest

from arcade_checkers import (
    Difficulty,
    Game,
    Rank,
    Side,
    ai_move,
    all_moves,
    any_jump_exists,
    apply_move,
    count_pieces,
    legal_moves,
    new_game,
    piece_at,
)
from arcade_checkers.engine import Phase, all_legal_moves
from arcade_checkers.types import Move, is_playable


@pytest.mark.parametrize("seed", range(6))
@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_self_play_invariants(seed, difficulty):
    rng = random.Random(seed)
    state = new_game()
    for _ in range(400):
        if state.terminal is not None:
            break
        side = state.turn
        board = state.board

        # forced capture
        if state.chain_square is None and any_jump_exists(board, side):
            assert all(m.is_capture for m in all_moves(board, side))

        move = ai_move(state, difficulty, rng)
        assert move is not None
        assert move in legal_moves(state, move.from_sq)

        # legality closure: a step the generator never offers is rejected
        bogus = Move(move.from_sq, (move.from_sq[0] + 3, move.from_sq[1] + 3))
        rejected = apply_move(state, bogus)
        assert not rejected.ok and rejected.state is state
        forged = Move(move.from_sq, move.to_sq, move.captured, not move.promotes)
        assert not apply_move(state, forged).ok

        mover = piece_at(board, move.from_sq)
        result = apply_move(state, move)
        assert result.ok
        after = result.state.board

        # material monotonicity
        opp_before = count_pieces(board, side.other)
        opp_after = count_pieces(after, side.other)
        assert opp_after <= opp_before
        assert (opp_after == opp_before) == (not move.is_capture)
        assert count_pieces(after, side) == count_pieces(board, side)

        # promotion
        if mover.rank is Rank.MAN and move.to_sq[0] == side.promotion_row:
            assert piece_at(after, move.to_sq).rank is Rank.KING

        # chain continuation keeps the turn on the landed square
        if result.phase is Phase.CONTINUING_CHAIN:
            assert result.state.turn is side
            assert all(m.from_sq == move.to_sq for m in all_legal_moves(result.state))
        else:
            assert result.state.turn is side.other

        for square, _ in after.pieces():
            assert is_playable(square)
        state = result.state

    if state.terminal is not None:
        loser = state.terminal.other
        assert count_pieces(state.board, loser) == 0 or not all_moves(state.board, loser)


def test_full_game_through_session():
    game = Game(allow_undo=True)
    rng = random.Random(11)
    levels = {Side.BLACK: Difficulty.HARD, Side.RED: Difficulty.MEDIUM}
    turns = 0
    while not game.is_over and turns < 300:
        assert game.play_ai_turn(levels[game.state.turn], rng)
        turns += 1
    assert game.history
    if game.is_over:
        assert game.winner in (Side.BLACK, Side.RED)
