import pytest

from arcade_checkers.board import Board, initial_board
from arcade_checkers.moves import (
    MoveGenerator,
    MoveValidator,
    all_moves,
    any_jump_exists,
    jump_chains,
    legal_moves,
    simple_moves,
    single_jumps,
)
from arcade_checkers.types import Move, Piece, Rank, Side

BM = Piece(Side.BLACK)
BK = Piece(Side.BLACK, Rank.KING)
RM = Piece(Side.RED)
RK = Piece(Side.RED, Rank.KING)


# Helpers

def make_board(pieces):
    return Board.from_pieces(pieces)


def test_simple_moves_initial_position():
    board = initial_board()
    moves = all_moves(board, Side.BLACK)
    assert len(moves) == 7
    assert all(not m.is_capture for m in moves)
    assert all(m.to_sq[0] == 3 for m in moves)

    red = all_moves(board, Side.RED)
    assert len(red) == 7
    assert all(m.to_sq[0] == 4 for m in red)


def test_men_only_move_forward():
    board = make_board({(4, 3): BM, (4, 5): RM})
    assert sorted(simple_moves(board, (4, 3))) == [(5, 2), (5, 4)]
    assert sorted(simple_moves(board, (4, 5))) == [(3, 4), (3, 6)]


def test_king_moves_backward():
    board = make_board({(4, 3): BK})
    assert sorted(simple_moves(board, (4, 3))) == [(3, 2), (3, 4), (5, 2), (5, 4)]


def test_edge_piece_has_one_step():
    board = make_board({(2, 7): BM})
    assert simple_moves(board, (2, 7)) == [(3, 6)]


def test_single_jump():
    board = make_board({(2, 1): BM, (3, 2): RM})
    assert single_jumps(board, (2, 1)) == [((4, 3), (3, 2))]


def test_man_cannot_jump_backward():
    board = make_board({(4, 3): BM, (3, 2): RM})
    assert single_jumps(board, (4, 3)) == []
    assert not any_jump_exists(board, Side.BLACK)


def test_jump_blocked_by_occupied_landing_or_edge():
    board = make_board({(2, 1): BM, (3, 2): RM, (4, 3): RM})
    assert single_jumps(board, (2, 1)) == []
    edge = make_board({(5, 6): BM, (6, 7): RM})
    assert single_jumps(edge, (5, 6)) == []


def test_cannot_jump_own_piece():
    board = make_board({(2, 1): BM, (3, 2): BM})
    assert single_jumps(board, (2, 1)) == []


def test_forced_capture_restricts_every_piece():
    board = make_board({(2, 1): BM, (3, 2): RM, (2, 5): BM, (6, 7): RM})
    assert any_jump_exists(board, Side.BLACK)
    assert all_moves(board, Side.BLACK) == [Move((2, 1), (4, 3), (3, 2), False)]
    # the non-capturing piece contributes nothing this turn
    assert legal_moves(board, (2, 5), Side.BLACK) == []
    assert simple_moves(board, (2, 5)) != []


def test_double_jump_chain():
    board = make_board({(0, 1): BM, (1, 2): RM, (3, 4): RM})
    chains = jump_chains(board, (0, 1))
    assert chains == [(
        Move((0, 1), (2, 3), (1, 2), False),
        Move((2, 3), (4, 5), (3, 4), False),
    )]
    # legal moves expose the first link only
    assert legal_moves(board, (0, 1), Side.BLACK) == [Move((0, 1), (2, 3), (1, 2), False)]


def test_branching_chains_are_all_maximal():
    board = make_board({(2, 3): BM, (3, 2): RM, (3, 4): RM, (5, 6): RM})
    chains = jump_chains(board, (2, 3))
    assert len(chains) == 2
    ends = sorted(chain[-1].to_sq for chain in chains)
    assert ends == [(4, 1), (6, 7)]
    long_chain = [c for c in chains if len(c) == 2][0]
    assert long_chain[1].captured == (5, 6)


def test_shared_first_link_is_not_duplicated():
    # two continuations after the same first jump
    board = make_board({(0, 3): BM, (1, 4): RM, (3, 4): RM, (3, 6): RM})
    chains = jump_chains(board, (0, 3))
    assert len(chains) == 2
    assert all(c[0].to_sq == (2, 5) for c in chains)
    assert legal_moves(board, (0, 3), Side.BLACK) == [Move((0, 3), (2, 5), (1, 4), False)]


def test_king_chain_never_recaptures():
    board = make_board({(2, 1): BK, (3, 2): RM})
    assert jump_chains(board, (2, 1)) == [(Move((2, 1), (4, 3), (3, 2), False),)]


def test_king_chain_turns_corners():
    board = make_board({(4, 1): RK, (3, 2): BM, (1, 4): BM, (3, 6): BM})
    chains = jump_chains(board, (4, 1))
    assert len(chains) == 1
    assert [m.to_sq for m in chains[0]] == [(2, 3), (0, 5)]
    # a king is never flagged for promotion
    assert not any(m.promotes for m in chains[0])


def test_chain_ending_on_back_rank_promotes():
    board = make_board({(5, 2): BM, (6, 3): RM})
    chains = jump_chains(board, (5, 2))
    assert chains == [(Move((5, 2), (7, 4), (6, 3), True),)]


def test_simple_move_to_back_rank_promotes():
    board = make_board({(6, 1): BM, (1, 2): RM})
    moves = legal_moves(board, (6, 1), Side.BLACK)
    assert all(m.promotes for m in moves)
    red = legal_moves(board, (1, 2), Side.RED)
    assert all(m.promotes for m in red)


def test_arbitrary_input_yields_nothing():
    board = initial_board()
    assert legal_moves(board, (3, 0), Side.BLACK) == []  # empty
    assert legal_moves(board, (5, 0), Side.BLACK) == []  # wrong owner
    assert legal_moves(board, (9, 9), Side.BLACK) == []  # off board
    assert simple_moves(board, (-1, 4)) == []
    assert single_jumps(board, (3, 0)) == []
    assert jump_chains(board, (4, 4)) == []


def test_move_validator():
    board = initial_board()
    assert MoveValidator.validate(board, Side.BLACK, Move((2, 1), (3, 2)))
    assert not MoveValidator.validate(board, Side.BLACK, Move((2, 1), (3, 0), (9, 9)))
    assert MoveValidator.match(board, Side.BLACK, (2, 1), (3, 0)) == Move((2, 1), (3, 0))
    assert MoveValidator.match(board, Side.BLACK, (2, 1), (4, 3)) is None


@pytest.mark.parametrize("side", [Side.BLACK, Side.RED])
def test_generator_matches_functional_api(side):
    board = initial_board()
    assert MoveGenerator().all_moves(board, side) == all_moves(board, side)
