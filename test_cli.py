import random

from arcade_checkers.cli import main, parse_args, play_match
from arcade_checkers.types import Difficulty


def test_parse_args_defaults():
    args = parse_args([])
    assert args.games == 1
    assert args.black is None and args.red is None
    assert args.max_plies == 200


def test_play_match_respects_ply_limit():
    game = play_match(Difficulty.EASY, Difficulty.EASY, random.Random(0), max_plies=10)
    assert game.state.ply <= 10 or game.is_over


def test_main_prints_results(capsys):
    rc = main(["--games", "2", "--seed", "1", "--black", "hard", "--red", "easy",
               "--max-plies", "80", "--show", "--log-level", "WARNING"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "Game   1:" in out
    assert "Game   2:" in out
    assert "black (hard)" in out and "red (easy)" in out


def test_main_prints_turns(capsys):
    main(["--seed", "3", "--max-plies", "4", "--moves"])
    out = capsys.readouterr().out
    assert "  1. black" in out
    assert "  2. red" in out
