from __future__ import annotations

import argparse
import random
from typing import Dict, List, Optional

from .board import chain_to_str, count_pieces, render_board
from .config import get_config, load_config_from_file, setup_logging
from .game import Game
from .types import Difficulty, Side

DIFFICULTIES = [d.value for d in Difficulty]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Play AI-vs-AI checkers matches")
    ap.add_argument("--black", choices=DIFFICULTIES, default=None, help="Black AI difficulty")
    ap.add_argument("--red", choices=DIFFICULTIES, default=None, help="Red AI difficulty")
    ap.add_argument("--games", type=int, default=1, help="Number of games to play")
    ap.add_argument("--seed", type=int, default=None, help="Random seed")
    ap.add_argument("--max-plies", type=int, default=200, help="Declare a draw after this many plies")
    ap.add_argument("--show", action="store_true", help="Print the final board of each game")
    ap.add_argument("--moves", action="store_true", help="Print every turn as it is played")
    ap.add_argument("--config", default=None, help="JSON config file")
    ap.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    return ap.parse_args(argv)


def play_match(black: Difficulty, red: Difficulty, rng: random.Random,
               max_plies: int = 200, verbose: bool = False) -> Game:
    """Play one game to completion or until the ply limit."""
    game = Game(allow_undo=False)
    levels: Dict[Side, Difficulty] = {Side.BLACK: black, Side.RED: red}
    while not game.is_over and game.state.ply < max_plies:
        side = game.state.turn
        played = game.play_ai_turn(levels[side], rng)
        if not played:
            break
        if verbose:
            print(f"{game.state.ply:3d}. {side.value:5s} {chain_to_str(played)}")
    return game


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = load_config_from_file(args.config) if args.config else get_config()
    setup_logging(args.log_level)

    black = Difficulty(args.black or config.ai.difficulty)
    red = Difficulty(args.red or config.ai.difficulty)
    seed = args.seed if args.seed is not None else config.ai.seed
    rng = random.Random(seed)

    tally = {"black": 0, "red": 0, "draw": 0}
    for n in range(1, args.games + 1):
        game = play_match(black, red, rng, max_plies=args.max_plies, verbose=args.moves)
        won = game.winner if game.is_over else None
        key = won.value if won is not None else "draw"
        tally[key] += 1
        board = game.state.board
        print(f"Game {n:3d}: {key:5s} | plies {game.state.ply:3d} | "
              f"black {count_pieces(board, Side.BLACK):2d} red {count_pieces(board, Side.RED):2d}")
        if args.show:
            print(render_board(board))
            print()
    print("-" * 60)
    print(f"black ({black.value}) {tally['black']}  red ({red.value}) {tally['red']}  draws {tally['draw']}")
    return 0
