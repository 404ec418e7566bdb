"""Module entrypoint for `python -m pipe_puzzle`."""

import argparse

from pipe_puzzle.boards.presets import DEFAULT_DIFFICULTY, DIFFICULTY_LEVELS
from pipe_puzzle.config import DEFAULT_SEED_TEXT
from pipe_puzzle.runtime import configure_logging


def build_parser():
    parser = argparse.ArgumentParser(prog="pipe_puzzle", description="Pipe rotation puzzle")
    parser.add_argument("--seed", default=DEFAULT_SEED_TEXT, help="Seed text or a progression seed such as P18-2-28-18-4-2-2-2-0-0")
    parser.add_argument("--difficulty", default=DEFAULT_DIFFICULTY, choices=DIFFICULTY_LEVELS)
    parser.add_argument("--ascii", action="store_true", help="Print the scrambled board instead of opening a window")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.ascii:
        from pipe_puzzle.core.game import PuzzleGame
        from pipe_puzzle.text_view import format_board

        game = PuzzleGame(args.seed, args.difficulty)
        print(format_board(game.tiles, game.complete))
        return 0

    from pipe_puzzle.play import play_pipes

    play_pipes(args.seed, args.difficulty)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
