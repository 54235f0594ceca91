"""
cli.py - Command-line interface for playing iFactor

This module provides a CLI for two players sharing a terminal, plus
helpers for inspecting board positions and benchmarking the engine.
"""

import argparse
import sys
from typing import List, Optional, Sequence

import numpy as np

from ifactor.debug import debug, DebugLevel
from ifactor.utils import CHOICES, GRID_SIZE, Player, GameResult, format_choices
from ifactor.game.board import Board
from ifactor.game.rules import IFactorGame, IFactorEnv

# Special command codes returned by get_move
QUIT = -1
UNDO = -2

RULES = """\
Here's a quick rundown of the rules:
  Each turn you will choose a number.
  The space you put your piece on is the PRODUCT of the number you chose and your opponent's last choice
  You are not allowed to pick a number that would reuse a space, and if that means you have no available moves then the game is a draw.
  A player wins if they make a 4-in-a-row!
  To start, player 2 must choose a number without placing a piece so that Player 1 has something to multiply with.
The board looks like this, each possible product of the numbers 1-9 in a 6x6 grid
""" + Board().render()

EPILOG = """
Examples:

    # Play a game, with the rules printed first
    python run.py play

    # Play without the rules, replaying the first few choices
    python run.py play --returning --moves 5,3,2

    # Check a position for a winner (36 values, 0 empty, 1/2 players)
    python run.py check --position 1,1,1,1,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0

    # Benchmark random self-play
    python run.py benchmark --iterations 500 --debug-level info
"""


class SimpleCLI:
    """Simple command-line interface for iFactor."""

    def __init__(self, starting_moves: Optional[Sequence] = None, new_player: bool = True):
        """
        Initialize the CLI.

        Args:
            starting_moves: Inputs consumed before reading from the terminal
            new_player: Whether to print the rules before the first prompt
        """
        self.game = IFactorGame()
        self.starting_moves = [str(move) for move in (starting_moves or [])]
        self.new_player = new_player
        self.args = None

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the command-line argument parser."""
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument('--debug', action='store_true',
                            help='Enable debug mode (equivalent to --debug-level debug)')
        common.add_argument('--debug-level',
                            choices=['none', 'error', 'warning', 'info', 'debug', 'trace'],
                            default='warning',
                            help='Set debug level (default: warning)')
        common.add_argument('--log-file', type=str, default=None,
                            help='Also write log messages to this file')

        parser = argparse.ArgumentParser(
            description='iFactor - Connect Four where you defeat your opponent with math',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=EPILOG)
        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', parents=[common], help='Play a game interactively')
        play_parser.add_argument('--returning', action='store_true',
                                 help='Skip the rules (for returning players)')
        play_parser.add_argument('--moves', type=str, default='',
                                 help='Comma-separated choices to play before reading input')

        subparsers.add_parser('rules', parents=[common], help='Print the rules')

        check_parser = subparsers.add_parser('check', parents=[common], help='Check a board position')
        check_parser.add_argument('--position', type=str,
                                  help=f'{GRID_SIZE * GRID_SIZE} comma-separated cell states (0, 1 or 2)')
        check_parser.add_argument('--last-move', type=int, default=0,
                                  help='Most recent choice for the position (default: 0, none yet)')

        benchmark_parser = subparsers.add_parser('benchmark', parents=[common],
                                                 help='Benchmark random self-play')
        benchmark_parser.add_argument('--iterations', type=int, default=1000,
                                      help='Number of games to play')
        benchmark_parser.add_argument('--seed', type=int, default=None,
                                      help='Random seed')
        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments and configure logging."""
        self.args = self.build_parser().parse_args(argv)

        if getattr(self.args, 'debug', False):
            debug.configure(level=DebugLevel.DEBUG)
        elif getattr(self.args, 'debug_level', None):
            debug.set_from_string(self.args.debug_level)

        if getattr(self.args, 'log_file', None):
            debug.configure(log_file=self.args.log_file)

        if self.args.command == 'play':
            self.new_player = not self.args.returning
            self.starting_moves = [m.strip() for m in self.args.moves.split(',') if m.strip()]

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Run the CLI based on the parsed arguments."""
        if not self.args:
            self.parse_args(argv)

        if self.args.command == 'play':
            self.play_game()
        elif self.args.command == 'rules':
            print(RULES)
        elif self.args.command == 'check':
            self.check_position()
        elif self.args.command == 'benchmark':
            self.benchmark()
        else:
            print("Please specify a command. Use --help for options.")
            sys.exit(1)

    def play_game(self) -> None:
        """Play an iFactor game interactively."""
        print(self.welcome_text())

        while True:
            if not self.game.is_seed_turn():
                print(self.game.render())
                if self.game.is_game_over():
                    break

            move = self.get_move()
            if move == QUIT:
                print("Quitting game.")
                return
            elif move == UNDO:
                if self.game.undo_move():
                    print("Move undone.")
                else:
                    print("No moves to undo.")
                continue

            self.game.make_move(move)

        print(self.closing_remarks())

    def read_input(self) -> str:
        """Next line of input, taking any starting moves first."""
        if self.starting_moves:
            return self.starting_moves.pop(0)
        return input()

    def get_move(self) -> int:
        """
        Prompt the current player until they give a legal choice.

        Returns:
            The chosen number, or a special command code
        """
        print(self.player_prompt())
        while True:
            try:
                user_input = self.read_input().strip()
            except EOFError:
                debug.debug("Input closed, quitting", "cli")
                return QUIT

            if user_input.lower() == 'q':
                return QUIT
            elif user_input.lower() == 'u':
                return UNDO

            try:
                move = int(user_input)
            except ValueError:
                move = None

            if move is not None and self.game.board.is_valid_move(move):
                return move

            debug.debug(f"Rejected input {user_input!r}", "cli")
            print(self.player_scold(user_input))

    def welcome_text(self) -> str:
        lines = ["Welcome to iFactor, a Connect Four variant where you defeat your opponent "
                 "with math. Better sharpen your multiplication tables!"]
        if self.new_player:
            lines.append(RULES)
        return "\n".join(lines)

    def player_prompt(self) -> str:
        if self.game.is_seed_turn():
            return f"Player {Player.TWO.number} please choose the first number: {format_choices(CHOICES)}"

        return (f"Your turn, Player {self.game.get_current_player().number}\n"
                f"Please choose a number: {format_choices(self.game.get_valid_moves())}\n"
                f"Your opponent's last number was {self.game.get_last_move()}")

    def player_scold(self, user_input: str) -> str:
        return ("Sorry but that wasn't one of the available choices\n"
                f"I interpreted what you typed as {user_input!r}\n"
                f"Please try again, your options are still {format_choices(self.game.get_valid_moves())}")

    def closing_remarks(self) -> str:
        winner = self.game.get_winner()
        if winner is not None:
            return f"Player {winner.number} Wins!\nCongratulations!"
        return "A stalemate! I guess you'll just have to play again :P"

    def check_position(self) -> None:
        """Check a board position given on the command line."""
        if not self.args.position:
            print("Please provide a position string with --position")
            return

        try:
            position = [int(c) for c in self.args.position.split(',')]
            if len(position) != GRID_SIZE * GRID_SIZE:
                raise ValueError(f"Position string must have {GRID_SIZE * GRID_SIZE} values")
            if any(value not in (p.value for p in Player) for value in position):
                raise ValueError("Cell states must be 0, 1 or 2")
        except ValueError as e:
            print(f"Error parsing position: {e}")
            return

        board = Board()
        board.grid = np.array(position).reshape(GRID_SIZE, GRID_SIZE)
        board.last_move = self.args.last_move

        print("Loaded position:")
        print(board.render())

        result = board.check_end()
        print(f"Result: {result.name}")
        if result.winner is not None:
            print(f"Winning line: {board.get_winning_line()}")
        print(f"Available moves: {board.available_moves()}")

    def benchmark(self) -> None:
        """Play random games through the environment and report timings."""
        iterations = self.args.iterations
        print(f"Running benchmark with {iterations} games...")

        rng = np.random.default_rng(self.args.seed)
        env = IFactorEnv()
        results = {result: 0 for result in GameResult if result.is_game_over()}
        total_moves = 0

        debug.start_timer("game_simulation")
        for _ in range(iterations):
            env.reset(seed=None)
            terminated = False
            while not terminated:
                legal = np.flatnonzero(env.action_masks())
                _, _, terminated, _, info = env.step(int(rng.choice(legal)))
            results[env.game.board.game_result] += 1
            total_moves += info['moves_made']
        elapsed = debug.end_timer("game_simulation", "cli")

        print(f"Player 1 wins: {results[GameResult.PLAYER_ONE_WIN]}")
        print(f"Player 2 wins: {results[GameResult.PLAYER_TWO_WIN]}")
        print(f"Draws: {results[GameResult.DRAW]}")
        if iterations:
            print(f"Played {iterations} games with {total_moves} total choices: "
                  f"{elapsed:.6f} seconds total, "
                  f"{elapsed / iterations * 1000:.6f} ms per game")


def main(argv: Optional[List[str]] = None):
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    cli.run(argv)


if __name__ == "__main__":
    main()
