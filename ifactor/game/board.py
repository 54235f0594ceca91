"""
board.py - Board representation and core game mechanics for iFactor

This module implements the Board class which holds the 6x6 grid of product
cells together with the turn state, and provides methods for listing legal
choices, applying a choice and checking for the end of the game.
"""

from typing import Dict, List, Optional

import numpy as np

from ifactor.debug import debug
from ifactor.utils import (CHOICES, GRID_SIZE, NUMBERS, CELL_POSITIONS, Player, GameResult,
                           find_winning_window, cell_value_at, render_board_ascii)


class Board:
    """
    Represents an iFactor game board.

    Cells are addressed by their product value (``board[12]``), not by grid
    coordinates. Player two opens with a seed choice that places no piece;
    after that every choice claims the cell at ``choice * last_move``.
    """

    def __init__(self):
        """Initialize an empty iFactor board."""
        debug.debug("Initializing new Board", "board")
        self.reset()

    @classmethod
    def from_cells(cls, cells: Dict[int, Player], last_move: int = 0,
                   current_player: Player = Player.TWO) -> 'Board':
        """
        Build a board in an explicit state.

        Args:
            cells: Mapping of cell value to owning player
            last_move: The most recent choice (0 if none yet)
            current_player: The player to move next

        Returns:
            A new Board with the given cells claimed
        """
        board = cls()
        for value, player in cells.items():
            board[value] = player
        board.last_move = last_move
        board.current_player = current_player
        return board

    def reset(self):
        """Reset the board to the start of a game."""
        debug.debug("Resetting board", "board")
        self.grid = np.zeros((GRID_SIZE, GRID_SIZE), dtype=int)
        self.moves_made: List[int] = []
        self.last_move = 0
        self.current_player = Player.TWO
        self.game_result = GameResult.IN_PROGRESS

    def copy(self) -> 'Board':
        """
        Create a deep copy of the current board.

        Returns:
            A new Board instance with the same state
        """
        debug.trace("Creating board copy", "board")
        new_board = Board()
        new_board.grid = self.grid.copy()
        new_board.moves_made = self.moves_made.copy()
        new_board.last_move = self.last_move
        new_board.current_player = self.current_player
        new_board.game_result = self.game_result
        return new_board

    def __getitem__(self, value: int) -> Player:
        position = CELL_POSITIONS.get(value)
        if position is None:
            return Player.EMPTY
        return Player(int(self.grid[position]))

    def __setitem__(self, value: int, player: Player):
        self.grid[CELL_POSITIONS[value]] = player.value

    def is_available(self, value: int) -> bool:
        """Check if a cell is still unclaimed."""
        return self[value] == Player.EMPTY

    def available_moves(self) -> List[int]:
        """
        Get the choices whose product with the last move is still unclaimed.

        Returns:
            Ascending list of numbers from 1 to 9
        """
        return [n for n in CHOICES if self.is_available(n * self.last_move)]

    def is_valid_move(self, choice) -> bool:
        """
        Check if a choice is legal.

        Args:
            choice: The number being chosen

        Returns:
            True if the choice is one of the available moves
        """
        return choice in self.available_moves()

    def apply_move(self, choice: int) -> None:
        """
        Play a choice for the current player.

        The caller must have checked the choice with is_valid_move; nothing
        is re-validated here. The seed choice (no previous move) claims no cell.

        Args:
            choice: The number being chosen (1-9)
        """
        if self.last_move:
            target = choice * self.last_move
            debug.trace(f"Player {self.current_player.number} claims cell {target}", "board")
            self[target] = self.current_player
        else:
            debug.trace(f"Player {self.current_player.number} seeds with {choice}", "board")

        self.moves_made.append(choice)
        self.last_move = choice
        self.current_player = self.current_player.other()

    def check_end(self) -> GameResult:
        """
        Check for a four-in-a-row or a stalemate.

        Rows are scanned first, then columns, then the two diagonals; the
        first run found decides the winner. With no run and no available
        moves the game is a draw.

        Returns:
            The game result, which is also stored on the board
        """
        debug.start_timer("win_check")
        window = find_winning_window(self.grid)
        if window:
            winner = Player(int(self.grid[window[0]]))
            self.game_result = GameResult.win_for(winner)
            debug.debug(f"Player {winner.number} has four in a row", "board")
        elif not self.available_moves():
            self.game_result = GameResult.DRAW
            debug.debug(f"No moves left after {self.last_move}, game is a draw", "board")
        else:
            self.game_result = GameResult.IN_PROGRESS
        debug.end_timer("win_check", "board")
        return self.game_result

    def get_winner(self) -> Optional[Player]:
        return self.game_result.winner

    def get_winning_line(self) -> List[int]:
        """
        Get the cell values of the winning line.

        Returns:
            Cell values of the first winning window, or empty list if no win
        """
        return [cell_value_at(row, col) for row, col in find_winning_window(self.grid)]

    def get_state(self) -> np.ndarray:
        """
        Get the current board state as a numpy array.

        Returns:
            2D numpy array of player values, in the same order as NUMBERS
        """
        return self.grid.copy()

    def claimed_cells(self) -> Dict[int, Player]:
        """Map every claimed cell value to its owner."""
        return {value: self[value] for value in NUMBERS if not self.is_available(value)}

    def render(self) -> str:
        """
        Render the board as a string.

        Returns:
            String representation of the board
        """
        return render_board_ascii(self.grid)

    def __str__(self) -> str:
        """String representation of the board."""
        return self.render()
