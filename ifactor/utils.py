"""
utils.py - Utility functions and constants for the iFactor implementation

This module provides common constants, enumerations, and helper functions
used throughout the iFactor game implementation.
"""

from enum import Enum, auto
from typing import Iterator, List, Sequence, Tuple

import numpy as np

# Game constants
MIN_CHOICE = 1
MAX_CHOICE = 9
CHOICES = list(range(MIN_CHOICE, MAX_CHOICE + 1))
GRID_SIZE = 6
CONNECT_N = 4  # Number of pieces in a row to win

# Every distinct product of two choices, in board order
NUMBERS = sorted({a * b for a in CHOICES for b in CHOICES})

# Cell value -> (row, col) on the 6x6 grid
CELL_POSITIONS = {value: divmod(i, GRID_SIZE) for i, value in enumerate(NUMBERS)}


class Player(Enum):
    """Enumeration representing players and cell states."""
    EMPTY = 0
    ONE = 1    # Places the first piece
    TWO = 2    # Makes the seed choice

    def other(self):
        """Get the other player."""
        if self == Player.ONE:
            return Player.TWO
        elif self == Player.TWO:
            return Player.ONE
        return Player.EMPTY

    @property
    def number(self) -> int:
        """Player number as shown to humans."""
        return self.value

    def __str__(self):
        if self == Player.EMPTY:
            return " "
        elif self == Player.ONE:
            return "X"
        else:
            return "O"


class GameResult(Enum):
    """Enumeration representing the game outcome."""
    IN_PROGRESS = auto()
    PLAYER_ONE_WIN = auto()
    PLAYER_TWO_WIN = auto()
    DRAW = auto()

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self != GameResult.IN_PROGRESS

    @property
    def winner(self):
        """The winning player, or None for a draw or an unfinished game."""
        if self == GameResult.PLAYER_ONE_WIN:
            return Player.ONE
        if self == GameResult.PLAYER_TWO_WIN:
            return Player.TWO
        return None

    @classmethod
    def win_for(cls, player: Player) -> 'GameResult':
        return cls.PLAYER_ONE_WIN if player == Player.ONE else cls.PLAYER_TWO_WIN


def is_product_cell(value: int) -> bool:
    """Check if a value is one of the 36 cells on the board."""
    return value in CELL_POSITIONS


def cell_value_at(row: int, col: int) -> int:
    """Get the cell value shown at a grid position."""
    return NUMBERS[row * GRID_SIZE + col]


def scan_lines(grid: np.ndarray) -> Iterator[List[Tuple[int, int]]]:
    """
    Yield the lines searched for a four-in-a-row, in scan order.

    Rows come first, then columns, then the main diagonal and
    the anti-diagonal. Each line is a list of (row, col) positions.

    Args:
        grid: The game board

    Yields:
        Lists of (row, col) positions
    """
    rows, cols = grid.shape
    for row in range(rows):
        yield [(row, col) for col in range(cols)]
    for col in range(cols):
        yield [(row, col) for row in range(rows)]
    yield [(i, i) for i in range(rows)]
    yield [(i, cols - 1 - i) for i in range(rows)]


def find_winning_window(grid: np.ndarray) -> List[Tuple[int, int]]:
    """
    Find the first run of CONNECT_N same-player cells in scan order.

    Args:
        grid: The game board

    Returns:
        The (row, col) positions of the winning window, or an empty list
    """
    for line in scan_lines(grid):
        values = np.array([grid[r, c] for r, c in line])
        for start in range(len(line) - CONNECT_N + 1):
            window = values[start:start + CONNECT_N]
            if window[0] != Player.EMPTY.value and np.all(window == window[0]):
                return line[start:start + CONNECT_N]
    return []


def format_choices(choices: Sequence[int]) -> str:
    """
    Format a list of numbers the way the prompts read them.

    >>> format_choices([1, 2, 3])
    '1 2 or 3'
    """
    words = [str(n) for n in choices]
    if len(words) > 1:
        words.insert(-1, "or")
    return " ".join(words)


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render the board as text.

    Available cells show their number, claimed cells show the owner's symbol.

    Args:
        grid: The game board

    Returns:
        Text representation of the board
    """
    lines = []
    for row in range(grid.shape[0]):
        cells = []
        for col in range(grid.shape[1]):
            owner = Player(int(grid[row, col]))
            if owner == Player.EMPTY:
                cells.append(str(cell_value_at(row, col)).rjust(2))
            else:
                cells.append(str(owner).rjust(2))
        lines.append(" ".join(cells))
    return "\n".join(lines)
