"""
rules.py - Game state management and Gymnasium environment for iFactor

This module provides:
1. Game state management for the iFactor game, with move history and undo
2. A gymnasium-compatible environment for scripted and self-play drivers
"""

import numpy as np
import gymnasium as gym
from gymnasium import spaces
from typing import Dict, Tuple, List, Optional, Union

from ifactor.debug import debug
from ifactor.utils import GRID_SIZE, MIN_CHOICE, MAX_CHOICE, Player, GameResult
from ifactor.game.board import Board


class IFactorGame:
    """
    High-level iFactor game manager.

    Validates choices before handing them to the board, evaluates the end
    of the game after every choice, and keeps snapshots for undo.
    """

    def __init__(self, board: Optional[Board] = None):
        """Initialize a new iFactor game, optionally from an existing board."""
        debug.debug("Initializing IFactorGame", "game")
        self.board = board if board is not None else Board()
        self.history: List[Board] = []

    def reset(self) -> None:
        """Reset the game to initial state."""
        debug.debug("Resetting game", "game")
        self.board.reset()
        self.history = []

    def make_move(self, choice: int) -> bool:
        """
        Make a choice for the current player.

        Args:
            choice: Number from 1 to 9

        Returns:
            True if the choice was played, False if it was not legal
        """
        if self.is_game_over():
            debug.debug(f"Rejected {choice}: game is over ({self.board.game_result.name})", "game")
            return False

        if not self.board.is_valid_move(choice):
            debug.debug(f"Rejected {choice}: available moves are {self.board.available_moves()}", "game")
            return False

        self.history.append(self.board.copy())
        self.board.apply_move(choice)
        result = self.board.check_end()
        if result.is_game_over():
            debug.info(f"Game over after {len(self.board.moves_made)} choices: {result.name}", "game")
        return True

    def undo_move(self) -> bool:
        """
        Undo the last choice.

        Returns:
            True if a choice was undone, False otherwise
        """
        if not self.history:
            debug.debug("No moves to undo", "game")
            return False

        debug.debug("Undoing last move", "game")
        self.board = self.history.pop()
        return True

    def get_state(self) -> Board:
        return self.board

    def is_game_over(self) -> bool:
        return self.board.game_result.is_game_over()

    def is_seed_turn(self) -> bool:
        """True until player two has made the opening choice."""
        return self.board.last_move == 0

    def get_winner(self) -> Optional[Player]:
        """
        Get the winner of the game.

        Returns:
            The winning player, or None if no winner yet or draw
        """
        return self.board.get_winner()

    def get_current_player(self) -> Player:
        return self.board.current_player

    def get_last_move(self) -> int:
        return self.board.last_move

    def get_valid_moves(self) -> List[int]:
        return self.board.available_moves()

    def render(self) -> str:
        return self.board.render()


class IFactorEnv(gym.Env):
    """
    iFactor environment following the Gymnasium interface.

    Action ``a`` chooses the number ``a + 1``. The first step of every
    episode is player two's seed choice.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    def __init__(self, render_mode: Optional[str] = None):
        """
        Initialize the iFactor environment.

        Args:
            render_mode: Mode for rendering the environment
        """
        debug.debug("Initializing IFactorEnv", "env")

        self.action_space = spaces.Discrete(MAX_CHOICE - MIN_CHOICE + 1)

        # Observation space: 6x6 board of product cells with 3 possible values (0, 1, 2)
        self.observation_space = spaces.Box(
            low=0, high=2, shape=(GRID_SIZE, GRID_SIZE), dtype=np.int8
        )

        self.game = IFactorGame()
        self.render_mode = render_mode

        self.reward_win = 1.0
        self.reward_lose = -1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = 0.0

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        """
        Reset the environment to initial state.

        Args:
            seed: Random seed for reproducibility
            options: Additional options for reset

        Returns:
            Initial observation and info dictionary
        """
        debug.debug("Resetting environment", "env")
        super().reset(seed=seed)
        self.game.reset()

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Take a step in the environment by making a choice.

        Args:
            action: Index of the number to choose (0 chooses 1)

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        choice = int(action) + MIN_CHOICE
        debug.trace(f"Environment step with choice {choice}", "env")

        if not self.game.make_move(choice):
            debug.warning(f"Invalid action: {action}", "env")
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        reward = self.reward_step
        terminated = self.game.is_game_over()
        result = self.game.board.game_result
        if result == GameResult.PLAYER_ONE_WIN:
            reward = self.reward_win
        elif result == GameResult.PLAYER_TWO_WIN:
            reward = self.reward_lose
        elif result == GameResult.DRAW:
            reward = self.reward_draw

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), reward, terminated, False, self._get_info()

    def render(self) -> Optional[Union[str, np.ndarray]]:
        """
        Render the current state of the environment.

        Returns:
            Board text for 'ascii', None otherwise
        """
        if self.render_mode == "ascii":
            return self.game.render()

        if self.render_mode == "human":
            print(self.game.render())
        return None

    def action_masks(self) -> np.ndarray:
        """Boolean mask over the action space, True where the choice is legal."""
        mask = np.zeros(self.action_space.n, dtype=bool)
        for choice in self.game.get_valid_moves():
            mask[choice - MIN_CHOICE] = True
        return mask

    def _get_observation(self) -> np.ndarray:
        return self.game.board.get_state().astype(np.int8)

    def _get_info(self) -> Dict:
        valid_moves = self.game.get_valid_moves()
        return {
            'valid_moves': valid_moves,
            'num_valid_moves': len(valid_moves),
            'current_player': self.game.get_current_player().value,
            'last_move': self.game.get_last_move(),
            'game_result': self.game.board.game_result.name,
            'winning_line': self.game.board.get_winning_line(),
            'moves_made': len(self.game.board.moves_made),
        }
