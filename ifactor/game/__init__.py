"""
ifactor.game - Core game mechanics for iFactor

This package contains the core game logic, board representation,
and game state management for the iFactor implementation.
"""

from ifactor.game.board import Board
from ifactor.game.rules import IFactorGame, IFactorEnv

__all__ = ['Board', 'IFactorGame', 'IFactorEnv']
