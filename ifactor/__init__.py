"""
ifactor - iFactor, a Connect Four variant played with multiplication

This package provides the game engine (board, move legality, win and draw
detection, turn sequencing), a Gymnasium environment around it, and a
console interface for two players.
"""

# Version number
__version__ = '0.1.0'
