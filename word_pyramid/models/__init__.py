"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import GamePhase, GameSession, GameSnapshot
from .puzzle import PuzzleRecord

__all__ = ['GamePhase', 'GameSession', 'GameSnapshot', 'PuzzleRecord']
