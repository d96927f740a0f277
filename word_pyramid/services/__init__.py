"""
Services Package

Contains all business logic and service classes.
"""

from .deferred import DeferredActionQueue
from .game_state import GameState
from .game_service import GameService, get_game_service, initialize_game_service
from .puzzle_loader import load_puzzles

__all__ = [
    'DeferredActionQueue',
    'GameState',
    'GameService', 'get_game_service', 'initialize_game_service',
    'load_puzzles'
]
