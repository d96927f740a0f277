"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Puzzle constants and deck validation (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    WORD_FOUR_LENGTH, WORD_FIVE_LENGTH, DELETE_KEY, PUZZLE_FILE,
    validate_puzzle_integrity, get_puzzle_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'WORD_FOUR_LENGTH', 'WORD_FIVE_LENGTH', 'DELETE_KEY', 'PUZZLE_FILE',
    'validate_puzzle_integrity', 'get_puzzle_statistics'
]
