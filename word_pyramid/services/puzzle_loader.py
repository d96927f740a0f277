"""
Puzzle Loader

Reads the puzzle deck from its JSON file. Loading fails soft: any problem
with the file is logged and produces an empty deck, which the game exposes
as the "no puzzles available" state.
"""

import json
import logging
from typing import List, Optional

from ..config.game_settings import PUZZLE_FILE
from ..models.puzzle import PuzzleRecord

logger = logging.getLogger(__name__)


def load_puzzles(path: Optional[str] = None) -> List[PuzzleRecord]:
    """
    Load puzzle records from a JSON array file.

    Args:
        path: Deck file to read; defaults to the bundled deck

    Returns:
        List[PuzzleRecord]: Puzzles in file order, or an empty list on error
    """
    json_file_path = path or PUZZLE_FILE

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            raw_puzzles = json.load(f)

        if not isinstance(raw_puzzles, list):
            raise ValueError("JSON file must contain an array of puzzles")

        puzzles = [PuzzleRecord.from_dict(entry) for entry in raw_puzzles]

    except (OSError, ValueError, KeyError, TypeError) as e:
        # json.JSONDecodeError is a ValueError
        logger.error(f"Error loading puzzles from {json_file_path}: {e}")
        return []

    logger.info(f"Loaded {len(puzzles)} puzzles from {json_file_path}")
    return puzzles
