"""
Game Configuration Constants Module

This module defines the puzzle constants shared by the state machine, the
service layer and the controllers, plus offline validation helpers for the
bundled puzzle deck.
"""

import os
from typing import Dict, List, Final, Sequence

from ..models.puzzle import PuzzleRecord

WORD_FOUR_LENGTH: Final[int] = 4
"""Length of the step-one answer."""

WORD_FIVE_LENGTH: Final[int] = 5
"""Length of the step-two answer."""

DELETE_KEY: Final[str] = "DEL"
"""Key name forwarded by clients for backspace."""

PLACEHOLDER: Final[str] = " "

PUZZLE_FILE: Final[str] = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), 'pyramid_puzzles.json'
)
"""Bundled puzzle deck, used when Config.PUZZLE_FILE is not set."""


def is_single_insertion(shorter: str, longer: str) -> bool:
    """Return True if ``longer`` is ``shorter`` with exactly one letter inserted."""
    shorter = shorter.upper()
    longer = longer.upper()
    if len(longer) != len(shorter) + 1:
        return False
    return any(longer[:i] + longer[i + 1:] == shorter for i in range(len(longer)))


def validate_puzzle_integrity(puzzles: Sequence[PuzzleRecord]) -> bool:
    """
    Validates the integrity and consistency of a puzzle deck.

    The state machine trusts its puzzle source, so this check is meant for
    tooling and tests rather than the request path:
    1. Length validation: 3, 4 and 5 letter words
    2. Character validation: Only alphabetic characters allowed
    3. Pyramid validation: each word is the previous one plus one letter
    4. Uniqueness validation: No duplicate puzzle ids

    Returns:
        bool: True if the deck passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not puzzles:
        raise ValueError("Puzzle deck cannot be empty")

    for index, puzzle in enumerate(puzzles):
        words = (puzzle.word_three, puzzle.word_four, puzzle.word_five)
        for expected, word in zip((3, WORD_FOUR_LENGTH, WORD_FIVE_LENGTH), words):
            if len(word) != expected:
                raise ValueError(f"Puzzle at index {index} word '{word}' is not {expected} characters long")
            if not word.isalpha():
                raise ValueError(f"Puzzle at index {index} word '{word}' contains non-alphabetic characters")

        if not is_single_insertion(puzzle.word_three, puzzle.word_four):
            raise ValueError(
                f"Puzzle {puzzle.id}: '{puzzle.word_four}' is not '{puzzle.word_three}' plus one letter"
            )
        if not is_single_insertion(puzzle.word_four, puzzle.word_five):
            raise ValueError(
                f"Puzzle {puzzle.id}: '{puzzle.word_five}' is not '{puzzle.word_four}' plus one letter"
            )

    ids = [puzzle.id for puzzle in puzzles]
    if len(ids) != len(set(ids)):
        duplicates = sorted({pid for pid in ids if ids.count(pid) > 1})
        raise ValueError(f"Duplicate puzzle ids found in deck: {duplicates}")

    return True


def get_puzzle_statistics(puzzles: Sequence[PuzzleRecord]) -> Dict:
    """
    Summarizes a puzzle deck.

    Returns:
        dict: Statistical information including:
            - total_puzzles: Number of puzzles in the deck
            - inserted_letters: How often each letter is the one added in a step
            - most_common_inserted: Top five inserted letters
    """
    if not puzzles:
        return {"error": "Puzzle deck is empty"}

    inserted: Dict[str, int] = {}
    for puzzle in puzzles:
        for shorter, longer in ((puzzle.word_three, puzzle.word_four),
                                (puzzle.word_four, puzzle.word_five)):
            for letter in _inserted_letters(shorter.upper(), longer.upper()):
                inserted[letter] = inserted.get(letter, 0) + 1

    return {
        "total_puzzles": len(puzzles),
        "inserted_letters": inserted,
        "most_common_inserted": sorted(inserted.items(), key=lambda x: x[1], reverse=True)[:5]
    }


def _inserted_letters(shorter: str, longer: str) -> List[str]:
    remaining = list(longer)
    for letter in shorter:
        if letter in remaining:
            remaining.remove(letter)
    return remaining
