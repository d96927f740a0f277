"""
Puzzle Data Models

Contains the immutable puzzle record loaded from the bundled deck.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class PuzzleRecord:
    """One pyramid puzzle: a 3-letter base word grown into 4 and 5 letters."""
    id: int
    word_three: str
    word_four: str
    word_five: str
    hint_four: str
    hint_five: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PuzzleRecord":
        """
        Build a record from its JSON form.

        The deck file names the clue fields ``4hint``/``5hint`` and the id
        ``puzzle_id``.

        Raises:
            KeyError: If a field is missing
            TypeError: If a field has the wrong type
        """
        words = (data['three'], data['four'], data['five'], data['4hint'], data['5hint'])
        if not all(isinstance(value, str) for value in words):
            raise TypeError(f"Puzzle fields must be strings: {data!r}")
        puzzle_id = data['puzzle_id']
        if isinstance(puzzle_id, bool) or not isinstance(puzzle_id, int):
            raise TypeError(f"puzzle_id must be an integer: {puzzle_id!r}")
        return cls(
            id=puzzle_id,
            word_three=data['three'],
            word_four=data['four'],
            word_five=data['five'],
            hint_four=data['4hint'],
            hint_five=data['5hint'],
        )
