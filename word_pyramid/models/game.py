"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set

from .puzzle import PuzzleRecord


class GamePhase(Enum):
    """Stage of solving a single puzzle."""
    IN_WORD_FOUR = "IN_WORD_FOUR"
    IN_WORD_FIVE = "IN_WORD_FIVE"
    PUZZLE_COMPLETED = "PUZZLE_COMPLETED"


def empty_hints(length: int) -> List[str]:
    """Hint slots for a word of ``length`` letters, all unset."""
    return [""] * length


@dataclass
class GameSession:
    """Mutable record owned by a GameState."""
    puzzle_order: List[PuzzleRecord] = field(default_factory=list)
    current_index: int = 0
    phase: GamePhase = GamePhase.IN_WORD_FOUR
    input_four: str = ""
    input_five: str = ""
    hints_four: List[str] = field(default_factory=lambda: empty_hints(4))
    hints_five: List[str] = field(default_factory=lambda: empty_hints(5))
    completed_count: int = 0
    # Animation hooks
    word_four_glowing: bool = False
    word_five_glowing: bool = False
    glowing_letters_four: Set[int] = field(default_factory=set)
    glowing_letters_five: Set[int] = field(default_factory=set)


@dataclass
class GameSnapshot:
    """Client-side read model of one session (JSON-serializable via asdict)."""
    session_id: str
    has_puzzles: bool
    phase: str
    step: int
    puzzle_index: int
    total_puzzles: int
    completed_count: int
    puzzle_id: Optional[int]
    word_three: Optional[str]
    hint_four: Optional[str]
    hint_five: Optional[str]
    input_four: str
    input_five: str
    hints_four: List[str]
    hints_five: List[str]
    word_four: str  # assembled from hints and input
    word_five: str
    word_four_solved: bool
    word_five_solved: bool
    word_four_glowing: bool
    word_five_glowing: bool
    glowing_letters_four: List[int]
    glowing_letters_five: List[int]
    transition_pending: bool
    show_success: bool
