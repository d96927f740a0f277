"""
Game State Machine

Contains the puzzle progression logic for Word Pyramid: per-word input and
hint buffers, completion detection and the step transitions between the
4-letter word, the 5-letter word and the completed puzzle.
"""

import logging
import random
import time
from typing import Callable, Hashable, List, Optional, Sequence, Tuple

from ..config.game_settings import WORD_FOUR_LENGTH, WORD_FIVE_LENGTH, DELETE_KEY, PLACEHOLDER
from ..models.game import GamePhase, GameSession, empty_hints
from ..models.puzzle import PuzzleRecord
from .deferred import DeferredActionQueue

logger = logging.getLogger(__name__)

Observer = Callable[["GameState"], None]


class GameState:
    """
    Single authority for puzzle progression within one play session.

    This class handles:
    - Deck shuffling and the current puzzle pointer
    - Letter entry and backspace around hinted positions
    - Hints and full reveals
    - Phase transitions, optionally delayed behind a glow animation
    - Notifying subscribers after every change
    """

    def __init__(self,
                 transition_delay_seconds: float = 0.0,
                 letter_glow_seconds: float = 0.0,
                 clock: Callable[[], float] = time.monotonic,
                 rng: Optional[random.Random] = None):
        self.session = GameSession()
        self.transition_delay_seconds = transition_delay_seconds
        self.letter_glow_seconds = letter_glow_seconds
        self.deferred = DeferredActionQueue(clock)
        self._rng = rng or random.Random()
        self._observers: List[Observer] = []
        # Bumped on initialize/reset/next and on every phase commit respectively
        self._puzzle_generation = 0
        self._phase_generation = 0
        self._transition_pending = False

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Observer) -> None:
        """Register ``callback`` to be called with this GameState after each change."""
        if callback not in self._observers:
            self._observers.append(callback)

    def unsubscribe(self, callback: Observer) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._observers):
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Game state observer {callback!r} failed: {e}")

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def current_puzzle(self) -> Optional[PuzzleRecord]:
        order = self.session.puzzle_order
        if 0 <= self.session.current_index < len(order):
            return order[self.session.current_index]
        return None

    @staticmethod
    def assembled_word(buffer: str, hints: Sequence[str], length: int) -> str:
        """
        Overlay hint letters on typed input.

        Each position takes its hint letter if one is set, otherwise the
        typed character at that position if the buffer reaches it.
        """
        letters = []
        for i in range(length):
            if i < len(hints) and hints[i]:
                letters.append(hints[i])
            elif i < len(buffer):
                letters.append(buffer[i])
        return "".join(letters)

    def is_word_four_solved(self) -> bool:
        puzzle = self.current_puzzle()
        if puzzle is None:
            return False
        word = self.assembled_word(self.session.input_four, self.session.hints_four, WORD_FOUR_LENGTH)
        return word == puzzle.word_four.upper()

    def is_word_five_solved(self) -> bool:
        puzzle = self.current_puzzle()
        if puzzle is None:
            return False
        word = self.assembled_word(self.session.input_five, self.session.hints_five, WORD_FIVE_LENGTH)
        return word == puzzle.word_five.upper()

    def is_puzzle_completed(self) -> bool:
        return self.session.phase == GamePhase.PUZZLE_COMPLETED

    def should_show_success(self) -> bool:
        return self.is_puzzle_completed()

    def current_step_number(self) -> int:
        """1 while building the 4-letter word, 2 afterwards."""
        return 1 if self.session.phase == GamePhase.IN_WORD_FOUR else 2

    def active_word(self) -> Optional[bool]:
        """
        Which word takes input.

        Returns:
            False for the 4-letter word, True for the 5-letter word,
            None once the puzzle is completed
        """
        if self.session.phase == GamePhase.IN_WORD_FOUR:
            return False
        if self.session.phase == GamePhase.IN_WORD_FIVE:
            return True
        return None

    @property
    def transition_pending(self) -> bool:
        return self._transition_pending

    # ------------------------------------------------------------------
    # Deck lifecycle
    # ------------------------------------------------------------------

    def initialize(self, puzzles: Sequence[PuzzleRecord]) -> None:
        """Start a fresh session over a shuffled copy of ``puzzles``."""
        order = list(puzzles)
        self._rng.shuffle(order)
        self.session = GameSession(puzzle_order=order)
        self.reset_puzzle()

    def reset_puzzle(self) -> None:
        """Clear input, hints and glow for the current puzzle."""
        s = self.session
        s.phase = GamePhase.IN_WORD_FOUR
        s.input_four = ""
        s.input_five = ""
        s.hints_four = empty_hints(WORD_FOUR_LENGTH)
        s.hints_five = empty_hints(WORD_FIVE_LENGTH)
        s.word_four_glowing = False
        s.word_five_glowing = False
        s.glowing_letters_four = set()
        s.glowing_letters_five = set()

        self._puzzle_generation += 1
        self._transition_pending = False
        self._notify()

    def next_puzzle(self) -> None:
        """Advance to the next puzzle in the deck, wrapping at the end."""
        total = len(self.session.puzzle_order)
        if total:
            self.session.current_index = (self.session.current_index + 1) % total
        self.reset_puzzle()

    # ------------------------------------------------------------------
    # Player input
    # ------------------------------------------------------------------

    def handle_key_press(self, key: str) -> None:
        """
        Apply a keyboard event to the active word.

        Args:
            key: "DEL" or a single letter A-Z
        """
        if self.current_puzzle() is None or self._transition_pending:
            return
        for_word_five = self.active_word()
        if for_word_five is None:
            return

        if key == DELETE_KEY:
            changed = self._handle_backspace(for_word_five)
        elif len(key) == 1 and key.isascii() and key.isalpha():
            changed = self._handle_letter_input(for_word_five, key.upper())
        else:
            logger.debug(f"Ignoring unsupported key {key!r}")
            return

        progressed = self._check_progression()
        if changed or progressed:
            self._notify()

    def _handle_backspace(self, for_word_five: bool) -> bool:
        # Removes at the last unhinted index, which may sit mid-buffer and
        # shift the characters after it left.
        buffer, hints, _ = self._word(for_word_five)
        for i in range(len(buffer) - 1, -1, -1):
            if not hints[i]:
                self._set_input(for_word_five, buffer[:i] + buffer[i + 1:])
                return True
        return False

    def _handle_letter_input(self, for_word_five: bool, letter: str) -> bool:
        buffer, hints, max_length = self._word(for_word_five)
        if len(buffer) >= max_length:
            return False

        for i in range(max_length):
            if hints[i]:
                continue
            if i < len(buffer) and buffer[i] == PLACEHOLDER:
                self._set_input(for_word_five, buffer[:i] + letter + buffer[i + 1:])
                return True
            if i >= len(buffer):
                self._set_input(for_word_five, buffer.ljust(i, PLACEHOLDER) + letter)
                return True
        return False

    def get_hint(self, for_word_five: bool) -> None:
        """Reveal the leftmost unhinted letter of the chosen word."""
        puzzle = self.current_puzzle()
        if puzzle is None or self.is_puzzle_completed() or self._transition_pending:
            return

        target = self._answer(puzzle, for_word_five)
        _, hints, _ = self._word(for_word_five)

        changed = False
        for i in range(min(len(target), len(hints))):
            if not hints[i]:
                hints[i] = target[i]
                self._glow_letter(for_word_five, i)
                changed = True
                break

        progressed = self._check_progression()
        if changed or progressed:
            self._notify()

    def reveal_answer(self, for_word_five: bool) -> None:
        """Fill the chosen word with its answer and move on immediately."""
        puzzle = self.current_puzzle()
        if puzzle is None or self.is_puzzle_completed():
            return

        target = self._answer(puzzle, for_word_five)
        s = self.session
        if for_word_five:
            s.input_five = target
            s.hints_five = empty_hints(WORD_FIVE_LENGTH)
        else:
            s.input_four = target
            s.hints_four = empty_hints(WORD_FOUR_LENGTH)

        self._commit_phase(for_word_five)
        if self.transition_delay_seconds > 0:
            self._set_word_glow(for_word_five, True)
            self.deferred.schedule(
                self.transition_delay_seconds,
                lambda: self._set_word_glow(for_word_five, False),
                self._puzzle_token(),
            )
        self._notify()

    # ------------------------------------------------------------------
    # Progression
    # ------------------------------------------------------------------

    def _check_progression(self) -> bool:
        if self._transition_pending:
            return False
        phase = self.session.phase
        if phase == GamePhase.IN_WORD_FOUR and self.is_word_four_solved():
            return self._begin_transition(False)
        if phase == GamePhase.IN_WORD_FIVE and self.is_word_five_solved():
            return self._begin_transition(True)
        return False

    def _begin_transition(self, for_word_five: bool) -> bool:
        if self.transition_delay_seconds <= 0:
            self._commit_phase(for_word_five)
            return True

        self._set_word_glow(for_word_five, True)
        self._transition_pending = True
        self.deferred.schedule(
            self.transition_delay_seconds,
            lambda: self._finish_transition(for_word_five),
            self._phase_token(),
        )
        return True

    def _finish_transition(self, for_word_five: bool) -> None:
        self._set_word_glow(for_word_five, False)
        self._commit_phase(for_word_five)

    def _commit_phase(self, for_word_five: bool) -> None:
        if for_word_five:
            self.session.phase = GamePhase.PUZZLE_COMPLETED
            self.session.completed_count += 1
        else:
            self.session.phase = GamePhase.IN_WORD_FIVE
        self._phase_generation += 1
        self._transition_pending = False

    # ------------------------------------------------------------------
    # Deferred actions
    # ------------------------------------------------------------------

    def tick(self, now: Optional[float] = None) -> int:
        """Run deferred actions that are due; returns how many ran."""
        fired = self.deferred.run_due(self._is_token_current, now)
        if fired:
            self._notify()
        return fired

    def next_deferred_due(self) -> Optional[float]:
        return self.deferred.next_due()

    def _puzzle_token(self) -> Tuple:
        return ("puzzle", self._puzzle_generation)

    def _phase_token(self) -> Tuple:
        return ("phase", self._puzzle_generation, self._phase_generation)

    def _is_token_current(self, token: Hashable) -> bool:
        if token[0] == "phase":
            return token[1:] == (self._puzzle_generation, self._phase_generation)
        return token[1] == self._puzzle_generation

    def _glow_letter(self, for_word_five: bool, index: int) -> None:
        if self.letter_glow_seconds <= 0:
            return
        glowing = self.session.glowing_letters_five if for_word_five else self.session.glowing_letters_four
        glowing.add(index)
        self.deferred.schedule(self.letter_glow_seconds, lambda: glowing.discard(index), self._puzzle_token())

    def _set_word_glow(self, for_word_five: bool, value: bool) -> None:
        if for_word_five:
            self.session.word_five_glowing = value
        else:
            self.session.word_four_glowing = value

    # ------------------------------------------------------------------
    # Buffer helpers
    # ------------------------------------------------------------------

    def _word(self, for_word_five: bool) -> Tuple[str, List[str], int]:
        s = self.session
        if for_word_five:
            return s.input_five, s.hints_five, WORD_FIVE_LENGTH
        return s.input_four, s.hints_four, WORD_FOUR_LENGTH

    def _set_input(self, for_word_five: bool, value: str) -> None:
        if for_word_five:
            self.session.input_five = value
        else:
            self.session.input_four = value

    @staticmethod
    def _answer(puzzle: PuzzleRecord, for_word_five: bool) -> str:
        return (puzzle.word_five if for_word_five else puzzle.word_four).upper()
