"""
Game Service

Keeps independent Word Pyramid sessions and translates client events into
state machine operations.
"""

import threading
import uuid
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from flask import has_request_context, request

from ..config.game_settings import DELETE_KEY
from ..models.game import GamePhase, GameSnapshot
from ..models.puzzle import PuzzleRecord
from ..utils.game_logger import game_logger
from .game_state import GameState


class GameService:
    """
    Core game service managing multiple game sessions.

    This class handles:
    - Session management with unique session IDs
    - Key validation before it reaches the state machine
    - Routing hint/reveal requests to the active word
    - Snapshot generation without exposing answers to clients
    """

    def __init__(self,
                 puzzles: Sequence[PuzzleRecord],
                 transition_delay_seconds: float = 0.0,
                 letter_glow_seconds: float = 0.0):
        self.puzzles: List[PuzzleRecord] = list(puzzles)
        self.transition_delay_seconds = transition_delay_seconds
        self.letter_glow_seconds = letter_glow_seconds
        self.games: Dict[str, GameState] = {}  # Store active sessions by session_id
        self._lock = threading.RLock()

    @property
    def active_sessions(self) -> int:
        return len(self.games)

    def create_session(self) -> str:
        """
        Creates a new session over a freshly shuffled deck.

        Returns:
            str: Unique session ID
        """
        session_id = str(uuid.uuid4())
        game = GameState(
            transition_delay_seconds=self.transition_delay_seconds,
            letter_glow_seconds=self.letter_glow_seconds,
        )
        game.initialize(self.puzzles)
        game.subscribe(self._progress_logger(session_id, game))
        with self._lock:
            self.games[session_id] = game
        return session_id

    def get_game(self, session_id: str) -> Optional[GameState]:
        return self.games.get(session_id)

    def get_session_state(self, session_id: str) -> Optional[GameSnapshot]:
        """
        Returns the current snapshot for a session, applying due deferred
        transitions first.

        Args:
            session_id: Unique session identifier

        Returns:
            GameSnapshot or None if session not found
        """
        with self._lock:
            game = self.games.get(session_id)
            if game is None:
                return None
            game.tick()
            return self.build_snapshot(session_id, game)

    def is_valid_key(self, key) -> Tuple[bool, str]:
        """
        Validates a key sent by a client.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not key or not isinstance(key, str):
            return False, "Key must be a non-empty string"

        if key == DELETE_KEY:
            return True, ""

        if len(key) != 1 or not key.isascii() or not key.isalpha():
            return False, f'Key must be a single letter A-Z or "{DELETE_KEY}"'

        return True, ""

    def key_press(self, session_id: str, key: str) -> Optional[GameSnapshot]:
        """Forward a key press; invalid keys leave the session untouched."""
        is_valid, _ = self.is_valid_key(key)
        if not is_valid:
            return self.get_session_state(session_id)
        if key != DELETE_KEY:
            key = key.upper()
        return self._apply(session_id, lambda game: game.handle_key_press(key))

    def request_hint(self, session_id: str) -> Optional[GameSnapshot]:
        return self._apply(session_id, self._hint_active_word)

    def request_reveal(self, session_id: str) -> Optional[GameSnapshot]:
        return self._apply(session_id, self._reveal_active_word)

    def request_reset(self, session_id: str) -> Optional[GameSnapshot]:
        return self._apply(session_id, lambda game: game.reset_puzzle())

    def request_next(self, session_id: str) -> Optional[GameSnapshot]:
        return self._apply(session_id, lambda game: game.next_puzzle())

    def tick(self, session_id: str) -> Optional[GameSnapshot]:
        """Run due deferred actions for a session."""
        return self._apply(session_id, lambda game: None)

    def next_due(self, session_id: str) -> Optional[float]:
        """Clock time of the session's next deferred action, if any."""
        game = self.games.get(session_id)
        if game is None:
            return None
        return game.next_deferred_due()

    def subscribe(self, session_id: str, callback: Callable[[GameState], None]) -> bool:
        game = self.games.get(session_id)
        if game is None:
            return False
        game.subscribe(callback)
        return True

    def unsubscribe(self, session_id: str, callback: Callable[[GameState], None]) -> bool:
        game = self.games.get(session_id)
        if game is None:
            return False
        game.unsubscribe(callback)
        return True

    def delete_session(self, session_id: str) -> bool:
        """
        Removes a session from memory.

        Returns:
            bool: True if session was deleted, False if not found
        """
        with self._lock:
            if session_id in self.games:
                del self.games[session_id]
                return True
            return False

    def _apply(self, session_id: str, operation: Callable[[GameState], None]) -> Optional[GameSnapshot]:
        with self._lock:
            game = self.games.get(session_id)
            if game is None:
                return None
            game.tick()
            operation(game)
            return self.build_snapshot(session_id, game)

    @staticmethod
    def _hint_active_word(game: GameState) -> None:
        for_word_five = game.active_word()
        if for_word_five is not None:
            game.get_hint(for_word_five)

    @staticmethod
    def _reveal_active_word(game: GameState) -> None:
        for_word_five = game.active_word()
        if for_word_five is not None:
            game.reveal_answer(for_word_five)

    @staticmethod
    def _progress_logger(session_id: str, game: GameState) -> Callable[[GameState], None]:
        """
        Observer that logs puzzle events when the phase moves forward.

        Runs on every commit, so transitions fired later by tick() (HTTP,
        WebSocket or the background flusher) are logged like immediate ones.
        """
        last_phase = [game.session.phase]

        def log_progress(state: GameState) -> None:
            previous, current = last_phase[0], state.session.phase
            last_phase[0] = current
            if previous == current:
                return

            puzzle = state.current_puzzle()
            puzzle_id = puzzle.id if puzzle else None
            user_ip = request.remote_addr if has_request_context() else 'system'

            if previous == GamePhase.IN_WORD_FOUR and current == GamePhase.IN_WORD_FIVE:
                game_logger.log_game_event(
                    session_id, 'word_four_solved', user_ip,
                    puzzle_id=puzzle_id,
                    word=state.assembled_word(state.session.input_four, state.session.hints_four,
                                              len(state.session.hints_four))
                )
            elif current == GamePhase.PUZZLE_COMPLETED:
                game_logger.log_game_event(
                    session_id, 'puzzle_completed', user_ip,
                    puzzle_id=puzzle_id, completed_count=state.session.completed_count
                )

        return log_progress

    @staticmethod
    def build_snapshot(session_id: str, game: GameState) -> GameSnapshot:
        s = game.session
        puzzle = game.current_puzzle()
        word_four = game.assembled_word(s.input_four, s.hints_four, len(s.hints_four))
        word_five = game.assembled_word(s.input_five, s.hints_five, len(s.hints_five))

        return GameSnapshot(
            session_id=session_id,
            has_puzzles=puzzle is not None,
            phase=s.phase.value,
            step=game.current_step_number(),
            puzzle_index=s.current_index,
            total_puzzles=len(s.puzzle_order),
            completed_count=s.completed_count,
            puzzle_id=puzzle.id if puzzle else None,
            word_three=puzzle.word_three.upper() if puzzle else None,
            hint_four=puzzle.hint_four if puzzle else None,
            hint_five=puzzle.hint_five if puzzle else None,
            input_four=s.input_four,
            input_five=s.input_five,
            hints_four=list(s.hints_four),
            hints_five=list(s.hints_five),
            word_four=word_four,
            word_five=word_five,
            word_four_solved=game.is_word_four_solved(),
            word_five_solved=game.is_word_five_solved(),
            word_four_glowing=s.word_four_glowing,
            word_five_glowing=s.word_five_glowing,
            glowing_letters_four=sorted(s.glowing_letters_four),
            glowing_letters_five=sorted(s.glowing_letters_five),
            transition_pending=game.transition_pending,
            show_success=game.should_show_success(),
        )


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(puzzles: Sequence[PuzzleRecord],
                            transition_delay_seconds: float = 0.0,
                            letter_glow_seconds: float = 0.0) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(puzzles, transition_delay_seconds, letter_glow_seconds)
    return _game_service
