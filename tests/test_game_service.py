import pytest

from word_pyramid.models.game import GamePhase
from word_pyramid.services.game_service import GameService

from tests.conftest import CAT, EAR


@pytest.fixture
def service():
    return GameService([CAT])


def press(service, session_id, word):
    state = None
    for letter in word:
        state = service.key_press(session_id, letter)
    return state


def test_create_session_snapshot(service):
    session_id = service.create_session()
    state = service.get_session_state(session_id)
    assert state.session_id == session_id
    assert state.has_puzzles
    assert state.phase == GamePhase.IN_WORD_FOUR.value
    assert state.step == 1
    assert state.total_puzzles == 1
    assert state.word_three == "CAT"
    assert state.hint_four == CAT.hint_four
    assert not state.show_success
    assert service.active_sessions == 1


def test_sessions_are_independent(service):
    first = service.create_session()
    second = service.create_session()
    press(service, first, "CATS")
    assert service.get_session_state(first).phase == GamePhase.IN_WORD_FIVE.value
    assert service.get_session_state(second).phase == GamePhase.IN_WORD_FOUR.value


def test_unknown_session(service):
    assert service.get_session_state("nope") is None
    assert service.key_press("nope", "A") is None
    assert service.request_hint("nope") is None
    assert service.request_next("nope") is None
    assert service.next_due("nope") is None
    assert not service.subscribe("nope", lambda game: None)


@pytest.mark.parametrize("key,valid", [
    ("A", True), ("z", True), ("DEL", True),
    ("", False), (None, False), ("AB", False), ("1", False), ("del", False), (5, False),
])
def test_is_valid_key(service, key, valid):
    assert service.is_valid_key(key)[0] is valid


def test_invalid_key_leaves_session_untouched(service):
    session_id = service.create_session()
    state = service.key_press(session_id, "?")
    assert state.input_four == ""


def test_full_round_trip(service):
    session_id = service.create_session()
    state = press(service, session_id, "cats")
    assert state.word_four == "CATS"
    assert state.word_four_solved
    assert state.step == 2

    state = press(service, session_id, "CASTS")
    assert state.phase == GamePhase.PUZZLE_COMPLETED.value
    assert state.completed_count == 1
    assert state.show_success


def test_hint_and_reveal_target_active_word(service):
    session_id = service.create_session()
    state = service.request_hint(session_id)
    assert state.hints_four == ["C", "", "", ""]

    state = service.request_reveal(session_id)
    assert state.input_four == "CATS"
    assert state.phase == GamePhase.IN_WORD_FIVE.value

    state = service.request_hint(session_id)
    assert state.hints_five == ["C", "", "", "", ""]

    state = service.request_reveal(session_id)
    assert state.phase == GamePhase.PUZZLE_COMPLETED.value
    assert state.completed_count == 1

    # Nothing is active once the puzzle is done
    state = service.request_reveal(session_id)
    assert state.completed_count == 1
    state = service.request_hint(session_id)
    assert state.hints_five == ["", "", "", "", ""]


def test_reset_and_next(service):
    session_id = service.create_session()
    service.request_reveal(session_id)
    service.request_reveal(session_id)

    state = service.request_reset(session_id)
    assert state.phase == GamePhase.IN_WORD_FOUR.value
    assert state.completed_count == 1

    state = service.request_next(session_id)
    assert state.puzzle_index == 0
    assert state.completed_count == 1


def test_empty_deck_session():
    service = GameService([])
    session_id = service.create_session()
    state = service.request_hint(session_id)
    assert not state.has_puzzles
    assert state.puzzle_id is None
    assert state.word_three is None
    assert state.total_puzzles == 0
    assert service.request_next(session_id).puzzle_index == 0


def test_subscribe_receives_changes(service):
    session_id = service.create_session()
    seen = []
    assert service.subscribe(session_id, lambda game: seen.append(game.session.input_four))
    service.key_press(session_id, "C")
    service.key_press(session_id, "A")
    assert seen == ["C", "CA"]

    assert service.unsubscribe(session_id, seen.append) is True


def test_deferred_transition_applied_on_read():
    service = GameService([CAT, EAR], transition_delay_seconds=1.0)
    session_id = service.create_session()
    game = service.get_game(session_id)
    answer = game.current_puzzle().word_four.upper()

    state = press(service, session_id, answer)
    assert state.transition_pending
    assert state.word_four_glowing
    assert service.next_due(session_id) is not None

    game.deferred.clock = lambda: float("inf")
    state = service.get_session_state(session_id)
    assert state.phase == GamePhase.IN_WORD_FIVE.value
    assert not state.transition_pending


def test_delayed_transitions_are_logged(game_events):
    service = GameService([CAT], transition_delay_seconds=1.0)
    session_id = service.create_session()
    game = service.get_game(session_id)

    state = press(service, session_id, "CATS")
    assert state.transition_pending
    assert game_events == []

    game.deferred.clock = lambda: float("inf")
    service.get_session_state(session_id)
    assert game_events == ["word_four_solved"]

    press(service, session_id, "CASTS")
    service.tick(session_id)
    assert game_events == ["word_four_solved", "puzzle_completed"]


def test_progress_logged_once_per_phase_change(service, game_events):
    session_id = service.create_session()
    press(service, session_id, "CATS")
    service.key_press(session_id, "C")
    service.request_reveal(session_id)
    service.request_reveal(session_id)
    assert game_events == ["word_four_solved", "puzzle_completed"]


def test_delete_session(service):
    session_id = service.create_session()
    assert service.delete_session(session_id)
    assert not service.delete_session(session_id)
    assert service.get_session_state(session_id) is None
