import os
import random
import tempfile

# Keep the module-level game logger out of the working tree
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='word_pyramid_logs_'))

import pytest

from word_pyramid import create_app
from word_pyramid.config import TestingConfig
from word_pyramid.models.puzzle import PuzzleRecord
from word_pyramid.services import game_service as game_service_module
from word_pyramid.services.game_state import GameState


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


CAT = PuzzleRecord(1, "cat", "cats", "casts", "More than one feline pet", "Throws a fishing line")
EAR = PuzzleRecord(2, "ear", "earn", "learn", "Receive as payment", "Gain knowledge")
ANT = PuzzleRecord(3, "ant", "pant", "plant", "Breathe quickly", "Something you water")


def type_word(game, word):
    for letter in word:
        game.handle_key_press(letter)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def game():
    """A game over the single CAT puzzle with immediate transitions."""
    state = GameState()
    state.initialize([CAT])
    return state


@pytest.fixture
def deck_game():
    state = GameState(rng=random.Random(7))
    state.initialize([CAT, EAR, ANT])
    return state


@pytest.fixture
def delayed_game(clock):
    state = GameState(transition_delay_seconds=1.0, letter_glow_seconds=1.5, clock=clock)
    state.initialize([CAT])
    return state


@pytest.fixture
def game_service():
    service = game_service_module.initialize_game_service([CAT])
    yield service
    game_service_module._game_service = None


@pytest.fixture
def app(game_service):
    app, socketio = create_app(TestingConfig)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def socket_client(app):
    client = app.socketio.test_client(app)
    yield client
    if client.is_connected():
        client.disconnect()


@pytest.fixture
def game_events(monkeypatch):
    """Names of the game events logged while the test runs."""
    from word_pyramid.utils.game_logger import game_logger

    events = []
    monkeypatch.setattr(
        game_logger, 'log_game_event',
        lambda session_id, event, user_ip, **kwargs: events.append(event)
    )
    return events
