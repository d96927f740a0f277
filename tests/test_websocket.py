import time

from word_pyramid.services import game_service as game_service_module
from word_pyramid.websocket import handlers

from tests.conftest import CAT


def updates(socket_client):
    return [
        message['args'][0]['state']
        for message in socket_client.get_received()
        if message['name'] == 'game_state_update'
    ]


def errors(socket_client):
    return [
        message['args'][0]['error']
        for message in socket_client.get_received()
        if message['name'] == 'error'
    ]


def test_join_game_sends_snapshot(socket_client, game_service):
    session_id = game_service.create_session()
    socket_client.emit('join_game', {'session_id': session_id})
    states = updates(socket_client)
    assert len(states) == 1
    assert states[0]['session_id'] == session_id
    assert states[0]['phase'] == 'IN_WORD_FOUR'


def test_join_requires_session(socket_client):
    socket_client.emit('join_game', {})
    assert errors(socket_client) == ['Session ID is required']

    socket_client.emit('join_game', {'session_id': 'missing'})
    assert errors(socket_client) == ['Session not found']


def test_key_presses_are_broadcast(socket_client, game_service):
    session_id = game_service.create_session()
    socket_client.emit('join_game', {'session_id': session_id})
    socket_client.get_received()

    for letter in 'CATS':
        socket_client.emit('key_press', {'session_id': session_id, 'key': letter})
    states = updates(socket_client)
    assert [state['input_four'] for state in states] == ['C', 'CA', 'CAT', 'CATS']
    assert states[-1]['phase'] == 'IN_WORD_FIVE'


def test_invalid_key_reports_error(socket_client, game_service):
    session_id = game_service.create_session()
    socket_client.emit('join_game', {'session_id': session_id})
    socket_client.get_received()

    socket_client.emit('key_press', {'session_id': session_id, 'key': '!!'})
    assert errors(socket_client) == ['Key must be a single letter A-Z or "DEL"']


def test_buttons_drive_the_same_state(socket_client, game_service):
    session_id = game_service.create_session()
    socket_client.emit('join_game', {'session_id': session_id})
    socket_client.get_received()

    socket_client.emit('request_hint', {'session_id': session_id})
    socket_client.emit('request_reveal', {'session_id': session_id})
    socket_client.emit('request_reveal', {'session_id': session_id})
    states = updates(socket_client)
    assert states[0]['hints_four'] == ['C', '', '', '']
    assert states[-1]['phase'] == 'PUZZLE_COMPLETED'
    assert states[-1]['completed_count'] == 1

    socket_client.emit('request_next', {'session_id': session_id})
    states = updates(socket_client)
    assert states[-1]['phase'] == 'IN_WORD_FOUR'
    assert states[-1]['completed_count'] == 1

    socket_client.emit('request_reset', {'session_id': session_id})
    assert updates(socket_client)[-1]['input_four'] == ''


def test_http_changes_reach_room(socket_client, client, game_service):
    session_id = game_service.create_session()
    socket_client.emit('join_game', {'session_id': session_id})
    socket_client.get_received()

    client.post(f'/api/game/{session_id}/key', json={'key': 'C'})
    assert updates(socket_client)[-1]['input_four'] == 'C'


def test_leave_game_stops_updates(socket_client, game_service):
    session_id = game_service.create_session()
    socket_client.emit('join_game', {'session_id': session_id})
    socket_client.emit('leave_game', {'session_id': session_id})
    socket_client.get_received()

    game_service.key_press(session_id, 'C')
    assert updates(socket_client) == []


def test_delayed_transition_is_pushed(socket_client):
    service = game_service_module.initialize_game_service([CAT], transition_delay_seconds=0.05)
    session_id = service.create_session()
    socket_client.emit('join_game', {'session_id': session_id})
    socket_client.get_received()

    for letter in 'CATS':
        socket_client.emit('key_press', {'session_id': session_id, 'key': letter})
    states = updates(socket_client)
    assert states[-1]['transition_pending'] is True
    assert states[-1]['phase'] == 'IN_WORD_FOUR'

    pushed = []
    deadline = time.monotonic() + 2.0
    while time.monotonic() < deadline:
        pushed.extend(updates(socket_client))
        if pushed and pushed[-1]['phase'] == 'IN_WORD_FIVE':
            break
        time.sleep(0.02)

    assert pushed[-1]['phase'] == 'IN_WORD_FIVE'
    assert pushed[-1]['transition_pending'] is False
    assert service.next_due(session_id) is None


def test_deleted_session_is_forgotten(socket_client, client, game_service):
    session_id = game_service.create_session()
    socket_client.emit('join_game', {'session_id': session_id})
    assert session_id in handlers.broadcasting_sessions

    assert client.delete(f'/api/game/{session_id}').status_code == 200
    assert session_id not in handlers.broadcasting_sessions
    assert session_id not in handlers.flushing_sessions
