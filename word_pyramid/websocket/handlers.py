"""
WebSocket Event Handlers

Handles the real-time event surface: key presses and button presses come in
as Socket.IO events, and every state change (including delayed phase flips)
is pushed back to the session room as a snapshot.
"""

import time
from dataclasses import asdict
from flask import request
from flask_socketio import emit, join_room, leave_room
from ..services.game_service import get_game_service
from ..utils.decorators import websocket_session_required
from ..utils.game_logger import game_logger

# Sessions that already broadcast their changes, and sessions with a
# background task waiting on deferred actions
broadcasting_sessions = set()
flushing_sessions = set()


def session_room(session_id):
    return f"game_{session_id}"


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        pass

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Handle WebSocket disconnection."""
        game_logger.logger.info(f"WebSocket: client {request.sid} disconnected")

    @socketio.on('join_game')
    @websocket_session_required
    def handle_join_game(data, game_service=None, session_id=None):
        """Join a session room for real-time updates."""
        try:
            join_room(session_room(session_id))
            ensure_broadcasting(socketio, session_id)

            game_logger.logger.info(f"WebSocket: {request.sid} joined session {session_id}")

            state = game_service.get_session_state(session_id)
            emit('game_state_update', {
                'success': True,
                'state': asdict(state)
            })

        except Exception as e:
            game_logger.log_error(request, e, 'join_game', session_id)
            emit('error', {'error': str(e)})

    @socketio.on('leave_game')
    @websocket_session_required
    def handle_leave_game(data, game_service=None, session_id=None):
        """Leave a session room."""
        leave_room(session_room(session_id))
        game_logger.logger.info(f"WebSocket: {request.sid} left session {session_id}")

    @socketio.on('key_press')
    @websocket_session_required
    def handle_key_press(data, game_service=None, session_id=None):
        """Forward a key press via WebSocket."""
        key = data.get('key')
        game_logger.log_user_action(request, 'key_press', session_id, key=key, transport='websocket')

        is_valid, error = game_service.is_valid_key(key)
        if not is_valid:
            emit('error', {'error': error, 'session_id': session_id})
            return

        run_session_event(socketio, session_id, game_service.key_press, key)

    @socketio.on('request_hint')
    @websocket_session_required
    def handle_request_hint(data, game_service=None, session_id=None):
        game_logger.log_user_action(request, 'request_hint', session_id, transport='websocket')
        run_session_event(socketio, session_id, game_service.request_hint)

    @socketio.on('request_reveal')
    @websocket_session_required
    def handle_request_reveal(data, game_service=None, session_id=None):
        game_logger.log_user_action(request, 'request_reveal', session_id, transport='websocket')
        run_session_event(socketio, session_id, game_service.request_reveal)

    @socketio.on('request_reset')
    @websocket_session_required
    def handle_request_reset(data, game_service=None, session_id=None):
        game_logger.log_user_action(request, 'request_reset', session_id, transport='websocket')
        run_session_event(socketio, session_id, game_service.request_reset)

    @socketio.on('request_next')
    @websocket_session_required
    def handle_request_next(data, game_service=None, session_id=None):
        game_logger.log_user_action(request, 'request_next', session_id, transport='websocket')
        run_session_event(socketio, session_id, game_service.request_next)


def run_session_event(socketio, session_id, operation, *args):
    """Apply a session operation; the room hears about it through the broadcaster."""
    try:
        ensure_broadcasting(socketio, session_id)
        state = operation(session_id, *args)
        if state is None:
            emit('error', {'error': 'Session not found', 'session_id': session_id})
            return
        schedule_deferred_flush(socketio, session_id)

    except Exception as e:
        game_logger.logger.error(f"Error handling WebSocket event for session {session_id}: {e}")
        emit('error', {'error': str(e), 'session_id': session_id})


def ensure_broadcasting(socketio, session_id):
    """Subscribe a room broadcaster to the session's state machine once."""
    game_service = get_game_service()
    if not game_service or session_id in broadcasting_sessions:
        return

    def broadcast(game):
        state = game_service.build_snapshot(session_id, game)
        socketio.emit('game_state_update', {
            'success': True,
            'state': asdict(state)
        }, room=session_room(session_id))

    if game_service.subscribe(session_id, broadcast):
        broadcasting_sessions.add(session_id)


def schedule_deferred_flush(socketio, session_id):
    """Start a background task that fires the session's delayed transitions."""
    game_service = get_game_service()
    if not game_service or session_id in flushing_sessions:
        return
    if game_service.next_due(session_id) is None:
        return

    flushing_sessions.add(session_id)
    socketio.start_background_task(flush_deferred_actions, socketio, session_id)


def flush_deferred_actions(socketio, session_id):
    """Sleep until each deferred action is due, then tick the session."""
    try:
        while True:
            game_service = get_game_service()
            if not game_service:
                break
            due = game_service.next_due(session_id)
            if due is None:
                break
            socketio.sleep(max(due - time.monotonic(), 0))
            game_service.tick(session_id)
    except Exception as e:
        game_logger.logger.error(f"Error flushing deferred actions for session {session_id}: {e}")
        flushing_sessions.discard(session_id)
        return

    flushing_sessions.discard(session_id)
    # An action queued after the last check found no task running
    schedule_deferred_flush(socketio, session_id)


def forget_session(session_id):
    """Drop WebSocket bookkeeping for a deleted session."""
    broadcasting_sessions.discard(session_id)
    flushing_sessions.discard(session_id)
