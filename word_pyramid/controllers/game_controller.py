"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from dataclasses import asdict
from ..utils.decorators import require_game_service
from ..utils.game_logger import game_logger
from ..websocket.handlers import forget_session

game_bp = Blueprint('game', __name__)


def log_reveal_event(session_id, before, after, user_ip):
    """Log an answer reveal that moved the puzzle on.

    Word-solved and puzzle-completed events are logged by the game service
    when the phase actually changes.
    """
    if before is None or after is None or before.phase == after.phase:
        return

    game_logger.log_game_event(
        session_id, 'answer_revealed', user_ip,
        puzzle_id=after.puzzle_id, step=before.step
    )


def _session_event(game_service, session_id, action, operation, revealed=False):
    """Run a no-argument session event and build the HTTP response."""
    try:
        game_logger.log_user_action(request, action, session_id)

        before = game_service.get_session_state(session_id) if revealed else None
        state = operation(session_id)
        if state is None:
            error_response = {
                'success': False,
                'error': 'Session not found'
            }
            game_logger.log_server_response(request, action, False, error_response, session_id)
            return jsonify(error_response), 404

        response_data = {
            'success': True,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, action, True, response_data, session_id,
            phase=state.phase, puzzle_index=state.puzzle_index
        )
        if revealed:
            log_reveal_event(session_id, before, state, request.remote_addr)

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, action, session_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, action, False, error_response, session_id)
        return jsonify(error_response), 500


@game_bp.route('/new_game', methods=['POST'])
@require_game_service
def new_game(game_service=None):
    """Create a new session over a freshly shuffled deck."""
    try:
        game_logger.log_user_action(request, 'new_game')

        session_id = game_service.create_session()
        state = game_service.get_session_state(session_id)

        response_data = {
            'success': True,
            'session_id': session_id,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, 'new_game', True, response_data, session_id,
            total_puzzles=state.total_puzzles, has_puzzles=state.has_puzzles
        )

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'new_game')

        error_response = {
            'success': False,
            'error': str(e)
        }

        game_logger.log_server_response(request, 'new_game', False, error_response)
        return jsonify(error_response), 500


@game_bp.route('/game/<session_id>/state', methods=['GET'])
@require_game_service
def get_state(session_id, game_service=None):
    """Get current session snapshot."""
    return _session_event(game_service, session_id, 'get_state', game_service.get_session_state)


@game_bp.route('/game/<session_id>/key', methods=['POST'])
@require_game_service
def key_press(session_id, game_service=None):
    """Forward a letter or DEL key to the active word."""
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or 'key' not in data:
            error_response = {
                'success': False,
                'error': 'Key is required'
            }
            game_logger.log_server_response(request, 'key_press', False, error_response, session_id)
            return jsonify(error_response), 400

        key = data['key']

        game_logger.log_user_action(request, 'key_press', session_id, key=key)

        is_valid, error = game_service.is_valid_key(key)
        if not is_valid:
            error_response = {
                'success': False,
                'error': error
            }
            game_logger.log_server_response(
                request, 'key_press', False, error_response, session_id,
                validation_error=error, attempted_key=key
            )
            return jsonify(error_response), 400

        state = game_service.key_press(session_id, key)
        if state is None:
            error_response = {
                'success': False,
                'error': 'Session not found'
            }
            game_logger.log_server_response(request, 'key_press', False, error_response, session_id)
            return jsonify(error_response), 404

        response_data = {
            'success': True,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, 'key_press', True, response_data, session_id,
            key=key, phase=state.phase
        )

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'key_press', session_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'key_press', False, error_response, session_id)
        return jsonify(error_response), 500


@game_bp.route('/game/<session_id>/hint', methods=['POST'])
@require_game_service
def request_hint(session_id, game_service=None):
    """Reveal the leftmost unhinted letter of the active word."""
    return _session_event(game_service, session_id, 'request_hint', game_service.request_hint)


@game_bp.route('/game/<session_id>/reveal', methods=['POST'])
@require_game_service
def request_reveal(session_id, game_service=None):
    """Fill the active word with its answer."""
    return _session_event(
        game_service, session_id, 'request_reveal', game_service.request_reveal, revealed=True
    )


@game_bp.route('/game/<session_id>/reset', methods=['POST'])
@require_game_service
def request_reset(session_id, game_service=None):
    """Clear input and hints for the current puzzle."""
    return _session_event(game_service, session_id, 'request_reset', game_service.request_reset)


@game_bp.route('/game/<session_id>/next', methods=['POST'])
@require_game_service
def request_next(session_id, game_service=None):
    """Move on to the next puzzle in the deck."""
    return _session_event(game_service, session_id, 'request_next', game_service.request_next)


@game_bp.route('/game/<session_id>', methods=['DELETE'])
@require_game_service
def delete_game(session_id, game_service=None):
    """Delete a session."""
    try:
        game_logger.log_user_action(request, 'delete_game', session_id)

        success = game_service.delete_session(session_id)

        response_data = {
            'success': success
        }

        game_logger.log_server_response(request, 'delete_game', success, response_data, session_id)

        if success:
            forget_session(session_id)
            game_logger.log_game_event(session_id, 'session_deleted', request.remote_addr)
            return jsonify(response_data)

        response_data['error'] = 'Session not found'
        return jsonify(response_data), 404

    except Exception as e:
        game_logger.log_error(request, e, 'delete_game', session_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'delete_game', False, error_response, session_id)
        return jsonify(error_response), 500


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        from ..services.game_service import get_game_service
        game_service = get_game_service()

        game_logger.log_user_action(request, 'health_check')

        response_data = {
            'status': 'healthy',
            'active_sessions': game_service.active_sessions if game_service else 0,
            'total_puzzles': len(game_service.puzzles) if game_service else 0,
            'log_stats': game_logger.get_log_stats()
        }

        game_logger.log_server_response(request, 'health_check', True, response_data)

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
