"""
Service Decorators

Contains decorators that resolve the game service for HTTP endpoints and
WebSocket events.
"""

from functools import wraps
from flask import jsonify
from flask_socketio import emit


def require_game_service(f):
    """
    Decorator that injects the global game service into an HTTP endpoint,
    answering 500 when it has not been initialized.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.game_service import get_game_service
        
        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500
        
        kwargs['game_service'] = game_service
        return f(*args, **kwargs)
    
    return decorated_function


def websocket_session_required(f):
    """Decorator for WebSocket events that act on an existing session."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.game_service import get_game_service
        
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return
        
        data = args[0] if args else None
        if not isinstance(data, dict) or not data.get('session_id'):
            emit('error', {'error': 'Session ID is required'})
            return
        
        session_id = data['session_id']
        if game_service.get_game(session_id) is None:
            emit('error', {'error': 'Session not found', 'session_id': session_id})
            return
        
        kwargs['game_service'] = game_service
        kwargs['session_id'] = session_id
        return f(*args, **kwargs)
    
    return decorated_function
