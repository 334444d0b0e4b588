"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from dataclasses import asdict
from ..config.game_settings import MAX_PROGRESS, PROGRESS_PER_STROKE, get_word_statistics
from ..services.game_service import get_game_service
from ..utils.decorators import require_game_session
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)

# Strokes needed to reach full progress; larger batches change nothing
MAX_DRAW_BATCH = MAX_PROGRESS // PROGRESS_PER_STROKE


def _run_action(action, session, operation):
    """Runs a session command and answers with the resulting state."""
    try:
        game_logger.log_user_action(request, action, session.game_id)

        state = operation()
        response_data = {
            'success': True,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, action, True, response_data, session.game_id,
            status=state.status, round_number=state.round_number
        )
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, action, session.game_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, action, False, error_response, session.game_id)
        return jsonify(error_response), 500


@game_bp.route('/new_game', methods=['POST'])
def new_game():
    """Create a new, idle game session."""
    try:
        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        data = request.get_json(silent=True) or {}
        auto_start = bool(data.get('start', False))

        game_logger.log_user_action(request, 'new_game', auto_start=auto_start)

        game_id = game_service.create_new_game()
        session = game_service.get_session(game_id)
        state = session.start() if auto_start else session.get_state()

        response_data = {
            'success': True,
            'game_id': game_id,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, 'new_game', True, response_data, game_id,
            status=state.status
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


@game_bp.route('/game/<game_id>/state', methods=['GET'])
@require_game_session
def get_state(game_id, session=None):
    """Get current game state."""
    return _run_action('get_state', session, session.get_state)


@game_bp.route('/game/<game_id>/start', methods=['POST'])
@require_game_session
def start_round(game_id, session=None):
    """Start a round from idle or after a finished round."""
    return _run_action('start', session, session.start)


@game_bp.route('/game/<game_id>/next_round', methods=['POST'])
@require_game_session
def next_round(game_id, session=None):
    """Advance a finished round to the next one."""
    return _run_action('next_round', session, session.next_round)


@game_bp.route('/game/<game_id>/reset', methods=['POST'])
@require_game_session
def reset_game(game_id, session=None):
    """Restart from round 1 with a zero score."""
    return _run_action('reset_game', session, session.reset_game)


@game_bp.route('/game/<game_id>/draw', methods=['POST'])
@require_game_session
def draw_action(game_id, session=None):
    """Report one or more drawing actions from the canvas."""
    data = request.get_json(silent=True) or {}
    try:
        count = int(data.get('count', 1))
    except (TypeError, ValueError):
        return jsonify({
            'success': False,
            'error': 'count must be an integer'
        }), 400

    if count < 1:
        return jsonify({
            'success': False,
            'error': 'count must be at least 1'
        }), 400

    if count > MAX_DRAW_BATCH:
        return jsonify({
            'success': False,
            'error': f'count must be at most {MAX_DRAW_BATCH}'
        }), 400

    def report():
        state = None
        for _ in range(count):
            state = session.report_draw_action()
        return state

    return _run_action('draw_action', session, report)


@game_bp.route('/game/<game_id>/reveal', methods=['POST'])
@require_game_session
def reveal_word(game_id, session=None):
    """Show the target word to the drawer."""
    return _run_action('reveal_word', session, session.reveal_word)


@game_bp.route('/game/<game_id>/hint', methods=['POST'])
@require_game_session
def request_hint(game_id, session=None):
    """Buy a hint for the current round."""
    try:
        game_logger.log_user_action(request, 'request_hint', game_id)

        hint = session.request_hint()
        if hint is None:
            error_response = {
                'success': False,
                'error': 'Hints are only available during a round'
            }
            game_logger.log_server_response(request, 'request_hint', False, error_response, game_id)
            return jsonify(error_response), 400

        state = session.get_state()
        response_data = {
            'success': True,
            'hint': hint,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, 'request_hint', True, response_data, game_id,
            hints_used=state.hints_used, score=state.score
        )
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'request_hint', game_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'request_hint', False, error_response, game_id)
        return jsonify(error_response), 500


@game_bp.route('/game/<game_id>', methods=['DELETE'])
def delete_game(game_id):
    """Stop a game session and discard it."""
    try:
        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        game_logger.log_user_action(request, 'delete_game', game_id)

        success = game_service.delete_game(game_id)

        response_data = {
            'success': success
        }

        game_logger.log_server_response(request, 'delete_game', success, response_data, game_id)

        if success:
            game_logger.log_game_event(game_id, 'game_deleted', request.remote_addr)

        return jsonify(response_data), (200 if success else 404)

    except Exception as e:
        game_logger.log_error(request, e, 'delete_game', game_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'delete_game', False, error_response, game_id)
        return jsonify(error_response), 500


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        game_service = get_game_service()

        game_logger.log_user_action(request, 'health_check')

        response_data = {
            'status': 'healthy',
            'active_games': len(game_service.games) if game_service else 0,
            'word_statistics': get_word_statistics(),
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
