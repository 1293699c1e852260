"""
Tic-Tac-Toe - two players sharing one browser.
The page renders the board; every move goes through the JSON API below.
"""

import logging

from flask import Blueprint, current_app, jsonify, render_template, request, session

from app.projects.tic_tac_toe.core.constants import (
    DEFAULT_PLAYER_ONE_NAME,
    DEFAULT_PLAYER_TWO_NAME,
    MAX_NAME_LENGTH,
    SESSION_KEY,
)
from app.projects.tic_tac_toe.core.session_store import (
    SessionStore,
    configured_board_size,
    configured_max_sessions,
)
from app.utils.logging import log_project_visit

logger = logging.getLogger(__name__)

tic_tac_toe_bp = Blueprint('tic_tac_toe', __name__,
                           template_folder='templates')

STORE_EXTENSION_KEY = "tic_tac_toe_sessions"


def get_session_store() -> SessionStore:
    """The app's SessionStore, built from config on first use."""
    store = current_app.extensions.get(STORE_EXTENSION_KEY)
    if store is None:
        config = current_app.config
        store = SessionStore(
            max_sessions=configured_max_sessions(config),
            board_size=configured_board_size(config),
            player_one_name=config.get("TIC_TAC_TOE_PLAYER_ONE", DEFAULT_PLAYER_ONE_NAME),
            player_two_name=config.get("TIC_TAC_TOE_PLAYER_TWO", DEFAULT_PLAYER_TWO_NAME),
        )
        store = current_app.extensions.setdefault(STORE_EXTENSION_KEY, store)
    return store


def _current_game():
    """Game session bound to this browser, created on first request."""
    game = get_session_store().get_or_create(session.get(SESSION_KEY))
    session[SESSION_KEY] = game.id
    return game


def _parse_coordinate(data, key):
    """Return (value, None) or (None, error_msg). Only whole numbers are accepted."""
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None, f"'{key}' must be an integer"
    return value, None


@tic_tac_toe_bp.route('/')
def index():
    """Display the Tic-Tac-Toe board - self-contained HTML with inline CSS/JS"""
    log_project_visit('tic_tac_toe', 'Tic-Tac-Toe')
    game = _current_game()
    return render_template('tic_tac_toe.html', max_name_length=MAX_NAME_LENGTH,
                           board_size=game.controller.board.size)


@tic_tac_toe_bp.route('/api/state')
def api_state():
    """Current board, players, scores and round state."""
    game = _current_game()
    with game.lock:
        return jsonify(game.to_dict())


@tic_tac_toe_bp.route('/api/move', methods=['POST'])
def api_move():
    """Play the active player's mark. Body: {row, col}."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request body"}), 400

    row, err = _parse_coordinate(data, "row")
    if err:
        return jsonify({"error": err}), 400
    col, err = _parse_coordinate(data, "col")
    if err:
        return jsonify({"error": err}), 400

    game = _current_game()
    controller = game.controller
    with game.lock:
        if controller.is_over:
            return jsonify({"error": "Round is over. Start a new game.",
                            "state": game.to_dict()}), 409

        result = controller.play_round(row, col)
        body = result.to_dict()
        body["state"] = game.to_dict()
    if not result.valid:
        return jsonify(body), 400
    return jsonify(body)


@tic_tac_toe_bp.route('/api/new-game', methods=['POST'])
def api_new_game():
    """Start a new round. Scores carry over."""
    game = _current_game()
    with game.lock:
        game.controller.start_new_game()
        return jsonify(game.to_dict())


@tic_tac_toe_bp.route('/api/players/<int:index>', methods=['POST'])
def api_rename_player(index):
    """Rename a player. Body: {name}."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request body"}), 400

    game = _current_game()
    with game.lock:
        try:
            player = game.rename_player(index, data.get("name"))
        except IndexError:
            return jsonify({"error": "Unknown player"}), 404
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        logger.info("Player %d renamed to %s", index, player.name)
        return jsonify(game.to_dict())
