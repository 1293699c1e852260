"""
Constants for Tic-Tac-Toe: board defaults, player defaults, limits.
Single source of truth for the core, the JSON API and the console commands.
"""

DEFAULT_BOARD_SIZE = 3

# Largest board the browser page and console layout handle comfortably
MAX_BOARD_SIZE = 9

DEFAULT_PLAYER_ONE_NAME = "Player 1"
DEFAULT_PLAYER_TWO_NAME = "Player 2"

MAX_NAME_LENGTH = 30

# In-memory sessions kept before the oldest is evicted
DEFAULT_MAX_SESSIONS = 1000

# Flask session cookie key holding the game session id
SESSION_KEY = "tic_tac_toe_session_id"
