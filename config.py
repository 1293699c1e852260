import os

SECRET_KEY = os.getenv("SECRET_KEY")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Tic-Tac-Toe configuration
# Numeric settings stay strings here; create_app() converts and range-checks them
TIC_TAC_TOE_BOARD_SIZE = os.getenv("TIC_TAC_TOE_BOARD_SIZE", "3")
TIC_TAC_TOE_PLAYER_ONE = os.getenv("TIC_TAC_TOE_PLAYER_ONE", "Player 1")
TIC_TAC_TOE_PLAYER_TWO = os.getenv("TIC_TAC_TOE_PLAYER_TWO", "Player 2")
TIC_TAC_TOE_MAX_SESSIONS = os.getenv("TIC_TAC_TOE_MAX_SESSIONS", "1000")

# Jinja2 whitespace control - prevents unwanted line breaks in rendered HTML
JINJA2_TRIM_BLOCKS = True
JINJA2_LSTRIP_BLOCKS = True
