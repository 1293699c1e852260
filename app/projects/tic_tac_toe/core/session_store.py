"""
Game sessions: two players, their running scores and the round they are playing.
Sessions live in memory only and are looked up by an opaque id.
"""
import logging
import threading
import uuid
from collections import OrderedDict

from app.projects.tic_tac_toe.core.board import Board, Mark
from app.projects.tic_tac_toe.core.constants import (
    DEFAULT_BOARD_SIZE,
    DEFAULT_MAX_SESSIONS,
    DEFAULT_PLAYER_ONE_NAME,
    DEFAULT_PLAYER_TWO_NAME,
    MAX_BOARD_SIZE,
)
from app.projects.tic_tac_toe.core.players import Player
from app.projects.tic_tac_toe.core.round_controller import RoundController

logger = logging.getLogger(__name__)


def _config_int(config, key, default):
    value = config.get(key, default)
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a whole number, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a whole number, got {value!r}") from None


def configured_board_size(config):
    """TIC_TAC_TOE_BOARD_SIZE from a config mapping, between 1 and MAX_BOARD_SIZE."""
    size = _config_int(config, "TIC_TAC_TOE_BOARD_SIZE", DEFAULT_BOARD_SIZE)
    if not 1 <= size <= MAX_BOARD_SIZE:
        raise ValueError(f"TIC_TAC_TOE_BOARD_SIZE must be between 1 and {MAX_BOARD_SIZE}, got {size}")
    return size


def configured_max_sessions(config):
    """TIC_TAC_TOE_MAX_SESSIONS from a config mapping, at least 1."""
    limit = _config_int(config, "TIC_TAC_TOE_MAX_SESSIONS", DEFAULT_MAX_SESSIONS)
    if limit < 1:
        raise ValueError(f"TIC_TAC_TOE_MAX_SESSIONS must be at least 1, got {limit}")
    return limit


class GameSession:
    """Pairing of two players across any number of rounds."""

    def __init__(self, session_id, board_size=DEFAULT_BOARD_SIZE,
                 player_one_name=DEFAULT_PLAYER_ONE_NAME,
                 player_two_name=DEFAULT_PLAYER_TWO_NAME):
        self.id = session_id
        # Held by request handlers around every read-modify-write of this game
        self.lock = threading.Lock()
        self.controller = RoundController(
            Board(board_size),
            Player(player_one_name, Mark.X),
            Player(player_two_name, Mark.O),
        )

    @property
    def players(self):
        return self.controller.players

    def rename_player(self, index: int, name: str) -> Player:
        """
        Rename player 0 or 1.

        Raises:
            IndexError: unknown player index
            ValueError: invalid name
        """
        if index not in (0, 1):
            raise IndexError(f"No player {index}")
        player = self.players[index]
        player.rename(name)
        return player

    def to_dict(self) -> dict:
        data = self.controller.to_dict()
        data["session_id"] = self.id
        return data


class SessionStore:
    """Thread-safe in-memory registry of GameSessions; least recently used is evicted first."""

    def __init__(self, max_sessions=DEFAULT_MAX_SESSIONS, **session_defaults):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self.session_defaults = session_defaults
        self._sessions = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def create(self) -> GameSession:
        session = GameSession(uuid.uuid4().hex, **self.session_defaults)
        with self._lock:
            self._sessions[session.id] = session
            while len(self._sessions) > self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info("Evicted game session %s", evicted_id)
        logger.debug("Created game session %s", session.id)
        return session

    def get(self, session_id):
        if not session_id:
            return None
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
            return session

    def get_or_create(self, session_id) -> GameSession:
        return self.get(session_id) or self.create()

    def discard(self, session_id):
        with self._lock:
            self._sessions.pop(session_id, None)
