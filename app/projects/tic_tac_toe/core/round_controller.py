"""
Round sequencing for Tic-Tac-Toe.
Validates moves through the Board, alternates turns and reports round outcomes.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from app.projects.tic_tac_toe.core.board import Board, Mark, MoveStatus
from app.projects.tic_tac_toe.core.players import Player

logger = logging.getLogger(__name__)


class RoundState(enum.Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass
class RoundResult:
    """Outcome of a single play_round call."""

    valid: bool
    winner: Optional[Player] = None
    draw: bool = False
    error: Optional[MoveStatus] = None
    row: Optional[int] = None
    col: Optional[int] = None

    @property
    def message(self) -> str:
        if not self.valid:
            return self.error.message(self.row, self.col)
        if self.winner is not None:
            return f"{self.winner.name} ({self.winner.mark.value}) wins!"
        if self.draw:
            return "It's a draw!"
        return "Move accepted."

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "winner": self.winner.to_dict() if self.winner else None,
            "draw": self.draw,
            "error": self.error.value if self.error else None,
            "message": self.message,
        }


class RoundController:
    """
    Turn sequencing over one Board and two Players.

    Once a round reaches WON or DRAW the caller must stop sending moves and
    call start_new_game(); play_round() itself does not refuse them.
    """

    def __init__(self, board: Board, player_one: Player, player_two: Player):
        if player_one.mark is Mark.EMPTY or player_two.mark is Mark.EMPTY:
            raise ValueError("Players need a mark")
        if player_one.mark is player_two.mark:
            raise ValueError("Players must use different marks")
        self.board = board
        self._players = (player_one, player_two)
        self.active_player = player_one
        self.turn_count = 0
        self.state = RoundState.IN_PROGRESS
        self.last_result: Optional[RoundResult] = None
        self.winning_cells: list[tuple[int, int]] = []

    @property
    def players(self) -> tuple:
        return self._players

    @property
    def is_over(self) -> bool:
        return self.state is not RoundState.IN_PROGRESS

    def player_for(self, mark: Mark) -> Player:
        return next(p for p in self._players if p.mark is mark)

    def play_round(self, row, col) -> RoundResult:
        """
        Play the active player's mark at (row, col).

        Returns:
            RoundResult: invalid (no state change, same player retries), a win,
            a draw, or a plain accepted move after which the turn passes.
        """
        status = self.board.validate_move(row, col)
        if status is not MoveStatus.OK:
            logger.debug("Rejected move (%s, %s) by %s: %s",
                         row, col, self.active_player.name, status.value)
            return self._finish(RoundResult(valid=False, error=status, row=row, col=col))

        mover = self.active_player
        self.board.place_mark(row, col, mover)
        self.turn_count += 1

        # A win on the last free cell beats the draw
        winning_mark = self.board.check_win(row, col)
        if winning_mark is not None:
            winner = self.player_for(winning_mark)
            winner.record_win()
            self.state = RoundState.WON
            self.winning_cells = self.board.winning_cells(row, col)
            logger.info("%s (%s) won in %d moves",
                        winner.name, winner.mark.value, self.turn_count)
            return self._finish(RoundResult(valid=True, winner=winner, row=row, col=col))

        if self.turn_count >= self.board.size * self.board.size:
            self.state = RoundState.DRAW
            logger.info("Round ended in a draw")
            return self._finish(RoundResult(valid=True, draw=True, row=row, col=col))

        self.active_player = self._other(mover)
        return self._finish(RoundResult(valid=True, row=row, col=col))

    def start_new_game(self):
        """Clear the board and hand the first move back to player one. Scores are kept."""
        self.board.clear_board()
        self.turn_count = 0
        self.active_player = self._players[0]
        self.state = RoundState.IN_PROGRESS
        self.last_result = None
        self.winning_cells = []
        logger.debug("New round started")

    def _other(self, player: Player) -> Player:
        return self._players[1] if player is self._players[0] else self._players[0]

    def _finish(self, result: RoundResult) -> RoundResult:
        self.last_result = result
        return result

    def to_dict(self) -> dict:
        return {
            "board": self.board.to_dict(),
            "players": [p.to_dict() for p in self._players],
            "active_player": self._players.index(self.active_player),
            "turn_count": self.turn_count,
            "state": self.state.value,
            "winning_cells": [list(c) for c in self.winning_cells],
            "last_result": self.last_result.to_dict() if self.last_result else None,
        }
