"""
Tic-Tac-Toe board: grid of marks plus running line tallies.

Each placed mark adds its contribution (X = -1, O = +1) to the tally of its
row, its column and, when on them, the two diagonals. A line is complete
exactly when the absolute value of its tally equals the board size, so a win
is detected from the four tallies touching the last move without rescanning.
"""
import enum
import logging

from app.projects.tic_tac_toe.core.constants import DEFAULT_BOARD_SIZE

logger = logging.getLogger(__name__)


class Mark(enum.Enum):
    EMPTY = ""
    X = "X"
    O = "O"

    @property
    def contribution(self) -> int:
        """Signed value this mark adds to every tally it touches."""
        return _CONTRIBUTIONS[self]

    @property
    def opponent(self) -> "Mark":
        if self is Mark.EMPTY:
            raise ValueError("EMPTY has no opponent")
        return Mark.O if self is Mark.X else Mark.X

    @classmethod
    def from_sign(cls, value: int) -> "Mark":
        """Mark whose contribution has the same sign as value."""
        if value < 0:
            return cls.X
        if value > 0:
            return cls.O
        return cls.EMPTY


_CONTRIBUTIONS = {Mark.EMPTY: 0, Mark.X: -1, Mark.O: 1}


class MoveStatus(enum.Enum):
    OK = "ok"
    OUT_OF_BOUNDS = "out_of_bounds"
    CELL_OCCUPIED = "cell_occupied"

    def message(self, row, col) -> str:
        if self is MoveStatus.OUT_OF_BOUNDS:
            return f"Position ({row}, {col}) is off the board."
        if self is MoveStatus.CELL_OCCUPIED:
            return f"Cell ({row}, {col}) is already taken."
        return f"Move ({row}, {col}) accepted."


class Board:
    """
    Square grid of cells with incremental win tallies.

    Invariant: row_tallies[r] is the sum of the contributions of the marks in
    row r (likewise for columns and both diagonals).
    """

    def __init__(self, size: int = DEFAULT_BOARD_SIZE):
        if not isinstance(size, int) or size < 1:
            raise ValueError(f"Board size must be a positive integer, got {size!r}")
        self.size = size
        self._grid, self._row_tallies, self._col_tallies = self._fresh_state()
        self._diag_tally = 0
        self._anti_diag_tally = 0

    def _fresh_state(self):
        grid = [[Mark.EMPTY for _ in range(self.size)] for _ in range(self.size)]
        return grid, [0] * self.size, [0] * self.size

    # --- Read-only views ---

    @property
    def row_tallies(self) -> tuple:
        return tuple(self._row_tallies)

    @property
    def col_tallies(self) -> tuple:
        return tuple(self._col_tallies)

    @property
    def diag_tally(self) -> int:
        return self._diag_tally

    @property
    def anti_diag_tally(self) -> int:
        return self._anti_diag_tally

    def cell(self, row: int, col: int) -> Mark:
        return self._grid[row][col]

    def in_bounds(self, row, col) -> bool:
        # bool is an int subclass but never a coordinate
        for value in (row, col):
            if not isinstance(value, int) or isinstance(value, bool):
                return False
        return 0 <= row < self.size and 0 <= col < self.size

    def empty_cells(self) -> list[tuple[int, int]]:
        return [
            (r, c)
            for r in range(self.size)
            for c in range(self.size)
            if self._grid[r][c] is Mark.EMPTY
        ]

    def is_full(self) -> bool:
        return not self.empty_cells()

    # --- Moves ---

    def validate_move(self, row, col) -> MoveStatus:
        """Classify a candidate move. Bounds are checked before occupancy."""
        if not self.in_bounds(row, col):
            return MoveStatus.OUT_OF_BOUNDS
        if self._grid[row][col] is not Mark.EMPTY:
            return MoveStatus.CELL_OCCUPIED
        return MoveStatus.OK

    def place_mark(self, row: int, col: int, mark) -> None:
        """
        Put mark at (row, col) and update the tallies of every line through it.
        Unchecked: the caller must have validated the move first.

        Args:
            mark: a Mark, or anything with a .mark attribute (e.g. a Player)
        """
        mark = getattr(mark, "mark", mark)
        assert isinstance(mark, Mark) and mark is not Mark.EMPTY, f"Cannot place {mark!r}"
        assert self.validate_move(row, col) is MoveStatus.OK, f"Illegal placement at ({row}, {col})"

        self._grid[row][col] = mark
        delta = mark.contribution
        self._row_tallies[row] += delta
        self._col_tallies[col] += delta
        if row == col:
            self._diag_tally += delta
        if row + col == self.size - 1:
            self._anti_diag_tally += delta
        logger.debug("Placed %s at (%d, %d)", mark.value, row, col)

    def _tallies_through(self, row: int, col: int) -> list[tuple[str, int]]:
        """(line name, tally) for each line that passes through (row, col)."""
        lines = [("row", self._row_tallies[row]), ("col", self._col_tallies[col])]
        if row == col:
            lines.append(("diag", self._diag_tally))
        if row + col == self.size - 1:
            lines.append(("anti_diag", self._anti_diag_tally))
        return lines

    def check_win(self, row: int, col: int):
        """
        Check the lines through the most recent move at (row, col).

        Returns:
            The Mark that completed a line (taken from the tally's sign), or None.
        """
        for _, tally in self._tallies_through(row, col):
            if abs(tally) == self.size:
                return Mark.from_sign(tally)
        return None

    def winning_cells(self, row: int, col: int) -> list[tuple[int, int]]:
        """Cells of every completed line through (row, col), in line order."""
        n = self.size
        line_cells = {
            "row": [(row, c) for c in range(n)],
            "col": [(r, col) for r in range(n)],
            "diag": [(i, i) for i in range(n)],
            "anti_diag": [(i, n - 1 - i) for i in range(n)],
        }
        cells = []
        for name, tally in self._tallies_through(row, col):
            if abs(tally) != n:
                continue
            for cell in line_cells[name]:
                if cell not in cells:
                    cells.append(cell)
        return cells

    def clear_board(self) -> None:
        """Empty every cell and zero every tally."""
        grid, row_tallies, col_tallies = self._fresh_state()
        self._grid, self._row_tallies, self._col_tallies = grid, row_tallies, col_tallies
        self._diag_tally = 0
        self._anti_diag_tally = 0

    # --- Diagnostics ---

    def to_dict(self) -> dict:
        return {
            "size": self.size,
            "cells": [[m.value for m in row] for row in self._grid],
        }

    def render_text(self) -> str:
        """Plain-text board, e.g. for the console commands."""
        n = self.size
        header = "    " + "   ".join(str(c) for c in range(n))
        divider = "   " + "+".join(["---"] * n)
        lines = [header]
        for r in range(n):
            cells = " | ".join(m.value or " " for m in self._grid[r])
            lines.append(f"{r}   {cells}")
            if r < n - 1:
                lines.append(divider)
        return "\n".join(lines)

    def __repr__(self):
        return f"Board(size={self.size})"
