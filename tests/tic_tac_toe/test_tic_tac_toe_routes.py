"""
Unit tests for Tic-Tac-Toe API routes.
Uses Flask test client; each client keeps its own game through the session cookie.
"""
import threading
import time
import unittest
from unittest.mock import patch

from flask import Flask

from app import csrf
from app.projects.tic_tac_toe.core.board import Board
from app.projects.tic_tac_toe.routes import STORE_EXTENSION_KEY, tic_tac_toe_bp


def _create_test_app(**config):
    """Minimal app with only the tic_tac_toe blueprint."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["WTF_CSRF_ENABLED"] = False
    app.config.update(config)
    csrf.init_app(app)
    app.register_blueprint(tic_tac_toe_bp, url_prefix="/tic-tac-toe")
    return app


def _move(client, row, col):
    return client.post("/tic-tac-toe/api/move", json={"row": row, "col": col})


class TestPage(unittest.TestCase):

    def setUp(self):
        self.app = _create_test_app()
        self.client = self.app.test_client()

    def test_index_renders_board_page(self):
        r = self.client.get("/tic-tac-toe/")
        self.assertEqual(r.status_code, 200)
        self.assertIn(b"Tic-Tac-Toe", r.data)
        self.assertIn(b"csrf-token", r.data)


class TestApiState(unittest.TestCase):

    def setUp(self):
        self.app = _create_test_app()
        self.client = self.app.test_client()

    def test_initial_state(self):
        r = self.client.get("/tic-tac-toe/api/state")
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertEqual(data["state"], "in_progress")
        self.assertEqual(data["turn_count"], 0)
        self.assertEqual(data["active_player"], 0)
        self.assertEqual(data["board"]["cells"], [["", "", ""]] * 3)
        self.assertEqual([p["mark"] for p in data["players"]], ["X", "O"])

    def test_state_is_per_client(self):
        _move(self.client, 0, 0)
        other = self.app.test_client()
        data = other.get("/tic-tac-toe/api/state").get_json()
        self.assertEqual(data["turn_count"], 0)
        mine = self.client.get("/tic-tac-toe/api/state").get_json()
        self.assertEqual(mine["turn_count"], 1)

    def test_configured_board_size_and_names(self):
        app = _create_test_app(TIC_TAC_TOE_BOARD_SIZE=4, TIC_TAC_TOE_PLAYER_ONE="Ann")
        data = app.test_client().get("/tic-tac-toe/api/state").get_json()
        self.assertEqual(data["board"]["size"], 4)
        self.assertEqual(data["players"][0]["name"], "Ann")


class TestApiMove(unittest.TestCase):

    def setUp(self):
        self.app = _create_test_app()
        self.client = self.app.test_client()

    def test_valid_move(self):
        r = _move(self.client, 1, 1)
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertTrue(data["valid"])
        self.assertIsNone(data["winner"])
        self.assertFalse(data["draw"])
        self.assertEqual(data["state"]["board"]["cells"][1][1], "X")
        self.assertEqual(data["state"]["active_player"], 1)

    def test_occupied_cell_returns_400(self):
        _move(self.client, 1, 1)
        r = _move(self.client, 1, 1)
        self.assertEqual(r.status_code, 400)
        data = r.get_json()
        self.assertFalse(data["valid"])
        self.assertEqual(data["error"], "cell_occupied")
        self.assertEqual(data["state"]["active_player"], 1)

    def test_out_of_bounds_returns_400(self):
        r = _move(self.client, 3, 0)
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["error"], "out_of_bounds")

    def test_missing_or_bad_coordinates(self):
        for body in ({"row": 1}, {"row": "1", "col": 1}, {"row": 1, "col": 1.5},
                     {"row": True, "col": 0}):
            r = self.client.post("/tic-tac-toe/api/move", json=body)
            self.assertEqual(r.status_code, 400, body)
            self.assertIn("integer", r.get_json()["error"])

    def test_non_json_body(self):
        r = self.client.post("/tic-tac-toe/api/move", data="row=1",
                             content_type="application/x-www-form-urlencoded")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["error"], "Invalid request body")

    def test_win_then_further_moves_rejected(self):
        for row, col in [(0, 0), (1, 0), (0, 1), (1, 1)]:
            _move(self.client, row, col)
        r = _move(self.client, 0, 2)
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertEqual(data["winner"]["mark"], "X")
        self.assertEqual(data["winner"]["score"], 1)
        self.assertEqual(data["state"]["state"], "won")
        self.assertEqual(data["state"]["winning_cells"], [[0, 0], [0, 1], [0, 2]])

        r = _move(self.client, 2, 2)
        self.assertEqual(r.status_code, 409)
        self.assertIn("Round is over", r.get_json()["error"])

    def test_draw(self):
        moves = [(0, 0), (0, 2), (0, 1), (1, 0), (1, 2), (1, 1), (2, 0), (2, 1), (2, 2)]
        for row, col in moves[:-1]:
            _move(self.client, row, col)
        data = _move(self.client, *moves[-1]).get_json()
        self.assertTrue(data["valid"])
        self.assertTrue(data["draw"])
        self.assertIsNone(data["winner"])
        self.assertEqual(data["state"]["state"], "draw")


class TestApiNewGame(unittest.TestCase):

    def setUp(self):
        self.app = _create_test_app()
        self.client = self.app.test_client()

    def test_new_game_clears_board_and_keeps_scores(self):
        for row, col in [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)]:
            _move(self.client, row, col)
        r = self.client.post("/tic-tac-toe/api/new-game", json={})
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertEqual(data["state"], "in_progress")
        self.assertEqual(data["turn_count"], 0)
        self.assertEqual(data["active_player"], 0)
        self.assertEqual(data["board"]["cells"], [["", "", ""]] * 3)
        self.assertEqual(data["players"][0]["score"], 1)


class TestApiRenamePlayer(unittest.TestCase):

    def setUp(self):
        self.app = _create_test_app()
        self.client = self.app.test_client()

    def test_rename(self):
        r = self.client.post("/tic-tac-toe/api/players/1", json={"name": " Zoe "})
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertEqual(data["players"][1]["name"], "Zoe")
        self.assertEqual(data["players"][1]["mark"], "O")

    def test_empty_name_returns_400(self):
        r = self.client.post("/tic-tac-toe/api/players/0", json={"name": "  "})
        self.assertEqual(r.status_code, 400)
        self.assertIn("Name", r.get_json()["error"])

    def test_unknown_player_returns_404(self):
        r = self.client.post("/tic-tac-toe/api/players/2", json={"name": "Zoe"})
        self.assertEqual(r.status_code, 404)

    def test_missing_body_returns_400(self):
        r = self.client.post("/tic-tac-toe/api/players/0")
        self.assertEqual(r.status_code, 400)


class TestConcurrentMoves(unittest.TestCase):
    """Simultaneous requests on one game are played one at a time."""

    def setUp(self):
        self.app = _create_test_app()
        self.client = self.app.test_client()
        self.session_id = self.client.get("/tic-tac-toe/api/state").get_json()["session_id"]

    def test_same_cell_from_two_threads(self):
        original = Board.validate_move

        def slow_validate(board, row, col):
            status = original(board, row, col)
            time.sleep(0.05)
            return status

        outcomes = []

        def post_move():
            try:
                outcomes.append(_move(self.client, 1, 1).status_code)
            except Exception as e:
                outcomes.append(repr(e))

        with patch.object(Board, "validate_move", slow_validate):
            threads = [threading.Thread(target=post_move) for _ in range(2)]
            for t in threads:
                t.start()
            for t in threads:
                t.join(timeout=5)

        self.assertEqual(sorted(outcomes, key=str), [200, 400])

        game = self.app.extensions[STORE_EXTENSION_KEY].get(self.session_id)
        board = game.controller.board
        self.assertEqual(game.controller.turn_count, 1)
        self.assertEqual(board.row_tallies, (0, -1, 0))
        self.assertEqual(board.col_tallies, (0, -1, 0))
        self.assertEqual(board.diag_tally, -1)
        self.assertEqual(board.anti_diag_tally, -1)
