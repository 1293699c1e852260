"""Flask CLI commands for Tic-Tac-Toe: a console version of the game"""

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from app.projects.tic_tac_toe.core.constants import (
    DEFAULT_PLAYER_ONE_NAME,
    DEFAULT_PLAYER_TWO_NAME,
    MAX_BOARD_SIZE,
)
from app.projects.tic_tac_toe.core.session_store import GameSession, configured_board_size

logger = logging.getLogger(__name__)


@click.group(name='tic-tac-toe')
def tic_tac_toe_cli():
    """Tic-Tac-Toe console commands."""
    pass


def _new_console_game(size):
    config = current_app.config
    if size is None:
        try:
            size = configured_board_size(config)
        except ValueError as e:
            raise click.UsageError(str(e))
    return GameSession(
        'console',
        board_size=size,
        player_one_name=config.get('TIC_TAC_TOE_PLAYER_ONE', DEFAULT_PLAYER_ONE_NAME),
        player_two_name=config.get('TIC_TAC_TOE_PLAYER_TWO', DEFAULT_PLAYER_TWO_NAME),
    )


def _parse_move(text):
    """'1 2' or '1,2' -> (1, 2). Returns None if it is not two whole numbers."""
    parts = text.replace(',', ' ').split()
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def _echo_scores(game):
    scores = ", ".join(f"{p.name} ({p.mark.value}): {p.score}" for p in game.players)
    click.echo(f"Scores - {scores}")


@tic_tac_toe_cli.command('play')
@click.option('--size', type=click.IntRange(1, MAX_BOARD_SIZE), default=None,
              help='Board side length (defaults to TIC_TAC_TOE_BOARD_SIZE)')
@with_appcontext
def play_command(size):
    """Play a two-player game in the terminal."""
    game = _new_console_game(size)
    controller = game.controller

    while True:
        click.echo(controller.board.render_text())
        while not controller.is_over:
            player = controller.active_player
            text = click.prompt(f"{player.name} ({player.mark.value}) - row col")
            move = _parse_move(text)
            if move is None:
                click.echo("Enter a row and a column, e.g. '0 2'.")
                continue

            result = controller.play_round(*move)
            if not result.valid:
                click.echo(result.message)
                continue
            click.echo(controller.board.render_text())

        click.echo(controller.last_result.message)
        _echo_scores(game)
        if not click.confirm("Play again?", default=True):
            break
        controller.start_new_game()


@tic_tac_toe_cli.command('replay')
@click.argument('moves')
@click.option('--size', type=click.IntRange(1, MAX_BOARD_SIZE), default=None,
              help='Board side length (defaults to TIC_TAC_TOE_BOARD_SIZE)')
@with_appcontext
def replay_command(moves, size):
    """
    Play a scripted list of moves, e.g. "0,0 1,0 0,1".
    Each move is row,col; moves alternate starting with player one.
    """
    game = _new_console_game(size)
    controller = game.controller

    tokens = moves.split()
    for i, token in enumerate(tokens, 1):
        move = _parse_move(token)
        if move is None:
            raise click.BadParameter(f"Move {i} ('{token}') is not row,col", param_hint='MOVES')

        player = controller.active_player
        result = controller.play_round(*move)
        status = "ok" if result.valid else "rejected"
        click.echo(f"{i}. {player.name} ({player.mark.value}) -> {move[0]},{move[1]}: "
                   f"{status} - {result.message}")

        if controller.is_over:
            ignored = len(tokens) - i
            if ignored:
                click.echo(f"Round over; ignored {ignored} remaining move(s).")
            break

    click.echo(controller.board.render_text())
    if not controller.is_over:
        click.echo(f"Round still in progress; {controller.active_player.name} to move.")
    _echo_scores(game)
    logger.debug("Replayed %d move(s), final state %s", len(tokens), controller.state.value)


def init_app(app):
    """Register CLI commands with the Flask app"""
    app.cli.add_command(tic_tac_toe_cli)
