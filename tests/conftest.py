"""Shared fixtures for game engine tests."""

import pytest

from app.schemas.game_engine import Direction, Piece, PieceKind
from app.services.game.engine.board import Board
from app.services.game.engine.context import MatchContext
from app.services.game.engine.pieces import create_piece
from app.services.game.engine.process import GameEngine


def place(
    board: Board,
    kind: PieceKind,
    owner: int,
    x: int,
    y: int,
    facing: Direction = Direction.EAST,
) -> Piece:
    """Helper to create a piece and put it on the board."""
    piece = create_piece(kind, owner, x, y, facing)
    board.add_piece(piece)
    return piece


def create_context(board: Board, current_player: int = 1) -> MatchContext:
    """Helper to wrap a board in a fresh in-progress match."""
    ctx = MatchContext(board=board)
    ctx.turns.current_player = current_player
    return ctx


def quiet_board() -> Board:
    """Both emitters aim straight off the board, royals far from any beam.

    Player 1: emitter (0, 0) facing NORTH, royal (2, 2), shield (8, 2).
    Player 2: emitter (9, 9) facing SOUTH, royal (7, 7), shield (1, 7).
    """
    board = Board()
    place(board, PieceKind.EMITTER, 1, 0, 0, Direction.NORTH)
    place(board, PieceKind.ROYAL, 1, 2, 2)
    place(board, PieceKind.SHIELD, 1, 8, 2, Direction.SOUTH)
    place(board, PieceKind.EMITTER, 2, 9, 9, Direction.SOUTH)
    place(board, PieceKind.ROYAL, 2, 7, 7)
    place(board, PieceKind.SHIELD, 2, 1, 7, Direction.NORTH)
    return board


def cycle_board() -> Board:
    """Player 1's beam falls into a closed dual-mirror loop.

    The beam goes north from (4, 9), turns east on the mirror at (4, 5), then
    runs around the dual mirrors at (6, 5), (6, 2), (2, 2) and (2, 5). It comes
    back into the mirror's unreflective west side and carries on round the
    loop indefinitely.
    """
    board = Board()
    place(board, PieceKind.EMITTER, 1, 4, 9, Direction.NORTH)
    place(board, PieceKind.MIRROR, 2, 4, 5, Direction.EAST)
    for x, y in ((6, 5), (6, 2), (2, 2), (2, 5)):
        place(board, PieceKind.DUAL_MIRROR, 2, x, y)
    place(board, PieceKind.ROYAL, 1, 0, 9)
    place(board, PieceKind.SHIELD, 1, 9, 0, Direction.SOUTH)
    place(board, PieceKind.ROYAL, 2, 9, 9)
    return board


@pytest.fixture
def empty_board() -> Board:
    """Empty 10x10 board."""
    return Board()


@pytest.fixture
def quiet_context() -> MatchContext:
    """In-progress match on the quiet board, player 1 to move."""
    return create_context(quiet_board())


@pytest.fixture
def quiet_engine(quiet_context: MatchContext) -> GameEngine:
    """GameEngine owning the quiet match."""
    return GameEngine(quiet_context)
