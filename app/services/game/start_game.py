import logging
import random

from app.schemas.game_engine import BOARD_SIZE, Direction, PieceKind

from .engine.board import Board
from .engine.context import MatchContext
from .engine.pieces import create_piece

logger = logging.getLogger(__name__)

EMITTER_ROW = 0
ROYAL_ROW = 2
DUAL_MIRROR_ROW = 3
FRONT_SHIELD_ROW = 4


def _mirrored(size: int, x: int) -> int:
    return size - 1 - x


def _player_one_layout(size: int, rng: random.Random) -> list[tuple[PieceKind, int, int, Direction]]:
    """Pick player 1's starting pieces as (kind, x, y, facing) tuples."""
    emitter_x = rng.randrange(size)
    emitter_facing = Direction.WEST if emitter_x > _mirrored(size, emitter_x) else Direction.EAST

    excluded = {0, size - 1, emitter_x, _mirrored(size, emitter_x)}
    royal_x = rng.choice([x for x in range(size) if x not in excluded])

    dual_mirror_x = rng.randrange(size)
    dual_mirror_facing = rng.choice((Direction.EAST, Direction.SOUTH))

    return [
        (PieceKind.EMITTER, emitter_x, EMITTER_ROW, emitter_facing),
        (PieceKind.ROYAL, royal_x, ROYAL_ROW, Direction.EAST),
        (PieceKind.SHIELD, royal_x, FRONT_SHIELD_ROW, Direction.SOUTH),
        (PieceKind.SHIELD, _mirrored(size, emitter_x), ROYAL_ROW, Direction.SOUTH),
        (PieceKind.DUAL_MIRROR, dual_mirror_x, DUAL_MIRROR_ROW, dual_mirror_facing),
    ]


def setup_board(board: Board, rng: random.Random) -> None:
    """Place both players' starting pieces on an empty board.

    Player 2's layout is player 1's rotated 180 degrees about the centre,
    so both sides start from the same position.
    """
    size = board.size
    for kind, x, y, facing in _player_one_layout(size, rng):
        board.add_piece(
            create_piece(kind, 1, x, y, facing, piece_id=board.new_piece_id(kind, 1))
        )
        board.add_piece(
            create_piece(
                kind,
                2,
                _mirrored(size, x),
                _mirrored(size, y),
                Direction((facing + 180) % 360),
                piece_id=board.new_piece_id(kind, 2),
            )
        )


def initialize_match(seed: int | None = None, board_size: int = BOARD_SIZE) -> MatchContext:
    """
    Build a fresh match with a randomized, reproducible starting layout.

    Args:
        seed: Seed for the layout. The same seed always yields the same board.
        board_size: Side length of the square board.

    Returns:
        A MatchContext in progress with player 1 to move.
    """
    rng = random.Random(seed)
    board = Board(board_size)
    setup_board(board, rng)
    logger.info("Match initialized: seed=%s, pieces=%d", seed, len(board.all_pieces()))
    return MatchContext(board=board)
