"""Apply a single validated player action to the board and reserves."""

import logging

from app.schemas.game_engine import PieceKind

from .actions import GameAction, MoveAction, PlaceAction, RotateAction, SwapAction
from .context import MatchContext
from .pieces import create_piece
from .validation import ProcessResult, validate_action

logger = logging.getLogger(__name__)


def execute_action(ctx: MatchContext, action: GameAction) -> ProcessResult:
    """Validate ``action`` and, only if it is legal, apply it.

    Does not fire the laser or end the turn; see process.process_action.
    """
    validation = validate_action(ctx, action)
    if not validation.is_valid:
        return ProcessResult.failure(
            validation.error_code or "VALIDATION_ERROR",
            validation.error_message or "Invalid action",
        )

    if isinstance(action, RotateAction):
        return _rotate(ctx, action)
    if isinstance(action, MoveAction):
        return _move(ctx, action)
    if isinstance(action, PlaceAction):
        return _place(ctx, action)
    return _swap(ctx, action)


def _rotate(ctx: MatchContext, action: RotateAction) -> ProcessResult:
    piece = ctx.board.piece_at(action.x, action.y)
    piece.facing = piece.facing.rotated(action.clockwise)
    sense = "clockwise" if action.clockwise else "anticlockwise"
    logger.debug("Rotated %s %s to %d", piece.piece_id, sense, piece.facing)
    return ProcessResult.ok(f"Rotated {piece.kind.value} {sense}")


def _move(ctx: MatchContext, action: MoveAction) -> ProcessResult:
    piece = ctx.board.piece_at(action.from_x, action.from_y)
    ctx.board.move_piece(piece, action.to_x, action.to_y)
    logger.debug("Moved %s to (%d, %d)", piece.piece_id, action.to_x, action.to_y)
    return ProcessResult.ok(f"Moved {piece.kind.value} to ({action.to_x}, {action.to_y})")


def _place(ctx: MatchContext, action: PlaceAction) -> ProcessResult:
    mirror = create_piece(
        PieceKind.MIRROR,
        action.player,
        action.x,
        action.y,
        action.facing,
        piece_id=ctx.board.new_piece_id(PieceKind.MIRROR, action.player),
    )
    ctx.board.add_piece(mirror)
    ctx.turns.decrement_reserve(action.player)
    logger.debug(
        "Placed %s, player %d reserve now %d",
        mirror.piece_id,
        action.player,
        ctx.turns.reserve(action.player),
    )
    return ProcessResult.ok(f"Placed mirror at ({action.x}, {action.y})")


def _swap(ctx: MatchContext, action: SwapAction) -> ProcessResult:
    dual_mirror = ctx.board.piece_at(action.x, action.y)
    target = ctx.board.piece_at(action.target_x, action.target_y)
    ctx.board.swap_pieces(dual_mirror, target)
    dual_mirror.cooldowns.reset(target.kind)

    # A relocated emitter does not fire this turn.
    skip_laser = target.kind == PieceKind.EMITTER
    logger.debug(
        "Swapped %s with %s, skip_laser=%s", dual_mirror.piece_id, target.piece_id, skip_laser
    )
    return ProcessResult.ok(f"Swapped dual mirror with {target.kind.value}", skip_laser=skip_laser)
