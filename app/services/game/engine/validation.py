"""Validation layer for game actions and ProcessResult pattern.

Separates validation from processing logic:
- validate_action() checks if an action is legal given the current match
- ProcessResult replaces exceptions for control flow

Every check runs before anything is mutated, so a rejected action leaves the
match exactly as it was.
"""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

from app.schemas.game_engine import PieceKind, Snapshot

from .actions import GameAction, MoveAction, PlaceAction, RotateAction, SwapAction
from .context import MatchContext
from .events import LaserEvent
from .pieces import can_move, can_rotate


@dataclass
class ProcessResult:
    """Result of processing a game action.

    Replaces exceptions for control flow, providing explicit success/failure
    with error codes suitable for client localization.
    """

    success: bool = True
    message: str | None = None
    skip_laser: bool = False
    laser_events: list[LaserEvent] = field(default_factory=list)
    snapshot: Snapshot | None = None
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls, message: str | None = None, skip_laser: bool = False) -> "ProcessResult":
        """Create a successful result."""
        return cls(success=True, message=message, skip_laser=skip_laser)

    @classmethod
    def failure(cls, code: str, message: str) -> "ProcessResult":
        """Create a failure result with error details."""
        return cls(
            success=False,
            error_code=code,
            error_message=message,
        )


@dataclass
class ValidationResult:
    """Result of validating an action before processing."""

    is_valid: bool = True
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(is_valid=True)

    @classmethod
    def error(cls, code: str, message: str) -> "ValidationResult":
        """Create a validation failure with error details."""
        return cls(
            is_valid=False,
            error_code=code,
            error_message=message,
        )


def is_orthogonal_step(from_x: int, from_y: int, to_x: int, to_y: int) -> bool:
    return abs(from_x - to_x) + abs(from_y - to_y) == 1


def touches_protected_piece(ctx: MatchContext, x: int, y: int) -> bool:
    """True if (x, y) is orthogonally next to any emitter or royal."""
    return any(
        piece.kind in (PieceKind.EMITTER, PieceKind.ROYAL)
        for piece in ctx.board.adjacent_pieces(x, y)
    )


def validate_action(ctx: MatchContext, action: GameAction) -> ValidationResult:
    """Validate an action before processing.

    Checks, in order:
    - The match is still in progress
    - It's the acting player's turn
    - The kind-specific rules for rotate / move / place / swap

    Args:
        ctx: Current match context.
        action: The action to validate.

    Returns:
        ValidationResult indicating success or failure with error details.
    """
    action_type = type(action).__name__
    logger.debug(
        "Validating action: type=%s, player=%d, phase=%s",
        action_type,
        action.player,
        ctx.phase.value,
    )

    if ctx.is_finished:
        logger.warning("Validation failed: GAME_FINISHED")
        return ValidationResult.error("GAME_FINISHED", "Game has already finished")

    if action.player != ctx.current_player:
        logger.warning(
            "Validation failed: NOT_YOUR_TURN, current=%d, attempted=%d",
            ctx.current_player,
            action.player,
        )
        return ValidationResult.error("NOT_YOUR_TURN", "It's not your turn")

    if isinstance(action, RotateAction):
        result = _validate_rotate(ctx, action)
    elif isinstance(action, MoveAction):
        result = _validate_move(ctx, action)
    elif isinstance(action, PlaceAction):
        result = _validate_place(ctx, action)
    elif isinstance(action, SwapAction):
        result = _validate_swap(ctx, action)
    else:
        result = ValidationResult.error("UNKNOWN_ACTION", f"Unknown action type: {action_type}")

    if result.is_valid:
        logger.debug("Action validated successfully: type=%s", action_type)
    else:
        logger.warning(
            "Validation failed: %s, type=%s, player=%d",
            result.error_code,
            action_type,
            action.player,
        )
    return result


def _validate_rotate(ctx: MatchContext, action: RotateAction) -> ValidationResult:
    piece = ctx.board.piece_at(action.x, action.y)
    if piece is None:
        return ValidationResult.error("NO_PIECE", f"No piece at ({action.x}, {action.y})")
    if piece.kind == PieceKind.ROYAL:
        return ValidationResult.error("ROYAL_CANNOT_ROTATE", "The royal cannot rotate")
    if not can_rotate(piece):
        return ValidationResult.error("CANNOT_ROTATE", f"A {piece.kind.value} cannot rotate")
    return ValidationResult.ok()


def _validate_move(ctx: MatchContext, action: MoveAction) -> ValidationResult:
    piece = ctx.board.piece_at(action.from_x, action.from_y)
    if piece is None:
        return ValidationResult.error(
            "NO_PIECE", f"No piece at ({action.from_x}, {action.from_y})"
        )
    if not can_move(piece):
        return ValidationResult.error("CANNOT_MOVE", f"A {piece.kind.value} cannot move")
    if not ctx.board.in_bounds(action.to_x, action.to_y):
        return ValidationResult.error(
            "OUT_OF_BOUNDS", f"({action.to_x}, {action.to_y}) is off the board"
        )
    if ctx.board.piece_at(action.to_x, action.to_y) is not None:
        return ValidationResult.error(
            "CELL_OCCUPIED", f"({action.to_x}, {action.to_y}) is occupied"
        )
    if not is_orthogonal_step(action.from_x, action.from_y, action.to_x, action.to_y):
        return ValidationResult.error(
            "NOT_ADJACENT", "Must move to an adjacent cell (orthogonal only)"
        )
    return ValidationResult.ok()


def _validate_place(ctx: MatchContext, action: PlaceAction) -> ValidationResult:
    if ctx.turns.reserve(action.player) <= 0:
        return ValidationResult.error("EMPTY_RESERVE", "No mirrors left in reserve")
    if not ctx.board.in_bounds(action.x, action.y):
        return ValidationResult.error("OUT_OF_BOUNDS", f"({action.x}, {action.y}) is off the board")
    if ctx.board.piece_at(action.x, action.y) is not None:
        return ValidationResult.error("CELL_OCCUPIED", f"({action.x}, {action.y}) is occupied")
    if touches_protected_piece(ctx, action.x, action.y):
        return ValidationResult.error(
            "PROTECTED_PERIMETER", "Cannot place next to an emitter or royal"
        )
    return ValidationResult.ok()


def _validate_swap(ctx: MatchContext, action: SwapAction) -> ValidationResult:
    dual_mirror = ctx.board.piece_at(action.x, action.y)
    target = ctx.board.piece_at(action.target_x, action.target_y)
    if dual_mirror is None or target is None:
        return ValidationResult.error("NO_PIECE", "Invalid swap positions")
    if dual_mirror.kind != PieceKind.DUAL_MIRROR or dual_mirror.cooldowns is None:
        return ValidationResult.error("NOT_DUAL_MIRROR", "Must select a dual mirror")
    if target.owner != dual_mirror.owner or target.kind not in (
        PieceKind.EMITTER,
        PieceKind.ROYAL,
    ):
        return ValidationResult.error(
            "INVALID_SWAP_TARGET", "Can only swap with your own emitter or royal"
        )
    remaining = dual_mirror.cooldowns.get(target.kind)
    if remaining > 0:
        return ValidationResult.error(
            "SWAP_COOLDOWN",
            f"Swap with {target.kind.value} on cooldown ({remaining} turns remaining)",
        )
    return ValidationResult.ok()
