"""Main entry point for game action processing.

This module provides the primary interface for processing game actions:
- process_action(): validates, applies, fires the laser, resolves
  destruction, ends the turn and checks the win condition
- GameEngine: owns one match context and exposes the read model
"""

import logging

logger = logging.getLogger(__name__)

from app.schemas.game_engine import (
    MAX_TURNS,
    ActionLog,
    GamePhase,
    PieceKind,
    Snapshot,
)

from .actions import GameAction
from .context import MatchContext
from .events import LaserEvent, destroyed_pieces
from .executor import execute_action
from .laser import simulate
from .legal_moves import (
    get_legal_actions,
    get_move_destinations,
    get_piece_actions,
    get_placement_cells,
)
from .turns import opponent_of
from .validation import ProcessResult


def process_action(ctx: MatchContext, action: GameAction) -> ProcessResult:
    """Run one full turn cycle for ``action``.

    1. Validate and apply the action (nothing changes if it is rejected)
    2. Fire the acting player's laser unless the action skips it
    3. Remove destroyed pieces, queue mirror credits, detect royal loss
    4. End the turn
    5. Evaluate the win/draw condition

    Args:
        ctx: Match context to mutate.
        action: The action to process.

    Returns:
        ProcessResult with the laser trace and the updated snapshot on
        success, or error details on failure.
    """
    action_type = type(action).__name__
    logger.debug(
        "Processing action: type=%s, player=%d, turn=%d",
        action_type,
        action.player,
        ctx.turns.turn_count,
    )

    result = execute_action(ctx, action)
    if not result.success:
        return result

    turn = ctx.turns.turn_count
    events: list[LaserEvent] = []
    if not result.skip_laser:
        events = simulate(ctx.board, action.player)
        apply_laser_effects(ctx, events)

    ctx.turns.end_turn(ctx.board)
    check_win_condition(ctx)

    ctx.history.append(
        ActionLog(
            turn=turn,
            player=action.player,
            action_type=action.action_type,
            message=result.message,
        )
    )
    result.laser_events = events
    result.snapshot = build_snapshot(ctx)
    logger.debug(
        "Action processed: type=%s, player=%d, laser_events=%d",
        action_type,
        action.player,
        len(events),
    )
    return result


def apply_laser_effects(ctx: MatchContext, events: list[LaserEvent]) -> None:
    """Remove every piece the beam destroyed.

    A royal loss finishes the match for the opponent; a destroyed mirror
    queues a reserve credit for its own owner.
    """
    for piece in destroyed_pieces(events):
        if not piece.alive:
            continue
        ctx.board.remove_piece(piece)
        logger.info(
            "Laser destroyed %s (player %d) at (%d, %d)",
            piece.kind.value,
            piece.owner,
            piece.x,
            piece.y,
        )

        if piece.kind == PieceKind.ROYAL:
            ctx.finish(winner=opponent_of(piece.owner))
            logger.info("Royal of player %d destroyed, player %d wins", piece.owner, ctx.winner)
        elif piece.kind == PieceKind.MIRROR:
            ctx.turns.register_captured_mirror(piece.owner)


def check_win_condition(ctx: MatchContext) -> int | None:
    """Finish the match if it is decided.

    - exactly one royal left: its owner wins
    - no royal left, or the turn cap exceeded: draw

    Returns:
        The winning player, or None if there is no winner (yet, or a draw).
    """
    royals = ctx.board.find_pieces(kind=PieceKind.ROYAL)

    if len(royals) == 1:
        ctx.finish(winner=royals[0].owner)
    elif not royals or ctx.turns.turn_count > MAX_TURNS:
        ctx.finish(winner=None)
    else:
        return None

    if ctx.winner is None:
        logger.info("Game over: draw after %d turns", ctx.turns.turn_count)
    else:
        logger.info("Game over: player %d wins", ctx.winner)
    return ctx.winner


def build_snapshot(ctx: MatchContext) -> Snapshot:
    return Snapshot(
        board=ctx.board.to_view(),
        current_player=ctx.turns.current_player,
        turn_count=ctx.turns.turn_count,
        phase=ctx.phase,
        game_over=ctx.phase == GamePhase.FINISHED,
        winner=ctx.winner,
        reserves={1: ctx.turns.reserve(1), 2: ctx.turns.reserve(2)},
    )


class GameEngine:
    """Authoritative owner of one match.

    Not re-entrant: callers must serialize ``execute_action`` per match.
    """

    def __init__(self, context: MatchContext):
        self.context = context
        self.last_laser_events: list[LaserEvent] = []

    @property
    def board(self):
        return self.context.board

    @property
    def turns(self):
        return self.context.turns

    @property
    def game_over(self) -> bool:
        return self.context.is_finished

    @property
    def winner(self) -> int | None:
        return self.context.winner

    @property
    def history(self) -> list[ActionLog]:
        return self.context.history

    def execute_action(self, action: GameAction) -> ProcessResult:
        result = process_action(self.context, action)
        if result.success:
            self.last_laser_events = result.laser_events
        return result

    def snapshot(self) -> Snapshot:
        return build_snapshot(self.context)

    def legal_actions(self) -> list[GameAction]:
        return get_legal_actions(self.context)

    def valid_moves_for(self, x: int, y: int) -> list[tuple[int, int]]:
        piece = self.board.piece_at(x, y)
        if piece is None or piece.owner != self.turns.current_player:
            return []
        return get_move_destinations(self.context, piece)

    def valid_actions_for(self, x: int, y: int) -> list[GameAction]:
        piece = self.board.piece_at(x, y)
        if piece is None or piece.owner != self.turns.current_player or self.game_over:
            return []
        return get_piece_actions(self.context, piece)

    def valid_placements(self) -> list[tuple[int, int]]:
        if self.game_over:
            return []
        return get_placement_cells(self.context, self.turns.current_player)
