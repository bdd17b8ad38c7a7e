"""Time-bounded one-ply greedy search.

Each legal action is tried on a deep clone of the match, the resulting shot
is scored by material, and the best action seen before the deadline wins.
"""

import logging
import random
import time
from collections.abc import Callable

from app.schemas.game_engine import Piece, PieceKind

from ..engine.actions import GameAction
from ..engine.context import MatchContext
from ..engine.events import LaserEvent, LaserEventType, destroyed_pieces
from ..engine.laser import simulate
from ..engine.legal_moves import get_legal_actions
from ..engine.process import process_action
from ..engine.turns import opponent_of

logger = logging.getLogger(__name__)

WIN_SCORE = 100_000
ROYAL_EXPOSED_PENALTY = 50_000
OWN_LOSS_FACTOR = 1.5

PIECE_VALUES: dict[PieceKind, int] = {
    PieceKind.ROYAL: 1000,
    PieceKind.DUAL_MIRROR: 40,
    PieceKind.SHIELD: 30,
    PieceKind.MIRROR: 20,
    PieceKind.EMITTER: 0,
}


def _royal_exposed(ctx: MatchContext, player: int) -> bool:
    """Would the opponent's next shot, as the board stands, hit ``player``'s royal?"""
    return any(
        event.event_type == LaserEventType.DESTROY
        and event.piece is not None
        and event.piece.kind == PieceKind.ROYAL
        and event.piece.owner == player
        for event in simulate(ctx.board, opponent_of(player))
    )


def score_outcome(ctx: MatchContext, player: int, events: list[LaserEvent]) -> float:
    """Score the match in ``ctx`` (already advanced) from ``player``'s view.

    Args:
        ctx: Clone after the candidate action was processed.
        player: The player who acted.
        events: Laser trace produced by the action.
    """
    destroyed: list[Piece] = destroyed_pieces(events)
    own_royal_lost = any(p.kind == PieceKind.ROYAL and p.owner == player for p in destroyed)
    enemy_royal_lost = any(p.kind == PieceKind.ROYAL and p.owner != player for p in destroyed)

    if own_royal_lost and enemy_royal_lost:
        return 0
    if enemy_royal_lost:
        return WIN_SCORE
    if own_royal_lost:
        return -WIN_SCORE

    score = 0.0
    for piece in destroyed:
        value = PIECE_VALUES[piece.kind]
        if piece.owner == player:
            score -= OWN_LOSS_FACTOR * value
        else:
            score += value

    if not ctx.is_finished and _royal_exposed(ctx, player):
        score -= ROYAL_EXPOSED_PENALTY
    return score


def choose_action(
    ctx: MatchContext,
    *,
    time_budget_ms: int,
    rng: random.Random | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> GameAction | None:
    """Pick an action for the side to move.

    The budget is checked before each candidate, so a slow evaluation can
    overrun it by one candidate.

    Args:
        ctx: Match to search. Never mutated.
        time_budget_ms: Wall-clock budget for the search.
        rng: Source for candidate shuffling.
        clock: Monotonic time source in seconds.

    Returns:
        The best scored action, the first shuffled candidate if none was
        scored in time, or None if there is no legal action.
    """
    player = ctx.current_player
    candidates = get_legal_actions(ctx)
    if not candidates:
        logger.info("AI found no legal action for player %d", player)
        return None

    rng = rng or random.Random()
    rng.shuffle(candidates)

    deadline = clock() + time_budget_ms / 1000
    best_action: GameAction | None = None
    best_score = float("-inf")
    evaluated = 0

    for action in candidates:
        if clock() > deadline:
            break
        trial = ctx.clone()
        result = process_action(trial, action)
        if not result.success:
            continue
        evaluated += 1
        score = score_outcome(trial, player, result.laser_events)
        if score > best_score:
            best_score = score
            best_action = action

    logger.debug(
        "AI player %d evaluated %d/%d candidates, best score %s",
        player,
        evaluated,
        len(candidates),
        best_score,
    )
    if best_action is None:
        return candidates[0]
    return best_action
