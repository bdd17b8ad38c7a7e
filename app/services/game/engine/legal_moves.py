"""Legal action enumeration for pieces and players."""

from app.schemas.game_engine import Direction, Piece, PieceKind

from .actions import GameAction, MoveAction, PlaceAction, RotateAction, SwapAction
from .context import MatchContext
from .pieces import can_move, can_rotate
from .validation import touches_protected_piece

_STEPS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def get_move_destinations(ctx: MatchContext, piece: Piece) -> list[tuple[int, int]]:
    """Empty orthogonal neighbours a movable piece can step into."""
    if not can_move(piece):
        return []
    destinations = []
    for dx, dy in _STEPS:
        x, y = piece.x + dx, piece.y + dy
        if ctx.board.in_bounds(x, y) and ctx.board.piece_at(x, y) is None:
            destinations.append((x, y))
    return destinations


def get_swap_targets(ctx: MatchContext, dual_mirror: Piece) -> list[Piece]:
    """Own emitter/royal pieces whose swap cooldown has expired."""
    if dual_mirror.kind != PieceKind.DUAL_MIRROR or dual_mirror.cooldowns is None:
        return []
    return [
        piece
        for piece in ctx.board.find_pieces(owner=dual_mirror.owner)
        if piece.kind in (PieceKind.EMITTER, PieceKind.ROYAL)
        and dual_mirror.cooldowns.get(piece.kind) == 0
    ]


def get_placement_cells(ctx: MatchContext, player: int) -> list[tuple[int, int]]:
    """Empty cells outside the protected perimeter, if the player has reserve."""
    if ctx.turns.reserve(player) <= 0:
        return []
    size = ctx.board.size
    return [
        (x, y)
        for y in range(size)
        for x in range(size)
        if ctx.board.piece_at(x, y) is None and not touches_protected_piece(ctx, x, y)
    ]


def get_piece_actions(ctx: MatchContext, piece: Piece) -> list[GameAction]:
    """Rotations, steps and swaps available to ``piece`` for its owner."""
    player = piece.owner
    actions: list[GameAction] = []

    if piece.kind != PieceKind.ROYAL and can_rotate(piece):
        actions.append(RotateAction(player=player, x=piece.x, y=piece.y, clockwise=True))
        actions.append(RotateAction(player=player, x=piece.x, y=piece.y, clockwise=False))

    for to_x, to_y in get_move_destinations(ctx, piece):
        actions.append(
            MoveAction(player=player, from_x=piece.x, from_y=piece.y, to_x=to_x, to_y=to_y)
        )

    for target in get_swap_targets(ctx, piece):
        actions.append(
            SwapAction(
                player=player, x=piece.x, y=piece.y, target_x=target.x, target_y=target.y
            )
        )
    return actions


def get_legal_actions(ctx: MatchContext, player: int | None = None) -> list[GameAction]:
    """Every legal action for ``player`` (defaults to the side to move).

    Returns an empty list once the match is finished.
    """
    if ctx.is_finished:
        return []
    if player is None:
        player = ctx.current_player

    actions: list[GameAction] = []
    for piece in ctx.board.find_pieces(owner=player):
        actions.extend(get_piece_actions(ctx, piece))

    for x, y in get_placement_cells(ctx, player):
        for facing in Direction:
            actions.append(PlaceAction(player=player, x=x, y=y, facing=facing))
    return actions
