"""Per-kind piece behaviour.

Every piece shares the same data model (app.schemas.game_engine.Piece) and a
kind tag. The tag selects one behaviour object from ``BEHAVIORS``, which
answers the capability questions and the laser interaction for that kind.
"""

import logging
from dataclasses import dataclass

from app.schemas.game_engine import (
    Direction,
    Piece,
    PieceKind,
    PieceView,
    ShieldSides,
    SwapCooldowns,
)

from .events import LaserEventType
from .physics import (
    is_shield_blocking,
    mirror_reflective_sides,
    reflect_on_dual_mirror,
    reflect_on_mirror,
)

logger = logging.getLogger(__name__)

_SIDE_NAMES = {
    Direction.NORTH: "top",
    Direction.EAST: "right",
    Direction.SOUTH: "bottom",
    Direction.WEST: "left",
}

@dataclass(frozen=True)
class Interaction:
    """How a piece reacts to an incoming beam."""

    event_type: LaserEventType
    new_direction: Direction | None = None

    @property
    def stops_beam(self) -> bool:
        return self.event_type == LaserEventType.BLOCK


BLOCK = Interaction(LaserEventType.BLOCK)
DESTROY = Interaction(LaserEventType.DESTROY)


def _sides(*directions: Direction) -> ShieldSides:
    return ShieldSides(**{_SIDE_NAMES[d]: True for d in directions})


class PieceBehavior:
    kind: PieceKind
    movable: bool = False
    rotatable: bool = False

    def interact(self, piece: Piece, incoming: Direction) -> Interaction:
        raise NotImplementedError

    def shield_sides(self, piece: Piece) -> ShieldSides:
        return ShieldSides()


class RoyalBehavior(PieceBehavior):
    kind = PieceKind.ROYAL

    def interact(self, piece: Piece, incoming: Direction) -> Interaction:
        return DESTROY


class EmitterBehavior(PieceBehavior):
    kind = PieceKind.EMITTER
    rotatable = True

    def interact(self, piece: Piece, incoming: Direction) -> Interaction:
        return BLOCK

    def shield_sides(self, piece: Piece) -> ShieldSides:
        return _sides(*Direction)


class ShieldBehavior(PieceBehavior):
    kind = PieceKind.SHIELD
    movable = True
    rotatable = True

    def interact(self, piece: Piece, incoming: Direction) -> Interaction:
        if is_shield_blocking(piece.facing, incoming):
            return BLOCK
        return DESTROY

    def shield_sides(self, piece: Piece) -> ShieldSides:
        return _sides(piece.facing)


class MirrorBehavior(PieceBehavior):
    kind = PieceKind.MIRROR
    movable = True
    rotatable = True

    def interact(self, piece: Piece, incoming: Direction) -> Interaction:
        outgoing = reflect_on_mirror(piece.facing, incoming)
        if outgoing is None:
            return DESTROY
        return Interaction(LaserEventType.REFLECT, outgoing)

    def shield_sides(self, piece: Piece) -> ShieldSides:
        return _sides(*mirror_reflective_sides(piece.facing))


class DualMirrorBehavior(PieceBehavior):
    kind = PieceKind.DUAL_MIRROR
    movable = True
    rotatable = True

    def interact(self, piece: Piece, incoming: Direction) -> Interaction:
        return Interaction(LaserEventType.REFLECT, reflect_on_dual_mirror(incoming))

    def shield_sides(self, piece: Piece) -> ShieldSides:
        return _sides(*Direction)


BEHAVIORS: dict[PieceKind, PieceBehavior] = {
    behavior.kind: behavior
    for behavior in (
        RoyalBehavior(),
        EmitterBehavior(),
        ShieldBehavior(),
        MirrorBehavior(),
        DualMirrorBehavior(),
    )
}


def behavior_for(piece: Piece) -> PieceBehavior:
    return BEHAVIORS[piece.kind]


def can_move(piece: Piece) -> bool:
    return behavior_for(piece).movable


def can_rotate(piece: Piece) -> bool:
    return behavior_for(piece).rotatable


def interact_with_laser(piece: Piece, incoming: Direction) -> Interaction:
    return behavior_for(piece).interact(piece, incoming)


def shield_sides(piece: Piece) -> ShieldSides:
    return behavior_for(piece).shield_sides(piece)


def to_view(piece: Piece) -> PieceView:
    return PieceView(**piece.model_dump(), shield_sides=shield_sides(piece))


def create_piece(
    kind: PieceKind,
    owner: int,
    x: int,
    y: int,
    facing: Direction = Direction.EAST,
    piece_id: str | None = None,
) -> Piece:
    """Create a piece of the given kind; dual mirrors get fresh cooldowns.

    Without an explicit ``piece_id`` the id is derived from kind, owner and cell.
    """
    if piece_id is None:
        piece_id = f"{kind.value}-{owner}-{x}-{y}"
    cooldowns = SwapCooldowns() if kind == PieceKind.DUAL_MIRROR else None
    piece = Piece(
        piece_id=piece_id,
        kind=kind,
        owner=owner,
        x=x,
        y=y,
        facing=facing,
        cooldowns=cooldowns,
    )
    logger.debug("Created piece %s at (%d, %d) facing %d", piece_id, x, y, facing)
    return piece
