"""Laser event types - the ordered trace produced by one fired shot.

Events describe exactly what the beam did, enabling:
- Frontend beam animation (every PATH cell in order)
- Destruction handling (DESTROY events identify the hit pieces)
- Action replay / audit logging
"""

from enum import Enum

from pydantic import BaseModel, Field

from app.schemas.game_engine import Piece, Vector


class LaserEventType(str, Enum):
    START = "start"
    PATH = "path"
    EXIT = "exit"
    BLOCK = "block"
    DESTROY = "destroy"
    REFLECT = "reflect"


class LaserEvent(BaseModel):
    """One step of the beam.

    ``piece`` refers to the live piece involved (emitter for START, the hit
    piece for BLOCK/DESTROY/REFLECT); it is None for PATH and EXIT.
    """

    event_type: LaserEventType
    x: int
    y: int
    piece: Piece | None = None
    new_direction: Vector | None = Field(
        None, description="Beam direction after a REFLECT event"
    )


def destroyed_pieces(events: list[LaserEvent]) -> list[Piece]:
    """Pieces hit fatally, in trace order, each reported once."""
    seen: set[str] = set()
    pieces: list[Piece] = []
    for event in events:
        if event.event_type != LaserEventType.DESTROY or event.piece is None:
            continue
        if event.piece.piece_id in seen:
            continue
        seen.add(event.piece.piece_id)
        pieces.append(event.piece)
    return pieces
