"""Laser ray march.

The beam leaves the firing player's emitter and steps one cell at a time:

- empty cell: PATH, keep going
- off the board: EXIT, stop
- BLOCK: stop on that cell
- DESTROY: the piece is reported but the beam keeps going in the same
  direction, so one shot can hit a second piece behind the first
- REFLECT: change direction and step out of the same cell next iteration

The march is capped at MAX_LASER_ITERATIONS steps so closed mirror cycles
terminate with a partial trace. The board is never mutated here.
"""

import logging

from app.schemas.game_engine import PieceKind, Vector

from .board import Board
from .events import LaserEvent, LaserEventType
from .pieces import interact_with_laser

logger = logging.getLogger(__name__)

MAX_LASER_ITERATIONS = 200


def simulate(board: Board, firing_player: int) -> list[LaserEvent]:
    """Trace the beam fired by ``firing_player``'s emitter.

    Args:
        board: Board to trace through (read only).
        firing_player: Player whose emitter fires (1 or 2).

    Returns:
        Ordered list of LaserEvent, starting with START. Empty if the player
        has no emitter on the board.
    """
    emitters = board.find_pieces(kind=PieceKind.EMITTER, owner=firing_player)
    if not emitters:
        logger.warning("No emitter found for player %d, laser not fired", firing_player)
        return []

    emitter = emitters[0]
    x, y = emitter.x, emitter.y
    direction = emitter.facing
    events = [LaserEvent(event_type=LaserEventType.START, x=x, y=y, piece=emitter)]

    for _ in range(MAX_LASER_ITERATIONS):
        x += direction.dx
        y += direction.dy

        if not board.in_bounds(x, y):
            events.append(LaserEvent(event_type=LaserEventType.EXIT, x=x, y=y))
            break

        target = board.piece_at(x, y)
        if target is None:
            events.append(LaserEvent(event_type=LaserEventType.PATH, x=x, y=y))
            continue

        interaction = interact_with_laser(target, direction)
        event = LaserEvent(event_type=interaction.event_type, x=x, y=y, piece=target)
        if interaction.new_direction is not None:
            event.new_direction = Vector.from_direction(interaction.new_direction)
        events.append(event)

        if interaction.stops_beam:
            break
        if interaction.new_direction is not None:
            direction = interaction.new_direction
    else:
        logger.warning(
            "Laser for player %d hit the iteration cap (%d steps), returning partial trace",
            firing_player,
            MAX_LASER_ITERATIONS,
        )

    logger.debug(
        "Laser fired: player=%d, events=%d, destroyed=%d",
        firing_player,
        len(events),
        sum(1 for e in events if e.event_type == LaserEventType.DESTROY),
    )
    return events
