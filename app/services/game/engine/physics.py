"""Pure laser geometry: mirror reflection tables and shield facing checks.

Nothing in here knows about boards, players or turns.

Mirror classes are selected by ``facing % 180``:

    0   "/"  East <-> North, West <-> South
    90  "\\"  East <-> South, West <-> North

A diagonal mirror only reflects on one face. For facing ``f`` that face is
bounded by the sides ``f`` and ``f + 90`` (e.g. facing 180 reflects on its
west and north sides). A beam travelling in direction ``d`` enters a cell
through side ``d.opposite``.
"""

from app.schemas.game_engine import Direction

SLASH_TABLE: dict[Direction, Direction] = {
    Direction.EAST: Direction.NORTH,
    Direction.NORTH: Direction.EAST,
    Direction.WEST: Direction.SOUTH,
    Direction.SOUTH: Direction.WEST,
}

BACKSLASH_TABLE: dict[Direction, Direction] = {
    Direction.EAST: Direction.SOUTH,
    Direction.SOUTH: Direction.EAST,
    Direction.WEST: Direction.NORTH,
    Direction.NORTH: Direction.WEST,
}

# Fixed 90 degree rotation used by dual mirrors.
DUAL_MIRROR_TABLE: dict[Direction, Direction] = {
    Direction.EAST: Direction.NORTH,
    Direction.NORTH: Direction.WEST,
    Direction.WEST: Direction.SOUTH,
    Direction.SOUTH: Direction.EAST,
}


def mirror_class_table(facing: Direction) -> dict[Direction, Direction]:
    return SLASH_TABLE if facing % 180 == 0 else BACKSLASH_TABLE


def mirror_reflective_sides(facing: Direction) -> tuple[Direction, Direction]:
    """Return the two sides of the cell covered by the mirror's reflective face."""
    facing = Direction(facing)
    return facing, facing.rotated(clockwise=True)


def reflect_on_mirror(facing: Direction, incoming: Direction) -> Direction | None:
    """Outgoing direction for a beam hitting a mirror, or None if it hits the back."""
    entry_side = Direction(incoming).opposite
    if entry_side not in mirror_reflective_sides(facing):
        return None
    return mirror_class_table(facing).get(Direction(incoming))


def is_reflective_side(facing: Direction, incoming: Direction) -> bool:
    return reflect_on_mirror(facing, incoming) is not None


def reflect_on_dual_mirror(incoming: Direction) -> Direction:
    return DUAL_MIRROR_TABLE[Direction(incoming)]


def is_shield_blocking(facing: Direction, incoming: Direction) -> bool:
    """A shield blocks only when it faces back into the beam."""
    return Direction(facing) == Direction(incoming).opposite
