from enum import Enum, IntEnum

from pydantic import BaseModel, Field

BOARD_SIZE = 10
MAX_TURNS = 100
INITIAL_RESERVE = 7
SWAP_COOLDOWN = 4


# Game phases
class GamePhase(str, Enum):
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class PieceKind(str, Enum):
    ROYAL = "royal"
    EMITTER = "emitter"
    SHIELD = "shield"
    MIRROR = "mirror"
    DUAL_MIRROR = "dual_mirror"


class Direction(IntEnum):
    """Compass facing in degrees. The y axis grows downward (south)."""

    EAST = 0
    SOUTH = 90
    WEST = 180
    NORTH = 270

    @property
    def dx(self) -> int:
        return _VECTORS[self][0]

    @property
    def dy(self) -> int:
        return _VECTORS[self][1]

    @property
    def opposite(self) -> "Direction":
        return Direction((self.value + 180) % 360)

    def rotated(self, clockwise: bool = True) -> "Direction":
        step = 90 if clockwise else -90
        return Direction((self.value + step) % 360)

    @classmethod
    def from_vector(cls, dx: int, dy: int) -> "Direction":
        for direction, vector in _VECTORS.items():
            if vector == (dx, dy):
                return direction
        raise ValueError(f"Not a unit compass vector: ({dx}, {dy})")


_VECTORS = {
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
    Direction.NORTH: (0, -1),
}


class Vector(BaseModel):
    dx: int
    dy: int

    @classmethod
    def from_direction(cls, direction: Direction) -> "Vector":
        return cls(dx=direction.dx, dy=direction.dy)


# Data models for board entities
class SwapCooldowns(BaseModel):
    """Turns remaining before a dual mirror may swap with each target kind."""

    emitter: int = Field(0, ge=0, le=SWAP_COOLDOWN)
    royal: int = Field(0, ge=0, le=SWAP_COOLDOWN)

    def get(self, kind: PieceKind) -> int:
        return self.emitter if kind == PieceKind.EMITTER else self.royal

    def reset(self, kind: PieceKind) -> None:
        if kind == PieceKind.EMITTER:
            self.emitter = SWAP_COOLDOWN
        else:
            self.royal = SWAP_COOLDOWN

    def tick(self) -> None:
        self.emitter = max(0, self.emitter - 1)
        self.royal = max(0, self.royal - 1)


class Piece(BaseModel):
    """A piece on the board.

    Behaviour (movable, rotatable, laser interaction) is derived from `kind`
    in app.services.game.engine.pieces; this model only carries state.
    """

    piece_id: str
    kind: PieceKind
    owner: int = Field(..., ge=1, le=2)
    x: int
    y: int
    facing: Direction = Direction.EAST
    alive: bool = True
    cooldowns: SwapCooldowns | None = None


class ShieldSides(BaseModel):
    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False


class PieceView(Piece):
    shield_sides: ShieldSides


# Action log for recording player actions
class ActionLog(BaseModel):
    turn: int
    player: int
    action_type: str
    message: str | None = None


# Read model handed to presentation layers
class Snapshot(BaseModel):
    board: list[list[PieceView | None]]
    current_player: int
    turn_count: int
    phase: GamePhase
    game_over: bool
    winner: int | None = None
    reserves: dict[int, int]
