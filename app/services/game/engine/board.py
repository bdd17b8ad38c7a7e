"""Grid occupancy for one match. No game rules live here."""

import logging

from app.schemas.game_engine import BOARD_SIZE, Piece, PieceKind, PieceView

from .pieces import to_view

logger = logging.getLogger(__name__)

_NEIGHBOUR_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class BoardError(RuntimeError):
    """A caller broke a board invariant (occupied cell, piece off the grid).

    Raised for programming errors only; player mistakes are reported as
    validation failures before the board is touched.
    """


class Board:
    """N x N grid where each cell holds at most one piece.

    Invariant: ``piece.x, piece.y`` always match the slot holding the piece.
    """

    def __init__(self, size: int = BOARD_SIZE):
        self.size = size
        self._grid: list[list[Piece | None]] = [[None] * size for _ in range(size)]
        self._issued_ids = 0

    def new_piece_id(self, kind: PieceKind, owner: int) -> str:
        """Next id for a piece joining this board, numbered per board."""
        self._issued_ids += 1
        return f"{kind.value}-{owner}-{self._issued_ids}"

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def piece_at(self, x: int, y: int) -> Piece | None:
        if not self.in_bounds(x, y):
            return None
        return self._grid[y][x]

    def all_pieces(self) -> list[Piece]:
        return [piece for row in self._grid for piece in row if piece is not None]

    def find_pieces(
        self, kind: PieceKind | None = None, owner: int | None = None
    ) -> list[Piece]:
        return [
            piece
            for piece in self.all_pieces()
            if (kind is None or piece.kind == kind)
            and (owner is None or piece.owner == owner)
        ]

    def add_piece(self, piece: Piece) -> None:
        if not self.in_bounds(piece.x, piece.y):
            raise BoardError(f"Cannot add {piece.piece_id}: ({piece.x}, {piece.y}) is off the board")
        if self._grid[piece.y][piece.x] is not None:
            raise BoardError(f"Cannot add {piece.piece_id}: ({piece.x}, {piece.y}) is occupied")
        self._grid[piece.y][piece.x] = piece

    def remove_piece(self, piece: Piece) -> None:
        self._require_on_board(piece)
        self._grid[piece.y][piece.x] = None
        piece.alive = False
        logger.debug("Removed %s from (%d, %d)", piece.piece_id, piece.x, piece.y)

    def move_piece(self, piece: Piece, x: int, y: int) -> None:
        self._require_on_board(piece)
        if not self.in_bounds(x, y):
            raise BoardError(f"Cannot move {piece.piece_id}: ({x}, {y}) is off the board")
        occupant = self._grid[y][x]
        if occupant is not None and occupant is not piece:
            raise BoardError(f"Cannot move {piece.piece_id}: ({x}, {y}) is occupied")
        self._grid[piece.y][piece.x] = None
        piece.x, piece.y = x, y
        self._grid[y][x] = piece

    def swap_pieces(self, first: Piece, second: Piece) -> None:
        """Exchange the coordinates of two pieces on the board."""
        self._require_on_board(first)
        self._require_on_board(second)
        first_pos = (first.x, first.y)
        second_pos = (second.x, second.y)
        first.x, first.y = second_pos
        second.x, second.y = first_pos
        self._grid[first.y][first.x] = first
        self._grid[second.y][second.x] = second

    def adjacent_pieces(self, x: int, y: int) -> list[Piece]:
        neighbours = (self.piece_at(x + dx, y + dy) for dx, dy in _NEIGHBOUR_OFFSETS)
        return [piece for piece in neighbours if piece is not None]

    def clone(self) -> "Board":
        """Deep copy: every piece (facing, cooldowns, alive flag) is duplicated."""
        board = Board(self.size)
        board._issued_ids = self._issued_ids
        for piece in self.all_pieces():
            board.add_piece(piece.model_copy(deep=True))
        return board

    def to_view(self) -> list[list[PieceView | None]]:
        return [
            [to_view(piece) if piece is not None else None for piece in row]
            for row in self._grid
        ]

    def _require_on_board(self, piece: Piece) -> None:
        if self.piece_at(piece.x, piece.y) is not piece:
            raise BoardError(f"{piece.piece_id} is not on the board at ({piece.x}, {piece.y})")
