"""Game engine module - authoritative laser duel rules.

This module provides the core game engine with:
- Action types for explicit player inputs
- Laser events describing each shot
- ProcessResult pattern for error handling
- Modular processing logic

Usage:
    from app.services.game.engine import (
        GameEngine,
        MoveAction,
        RotateAction,
    )

    engine = GameEngine(context)
    result = engine.execute_action(RotateAction(player=1, x=3, y=4))

    if result.success:
        snapshot = result.snapshot
        events = result.laser_events  # The beam trace for this turn
    else:
        # Handle error
        print(f"Error: {result.error_code} - {result.error_message}")
"""

# Actions - explicit player inputs
from .actions import (
    GameAction,
    MoveAction,
    PlaceAction,
    RotateAction,
    SwapAction,
    build_action_from_payload,
)

# Board and per-match state
from .board import Board, BoardError
from .context import MatchContext

# Events - the laser trace
from .events import LaserEvent, LaserEventType, destroyed_pieces

# Laser
from .laser import MAX_LASER_ITERATIONS, simulate

# Legal moves
from .legal_moves import (
    get_legal_actions,
    get_move_destinations,
    get_piece_actions,
    get_placement_cells,
    get_swap_targets,
)

# Pieces
from .pieces import create_piece

# Main processing
from .process import GameEngine, build_snapshot, check_win_condition, process_action

# Turns
from .turns import TurnManager, opponent_of

# Result types
from .validation import ProcessResult, ValidationResult, validate_action

__all__ = [
    # Actions
    "GameAction",
    "RotateAction",
    "MoveAction",
    "PlaceAction",
    "SwapAction",
    "build_action_from_payload",
    # Board
    "Board",
    "BoardError",
    "MatchContext",
    "create_piece",
    # Events
    "LaserEvent",
    "LaserEventType",
    "destroyed_pieces",
    # Laser
    "MAX_LASER_ITERATIONS",
    "simulate",
    # Processing
    "GameEngine",
    "process_action",
    "check_win_condition",
    "build_snapshot",
    # Turns
    "TurnManager",
    "opponent_of",
    # Validation
    "ProcessResult",
    "ValidationResult",
    "validate_action",
    # Legal moves
    "get_legal_actions",
    "get_move_destinations",
    "get_piece_actions",
    "get_placement_cells",
    "get_swap_targets",
]
