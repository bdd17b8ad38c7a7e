"""Game service module.

Provides:
- Match initialization (start_game.py)
- Game engine processing (engine/)
- Greedy AI opponent (ai/)
- In-memory match registry (manager.py)
"""

# Re-export from engine for convenience
from .engine import (
    GameAction,
    GameEngine,
    MatchContext,
    MoveAction,
    PlaceAction,
    ProcessResult,
    RotateAction,
    SwapAction,
    build_action_from_payload,
    process_action,
)
from .start_game import initialize_match, setup_board

__all__ = [
    # Initialization
    "initialize_match",
    "setup_board",
    # Engine
    "GameAction",
    "GameEngine",
    "MatchContext",
    "ProcessResult",
    "RotateAction",
    "MoveAction",
    "PlaceAction",
    "SwapAction",
    "process_action",
    "build_action_from_payload",
]
