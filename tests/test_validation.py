"""Tests for action validation.

Critical scenarios tested:
- Turn and game-finished checks run first
- Every rule violation is reported with its error code
- A rejected action leaves the match untouched
"""

import pytest
from pydantic import ValidationError

from app.schemas.game_engine import Direction, PieceKind
from app.services.game.engine import (
    MoveAction,
    PlaceAction,
    RotateAction,
    SwapAction,
    build_action_from_payload,
    process_action,
    validate_action,
)
from app.services.game.engine.context import MatchContext

from .conftest import create_context, place, quiet_board


def _snapshot(ctx: MatchContext) -> dict:
    return {
        "pieces": sorted(
            (p.model_dump_json() for p in ctx.board.all_pieces()),
        ),
        "turns": ctx.turns.model_dump(),
        "phase": ctx.phase,
        "history": len(ctx.history),
    }


class TestTurnChecks:
    """Test checks that apply to every action."""

    def test_not_your_turn(self, quiet_context: MatchContext):
        result = validate_action(quiet_context, RotateAction(player=2, x=9, y=9))
        assert not result.is_valid
        assert result.error_code == "NOT_YOUR_TURN"

    def test_game_finished(self, quiet_context: MatchContext):
        quiet_context.finish(winner=1)
        result = validate_action(quiet_context, RotateAction(player=1, x=0, y=0))
        assert result.error_code == "GAME_FINISHED"


class TestRotateValidation:
    """Test rotate rules."""

    def test_empty_cell(self, quiet_context: MatchContext):
        result = validate_action(quiet_context, RotateAction(player=1, x=5, y=5))
        assert result.error_code == "NO_PIECE"

    def test_royal_cannot_rotate(self, quiet_context: MatchContext):
        result = validate_action(quiet_context, RotateAction(player=1, x=2, y=2))
        assert result.error_code == "ROYAL_CANNOT_ROTATE"

    def test_emitter_can_rotate(self, quiet_context: MatchContext):
        assert validate_action(quiet_context, RotateAction(player=1, x=0, y=0)).is_valid


class TestMoveValidation:
    """Test move rules."""

    def test_emitter_cannot_move(self, quiet_context: MatchContext):
        action = MoveAction(player=1, from_x=0, from_y=0, to_x=1, to_y=0)
        assert validate_action(quiet_context, action).error_code == "CANNOT_MOVE"

    def test_royal_cannot_move(self, quiet_context: MatchContext):
        action = MoveAction(player=1, from_x=2, from_y=2, to_x=2, to_y=3)
        assert validate_action(quiet_context, action).error_code == "CANNOT_MOVE"

    def test_off_board(self):
        board = quiet_board()
        place(board, PieceKind.SHIELD, 1, 9, 4)
        action = MoveAction(player=1, from_x=9, from_y=4, to_x=10, to_y=4)
        assert validate_action(create_context(board), action).error_code == "OUT_OF_BOUNDS"

    def test_occupied(self):
        board = quiet_board()
        place(board, PieceKind.MIRROR, 1, 8, 3)
        action = MoveAction(player=1, from_x=8, from_y=2, to_x=8, to_y=3)
        assert validate_action(create_context(board), action).error_code == "CELL_OCCUPIED"

    def test_diagonal_step(self, quiet_context: MatchContext):
        action = MoveAction(player=1, from_x=8, from_y=2, to_x=7, to_y=3)
        assert validate_action(quiet_context, action).error_code == "NOT_ADJACENT"

    def test_two_cell_step(self, quiet_context: MatchContext):
        action = MoveAction(player=1, from_x=8, from_y=2, to_x=8, to_y=4)
        assert validate_action(quiet_context, action).error_code == "NOT_ADJACENT"

    def test_missing_piece(self, quiet_context: MatchContext):
        action = MoveAction(player=1, from_x=5, from_y=5, to_x=5, to_y=6)
        assert validate_action(quiet_context, action).error_code == "NO_PIECE"


class TestPlaceValidation:
    """Test mirror placement rules."""

    def test_empty_reserve(self, quiet_context: MatchContext):
        quiet_context.turns.reserves[1] = 0
        action = PlaceAction(player=1, x=5, y=5)
        assert validate_action(quiet_context, action).error_code == "EMPTY_RESERVE"

    def test_off_board(self, quiet_context: MatchContext):
        action = PlaceAction(player=1, x=-1, y=5)
        assert validate_action(quiet_context, action).error_code == "OUT_OF_BOUNDS"

    def test_occupied(self, quiet_context: MatchContext):
        action = PlaceAction(player=1, x=8, y=2)
        assert validate_action(quiet_context, action).error_code == "CELL_OCCUPIED"

    @pytest.mark.parametrize("x,y", [(1, 0), (2, 3), (7, 6), (9, 8)])
    def test_protected_perimeter(self, quiet_context: MatchContext, x, y):
        """Cells next to any emitter or royal, either player's, are protected."""
        action = PlaceAction(player=1, x=x, y=y)
        assert validate_action(quiet_context, action).error_code == "PROTECTED_PERIMETER"

    def test_diagonal_to_royal_is_allowed(self, quiet_context: MatchContext):
        action = PlaceAction(player=1, x=3, y=3, facing=Direction.SOUTH)
        assert validate_action(quiet_context, action).is_valid


class TestSwapValidation:
    """Test dual mirror swap rules."""

    @pytest.fixture
    def swap_context(self) -> MatchContext:
        board = quiet_board()
        place(board, PieceKind.DUAL_MIRROR, 1, 5, 3)
        place(board, PieceKind.DUAL_MIRROR, 2, 5, 6)
        return create_context(board)

    def test_valid_swap_with_royal(self, swap_context: MatchContext):
        action = SwapAction(player=1, x=5, y=3, target_x=2, target_y=2)
        assert validate_action(swap_context, action).is_valid

    def test_missing_piece(self, swap_context: MatchContext):
        action = SwapAction(player=1, x=5, y=3, target_x=4, target_y=4)
        assert validate_action(swap_context, action).error_code == "NO_PIECE"

    def test_source_must_be_dual_mirror(self, swap_context: MatchContext):
        action = SwapAction(player=1, x=8, y=2, target_x=2, target_y=2)
        assert validate_action(swap_context, action).error_code == "NOT_DUAL_MIRROR"

    def test_target_must_be_own_emitter_or_royal(self, swap_context: MatchContext):
        enemy_royal = SwapAction(player=1, x=5, y=3, target_x=7, target_y=7)
        own_shield = SwapAction(player=1, x=5, y=3, target_x=8, target_y=2)
        assert validate_action(swap_context, enemy_royal).error_code == "INVALID_SWAP_TARGET"
        assert validate_action(swap_context, own_shield).error_code == "INVALID_SWAP_TARGET"

    def test_cooldown(self, swap_context: MatchContext):
        swap_context.board.piece_at(5, 3).cooldowns.reset(PieceKind.EMITTER)
        action = SwapAction(player=1, x=5, y=3, target_x=0, target_y=0)
        result = validate_action(swap_context, action)
        assert result.error_code == "SWAP_COOLDOWN"
        assert "4 turns" in result.error_message


class TestRejectedActionsChangeNothing:
    """A failed action must leave board, reserves and turn untouched."""

    @pytest.mark.parametrize(
        "action",
        [
            RotateAction(player=1, x=2, y=2),
            MoveAction(player=1, from_x=8, from_y=2, to_x=7, to_y=3),
            PlaceAction(player=1, x=1, y=0),
            SwapAction(player=1, x=8, y=2, target_x=2, target_y=2),
            RotateAction(player=2, x=9, y=9),
        ],
    )
    def test_failure_is_idempotent(self, quiet_context: MatchContext, action):
        before = _snapshot(quiet_context)

        result = process_action(quiet_context, action)

        assert not result.success
        assert result.error_code is not None
        assert result.laser_events == []
        assert _snapshot(quiet_context) == before


class TestBuildActionFromPayload:
    """Test wire payload parsing."""

    def test_flat_payload(self):
        action = build_action_from_payload(
            {"action_type": "move", "player": 1, "from_x": 1, "from_y": 1, "to_x": 1, "to_y": 2}
        )
        assert isinstance(action, MoveAction)
        assert action.to_y == 2

    def test_nested_params(self):
        action = build_action_from_payload(
            {"action_type": "place", "player": 2, "params": {"x": 4, "y": 5, "facing": 90}}
        )
        assert isinstance(action, PlaceAction)
        assert action.facing == Direction.SOUTH

    def test_type_alias(self):
        action = build_action_from_payload({"type": "rotate", "player": 1, "x": 0, "y": 0})
        assert isinstance(action, RotateAction)
        assert action.clockwise

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            build_action_from_payload({"action_type": "teleport", "player": 1})

    def test_non_string_type(self):
        with pytest.raises(ValueError):
            build_action_from_payload({"action_type": ["rotate"], "player": 1, "x": 0, "y": 0})

    def test_params_must_be_an_object(self):
        with pytest.raises(ValueError):
            build_action_from_payload({"action_type": "rotate", "player": 1, "params": 5})

    def test_missing_fields(self):
        with pytest.raises(ValidationError):
            build_action_from_payload({"action_type": "swap", "player": 1, "x": 0})

    def test_bad_facing(self):
        with pytest.raises(ValidationError):
            build_action_from_payload(
                {"action_type": "place", "player": 1, "x": 0, "y": 0, "facing": 45}
            )
