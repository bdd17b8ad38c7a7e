"""Tests for legal action enumeration."""

import pytest

from app.schemas.game_engine import Direction, PieceKind
from app.services.game.engine import (
    PlaceAction,
    SwapAction,
    get_legal_actions,
    get_placement_cells,
    get_swap_targets,
    validate_action,
)
from app.services.game.engine.context import MatchContext
from app.services.game.start_game import initialize_match

from .conftest import create_context, place, quiet_board


class TestEnumeration:
    def test_every_enumerated_action_validates(self, quiet_context: MatchContext):
        actions = get_legal_actions(quiet_context)
        assert actions
        for action in actions:
            assert validate_action(quiet_context, action).is_valid, action

    @pytest.mark.parametrize("seed", [0, 11, 42])
    def test_every_action_validates_on_fresh_matches(self, seed):
        ctx = initialize_match(seed)
        for action in get_legal_actions(ctx):
            assert validate_action(ctx, action).is_valid, action

    def test_placements_come_in_four_facings(self, quiet_context: MatchContext):
        places = [a for a in get_legal_actions(quiet_context) if isinstance(a, PlaceAction)]
        cells = get_placement_cells(quiet_context, 1)
        assert len(places) == 4 * len(cells)
        assert {a.facing for a in places if (a.x, a.y) == (4, 4)} == set(Direction)

    def test_only_side_to_move_by_default(self, quiet_context: MatchContext):
        assert all(a.player == 1 for a in get_legal_actions(quiet_context))

    def test_explicit_player(self, quiet_context: MatchContext):
        actions = get_legal_actions(quiet_context, player=2)
        assert actions
        assert all(a.player == 2 for a in actions)

    def test_finished_match_has_no_actions(self, quiet_context: MatchContext):
        quiet_context.finish(winner=2)
        assert get_legal_actions(quiet_context) == []


class TestPlacementCells:
    def test_empty_reserve_has_no_cells(self, quiet_context: MatchContext):
        quiet_context.turns.reserves[1] = 0
        assert get_placement_cells(quiet_context, 1) == []
        assert not any(
            isinstance(a, PlaceAction) for a in get_legal_actions(quiet_context)
        )

    def test_cells_are_empty_and_unprotected(self, quiet_context: MatchContext):
        cells = get_placement_cells(quiet_context, 1)
        for x, y in cells:
            assert quiet_context.board.piece_at(x, y) is None
        for protected in [(1, 0), (0, 1), (2, 1), (1, 2), (3, 2), (2, 3), (8, 9), (9, 8)]:
            assert protected not in cells


class TestSwapTargets:
    def test_targets_are_own_emitter_and_royal(self):
        board = quiet_board()
        dual = place(board, PieceKind.DUAL_MIRROR, 1, 5, 3)
        ctx = create_context(board)

        targets = get_swap_targets(ctx, dual)

        assert sorted(p.kind.value for p in targets) == ["emitter", "royal"]
        assert all(p.owner == 1 for p in targets)

    def test_cooldown_removes_target(self):
        board = quiet_board()
        dual = place(board, PieceKind.DUAL_MIRROR, 1, 5, 3)
        dual.cooldowns.reset(PieceKind.EMITTER)
        ctx = create_context(board)

        assert [p.kind for p in get_swap_targets(ctx, dual)] == [PieceKind.ROYAL]
        swaps = [a for a in get_legal_actions(ctx) if isinstance(a, SwapAction)]
        assert [(a.target_x, a.target_y) for a in swaps] == [(2, 2)]

    def test_non_dual_mirror_has_no_targets(self, quiet_context: MatchContext):
        shield = quiet_context.board.piece_at(8, 2)
        assert get_swap_targets(quiet_context, shield) == []
