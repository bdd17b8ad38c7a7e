"""Tests for pure laser geometry.

Critical scenarios tested:
- Mirror reflection on the reflective face, for every facing
- Beams hitting the back of a mirror are not reflected
- Dual mirror rotation table
- Shield blocking only when facing back into the beam
"""

import pytest

from app.schemas.game_engine import Direction
from app.services.game.engine.physics import (
    DUAL_MIRROR_TABLE,
    is_reflective_side,
    is_shield_blocking,
    mirror_reflective_sides,
    reflect_on_dual_mirror,
    reflect_on_mirror,
)

E, S, W, N = Direction.EAST, Direction.SOUTH, Direction.WEST, Direction.NORTH


class TestDirection:
    """Test compass helpers."""

    def test_vectors_point_down_for_south(self):
        """y grows downward, so SOUTH is +y and NORTH is -y."""
        assert (S.dx, S.dy) == (0, 1)
        assert (N.dx, N.dy) == (0, -1)
        assert (E.dx, E.dy) == (1, 0)
        assert (W.dx, W.dy) == (-1, 0)

    def test_rotation_wraps(self):
        assert N.rotated(clockwise=True) == E
        assert E.rotated(clockwise=False) == N
        assert W.opposite == E

    def test_from_vector(self):
        assert Direction.from_vector(0, -1) == N
        with pytest.raises(ValueError):
            Direction.from_vector(1, 1)


class TestMirrorReflection:
    """Test single-face mirror reflection."""

    @pytest.mark.parametrize(
        "facing,incoming,expected",
        [
            (E, W, S),
            (E, N, E),
            (S, N, W),
            (S, E, S),
            (W, E, N),
            (W, S, W),
            (N, S, E),
            (N, W, N),
        ],
    )
    def test_reflects_on_reflective_face(self, facing, incoming, expected):
        assert reflect_on_mirror(facing, incoming) == expected

    @pytest.mark.parametrize(
        "facing,incoming",
        [(E, E), (E, S), (S, W), (S, S), (W, W), (W, N), (N, N), (N, E)],
    )
    def test_back_of_mirror_does_not_reflect(self, facing, incoming):
        assert reflect_on_mirror(facing, incoming) is None
        assert not is_reflective_side(facing, incoming)

    def test_each_facing_has_exactly_two_reflective_entries(self):
        for facing in Direction:
            reflecting = [d for d in Direction if is_reflective_side(facing, d)]
            assert len(reflecting) == 2

    def test_reflective_sides_for_display(self):
        assert mirror_reflective_sides(E) == (E, S)
        assert mirror_reflective_sides(N) == (N, E)

    def test_east_beam_turns_north_on_west_facing_mirror(self):
        """A beam going east, hitting a '/' mirror on its west face, goes north."""
        assert reflect_on_mirror(W, E) == N

    def test_two_mirror_staircase(self):
        """East -> North on the first mirror, North -> East on the second."""
        first = reflect_on_mirror(W, E)
        second = reflect_on_mirror(E, first)
        assert (first, second) == (N, E)


class TestDualMirror:
    """Test dual mirror reflection."""

    def test_rotation_table_is_fixed(self):
        assert DUAL_MIRROR_TABLE == {E: N, N: W, W: S, S: E}

    def test_always_reflects(self):
        for incoming in Direction:
            assert reflect_on_dual_mirror(incoming) == DUAL_MIRROR_TABLE[incoming]


class TestShield:
    """Test shield blocking."""

    def test_blocks_when_facing_the_beam(self):
        assert is_shield_blocking(W, E)
        assert is_shield_blocking(N, S)

    def test_does_not_block_otherwise(self):
        assert not is_shield_blocking(E, E)
        assert not is_shield_blocking(N, E)
        assert not is_shield_blocking(S, E)
