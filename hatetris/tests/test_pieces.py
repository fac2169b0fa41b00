"""
Tests for the rotation system.

Tests:
- Orientations are derived correctly from the spawn drawings
- Four quarter turns bring a piece back to its spawn orientation
- Spawn placement centres the drawing box
"""

import pytest

from ..game.pieces import (
    HATETRIS_ROTATION_SYSTEM,
    PIECE_DRAWINGS,
    Orientation,
    Piece,
    RotationSystem,
    orientations_from_drawing,
)


class TestOrientations:
    """Tests for orientation derivation."""

    def test_seven_pieces_in_order(self):
        """Piece ids follow the S Z O I L J T order."""
        assert HATETRIS_ROTATION_SYSTEM.pieces == ("S", "Z", "O", "I", "L", "J", "T")
        assert len(HATETRIS_ROTATION_SYSTEM) == 7

    def test_every_piece_has_four_rotations(self):
        """Each piece has four orientations of four cells each."""
        for rotations in HATETRIS_ROTATION_SYSTEM.rotations:
            assert len(rotations) == 4
            for orientation in rotations:
                assert sum(bin(row).count("1") for row in orientation.rows) == 4
                assert len(orientation.rows) == orientation.y_dim

    def test_s_spawn_orientation(self):
        """S lies flat in the middle two rows of its box."""
        assert HATETRIS_ROTATION_SYSTEM.rotations[0][0] == Orientation(
            x_min=0, y_min=1, x_dim=3, y_dim=2, rows=(0b110, 0b011)
        )

    def test_s_rotated_once(self):
        """A clockwise quarter turn stands S up in columns 1-2."""
        assert HATETRIS_ROTATION_SYSTEM.rotations[0][1] == Orientation(
            x_min=1, y_min=0, x_dim=2, y_dim=3, rows=(0b01, 0b11, 0b10)
        )

    def test_i_orientations(self):
        """I alternates between a row and a column."""
        rotations = HATETRIS_ROTATION_SYSTEM.rotations[3]
        assert rotations[0] == Orientation(x_min=0, y_min=1, x_dim=4, y_dim=1, rows=(0b1111,))
        assert rotations[1] == Orientation(x_min=2, y_min=0, x_dim=1, y_dim=4, rows=(1, 1, 1, 1))
        assert rotations[3].x_min == 1

    def test_o_does_not_change(self):
        """O looks the same in every orientation."""
        rotations = HATETRIS_ROTATION_SYSTEM.rotations[2]
        assert all(orientation == rotations[0] for orientation in rotations)

    def test_full_turn_returns_to_spawn(self):
        """A fifth orientation equals the first for every piece."""
        for drawing in PIECE_DRAWINGS.values():
            orientations = orientations_from_drawing(drawing, num_rotations=5)
            assert orientations[4] == orientations[0]

    def test_drawing_must_be_square(self):
        """A non-square drawing is rejected."""
        with pytest.raises(ValueError):
            orientations_from_drawing(["##", "#"])

    def test_drawing_must_have_cells(self):
        """A blank drawing is rejected."""
        with pytest.raises(ValueError):
            orientations_from_drawing(["..", ".."])


class TestRotationSystem:
    """Tests for spawn placement and lookups."""

    def test_spawn_in_classic_well(self):
        """In a 10-wide well the box starts at column 3."""
        assert HATETRIS_ROTATION_SYSTEM.place_new_piece(10, 0) == Piece(id=0, x=3, y=0, o=0)

    @pytest.mark.parametrize("width,expected_x", [(4, 0), (5, 1), (8, 2), (11, 4)])
    def test_spawn_leans_right(self, width, expected_x):
        """Odd spare columns put the extra one on the left."""
        assert HATETRIS_ROTATION_SYSTEM.place_new_piece(width, 3).x == expected_x

    def test_piece_id_lookup(self):
        """Names map back to ids."""
        assert HATETRIS_ROTATION_SYSTEM.piece_id("I") == 3
        assert HATETRIS_ROTATION_SYSTEM.piece_id("T") == 6

    def test_mismatched_tables_rejected(self):
        """Names and rotation lists must pair up."""
        with pytest.raises(ValueError):
            RotationSystem(["S", "Z"], [orientations_from_drawing(PIECE_DRAWINGS["S"])])
