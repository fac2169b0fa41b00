"""
Tests for the reachability search.

Tests:
- Every resting place of a piece on an empty well is found exactly once
- Slides under overhangs are found, not only straight drops
- Line clears show up in the outcome's score
- A piece that cannot spawn has no outcomes
"""

from ..ai.search import reachable_locks
from ..game.tetris import CoreState

S_PIECE, O_PIECE, I_PIECE = 0, 2, 3


class TestReachableLocks:
    """Tests for reachable_locks."""

    def test_o_on_empty_well(self, board):
        """O can rest in any of the nine column pairs."""
        outcomes = reachable_locks(board, board.empty_well(), O_PIECE)

        expected = {
            CoreState(well=(0,) * 18 + (0b11 << col, 0b11 << col), score=0)
            for col in range(9)
        }
        assert len(outcomes) == 9
        assert set(outcomes) == expected

    def test_i_on_empty_well(self, board):
        """Seven flat placements plus ten upright ones."""
        assert len(reachable_locks(board, board.empty_well(), I_PIECE)) == 17

    def test_s_on_empty_well(self, board):
        """Orientations with the same shape do not produce duplicates."""
        outcomes = reachable_locks(board, board.empty_well(), S_PIECE)
        assert len(outcomes) == 17
        assert len(set(outcomes)) == len(outcomes)

    def test_deterministic_order(self, board):
        """The same well always gives the same list in the same order."""
        well = (0,) * 16 + (0b100, 0b1100, 0b1101100, 0b1111101110)
        assert reachable_locks(board, well, S_PIECE) == reachable_locks(board, well, S_PIECE)

    def test_line_clear_outcome(self, board):
        """Dropping I upright into the gap clears the bottom row."""
        well = (0,) * 19 + (0b1111111110,)
        outcomes = reachable_locks(board, well, I_PIECE)

        assert CoreState(well=(0,) * 17 + (1, 1, 1), score=1) in outcomes
        assert all(core.score in (0, 1) for core in outcomes)

    def test_slide_under_overhang(self, board):
        """O can drop beside a ledge and slide underneath it."""
        well = (0,) * 17 + (0b111, 0, 0)
        outcomes = reachable_locks(board, well, O_PIECE)

        tucked = CoreState(well=(0,) * 17 + (0b111, 0b11, 0b11), score=0)
        on_ledge = CoreState(well=(0,) * 15 + (0b11, 0b11, 0b111, 0, 0), score=0)
        assert tucked in outcomes
        assert on_ledge in outcomes

    def test_spawn_blocked(self, board):
        """A piece whose spawn overlaps the stack has nowhere to go."""
        well = [0] * 20
        well[2] = 0b1111111111
        assert reachable_locks(board, tuple(well), S_PIECE) == []

    def test_does_not_modify_well(self, board):
        """The snapshot passed in is left untouched."""
        well = (0,) * 19 + (0b1111111110,)
        reachable_locks(board, well, I_PIECE)
        assert well == (0,) * 19 + (0b1111111110,)
