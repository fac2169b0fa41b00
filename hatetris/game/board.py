"""
Well geometry, collision detection, locking and line clearing.

A well is a tuple of ints, one per row (index 0 = top row). Bit ``x`` of a
row is set when column ``x`` is filled. Wells are never modified in place:
every operation that changes one returns a new tuple.

The ``bar`` splits the well in two. Rows above it are the spawn area: a
piece that locks with any cell above it clears nothing, and any filled cell
on row ``bar - 1`` ends the game.
"""

from __future__ import annotations

import numpy as np

from hatetris.errors import ConfigError
from hatetris.game.pieces import Piece, RotationSystem

MIN_WELL_WIDTH = 4


class Board:
    """Static description of the playing field plus the rules acting on it.

    Attributes:
        rotation_system: Piece table used for every collision test.
        width: Number of columns.
        depth: Number of rows.
        bar: First row in which completed lines count.
        full_row: Bitmask of a completely filled row.
    """

    def __init__(
        self,
        rotation_system: RotationSystem,
        width: int = 10,
        depth: int = 20,
        bar: int = 4,
    ) -> None:
        """Validate the configuration and build the board.

        Args:
            rotation_system: Piece definitions; must contain at least one piece.
            width: Well width in columns (at least 4).
            depth: Well depth in rows (at least ``bar``).
            bar: Row index of the bar (at least 1).

        Raises:
            ConfigError: If any of the constraints above is violated.
        """
        if len(rotation_system) < 1:
            raise ConfigError("Have to have at least one piece!")
        if bar < 1:
            raise ConfigError(f"Can't have a bar at {bar}, it must be at least 1")
        if depth < bar:
            raise ConfigError(f"Can't have well with depth {depth} less than bar at {bar}")
        if width < MIN_WELL_WIDTH:
            raise ConfigError(f"Can't have well with width {width} less than {MIN_WELL_WIDTH}")

        self.rotation_system = rotation_system
        self.width = width
        self.depth = depth
        self.bar = bar
        self.full_row = (1 << width) - 1

    def empty_well(self) -> tuple[int, ...]:
        """Return a well with every row empty."""
        return (0,) * self.depth

    def spawn(self, piece_id: int) -> Piece:
        """Return the spawn placement of ``piece_id`` for this well's width."""
        return self.rotation_system.place_new_piece(self.width, piece_id)

    def is_valid_position(self, well: tuple[int, ...], piece: Piece) -> bool:
        """Check whether a piece fits in the well.

        A position is valid if the piece's bounding box lies entirely inside
        the well and none of its rows overlaps a filled cell.

        Args:
            well: Row bitmasks.
            piece: Candidate placement.

        Returns:
            True if the position is valid, False otherwise.
        """
        orientation = self.rotation_system.rotations[piece.id][piece.o]
        x_actual = piece.x + orientation.x_min
        y_actual = piece.y + orientation.y_min

        if x_actual < 0 or x_actual + orientation.x_dim > self.width:
            return False
        if y_actual < 0 or y_actual + orientation.y_dim > self.depth:
            return False
        return not any(
            well[y_actual + row] & (mask << x_actual)
            for row, mask in enumerate(orientation.rows)
        )

    def lock(self, well: tuple[int, ...], score: int, piece: Piece) -> tuple[tuple[int, ...], int]:
        """Stamp a piece into the well and clear the rows it completed.

        Only the rows the piece occupies are inspected, top to bottom. A
        complete row is removed: everything above it drops by one and an
        empty row appears at the top. Each cleared row is worth one point.

        Completed rows only count when the whole piece came to rest at or
        below the bar. A piece that pokes above the bar has lost the game,
        and clearing rows under it must not pull it back down.

        Does NOT check validity first; the caller locks the last valid pose.

        Args:
            well: Row bitmasks before locking.
            score: Score before locking.
            piece: The piece to lock.

        Returns:
            Tuple of (new well, new score).
        """
        orientation = self.rotation_system.rotations[piece.id][piece.o]
        x_actual = piece.x + orientation.x_min
        y_actual = piece.y + orientation.y_min

        rows = list(well)
        for row, mask in enumerate(orientation.rows):
            rows[y_actual + row] |= mask << x_actual

        if y_actual < self.bar:
            return tuple(rows), score

        for row in range(y_actual, y_actual + orientation.y_dim):
            if rows[row] == self.full_row:
                del rows[row]
                rows.insert(0, 0)
                score += 1

        return tuple(rows), score

    def is_game_over(self, well: tuple[int, ...]) -> bool:
        """Determine whether a well is terminal.

        Nothing can be stacked above row ``bar - 1`` without filling that row
        first, so it is the only row that needs checking.
        """
        return well[self.bar - 1] != 0


# =============================================================================
# Well metrics
# =============================================================================

def well_to_grid(well: tuple[int, ...], width: int) -> np.ndarray:
    """Expand row bitmasks into a (depth, width) array of 0/1 cells."""
    rows = np.asarray(well, dtype=np.int64).reshape(-1, 1)
    return ((rows >> np.arange(width)) & 1).astype(np.int8)


def get_column_heights(grid: np.ndarray) -> np.ndarray:
    """Get the height of every column.

    A column's height is measured from the bottom of the well up to its
    topmost filled cell. An empty column has height 0.
    """
    filled = grid != 0
    has_block = filled.any(axis=0)
    first_block = np.argmax(filled, axis=0)
    return np.where(has_block, grid.shape[0] - first_block, 0)


def get_holes(grid: np.ndarray) -> int:
    """Count empty cells that have at least one filled cell above them."""
    filled = grid != 0
    block_above = np.maximum.accumulate(filled, axis=0)
    holes = block_above & ~filled
    return int(holes.sum())


def get_aggregate_height(grid: np.ndarray) -> int:
    """Sum of all column heights."""
    return int(get_column_heights(grid).sum())


def get_bumpiness(grid: np.ndarray) -> int:
    """Sum of absolute height differences between adjacent columns."""
    heights = get_column_heights(grid)
    return int(np.abs(np.diff(heights)).sum())


def get_stack_height(well: tuple[int, ...]) -> int:
    """Number of rows from the bottom of the well up to its highest filled row."""
    for row, mask in enumerate(well):
        if mask != 0:
            return len(well) - row
    return 0
