"""
Piece definitions and the HATETRIS rotation system.

Every piece is drawn once, in its spawn orientation, inside a square box
(4x4 for all HATETRIS pieces). The remaining orientations are produced by
rotating that box clockwise about its centre, so a piece pivots in place the
same way every time it is rotated.

Coordinate convention:
  - Row 0 is the top of the well and rows increase downward.
  - Column 0 is the left edge and columns increase rightward.
  - A row bitmask has bit ``i`` set when column ``x_min + i`` of the piece's
    drawing box is filled, i.e. the least significant bit is the leftmost
    cell. Shifting a mask left by the piece's absolute column lines it up
    with a well row.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Piece:
    """A live piece: its type, drawing-box origin and rotation index.

    ``x``/``y`` locate the top-left corner of the piece's drawing box in the
    well; ``o`` indexes ``RotationSystem.rotations[id]``.
    """

    id: int
    x: int
    y: int
    o: int


@dataclass(frozen=True)
class Orientation:
    """One rotation state of one piece, reduced to its tight bounding box.

    Attributes:
        x_min: Column of the bounding box inside the drawing box.
        y_min: Row of the bounding box inside the drawing box.
        x_dim: Width of the bounding box.
        y_dim: Height of the bounding box.
        rows: One bitmask per bounding-box row, top to bottom.
    """

    x_min: int
    y_min: int
    x_dim: int
    y_dim: int
    rows: tuple[int, ...]


def _rotate_cw(cells: frozenset[tuple[int, int]], size: int) -> frozenset[tuple[int, int]]:
    """Rotate (row, col) cells a quarter turn clockwise inside a size x size box."""
    return frozenset((col, size - 1 - row) for row, col in cells)


def _to_orientation(cells: frozenset[tuple[int, int]]) -> Orientation:
    """Shrink a set of filled (row, col) cells to an Orientation."""
    y_min = min(row for row, _ in cells)
    y_max = max(row for row, _ in cells)
    x_min = min(col for _, col in cells)
    x_max = max(col for _, col in cells)

    rows = [0] * (y_max - y_min + 1)
    for row, col in cells:
        rows[row - y_min] |= 1 << (col - x_min)

    return Orientation(
        x_min=x_min,
        y_min=y_min,
        x_dim=x_max - x_min + 1,
        y_dim=y_max - y_min + 1,
        rows=tuple(rows),
    )


def orientations_from_drawing(drawing: list[str], num_rotations: int = 4) -> tuple[Orientation, ...]:
    """Build every orientation of a piece from its spawn drawing.

    Args:
        drawing: Square list of strings, ``#`` for a filled cell and any
            other character for an empty one.
        num_rotations: How many quarter turns to generate.

    Returns:
        Tuple of Orientations, index 0 being the drawing itself.

    Raises:
        ValueError: If the drawing is not square or has no filled cell.
    """
    size = len(drawing)
    if any(len(line) != size for line in drawing):
        raise ValueError("Piece drawing must be square")

    cells = frozenset(
        (row, col)
        for row, line in enumerate(drawing)
        for col, char in enumerate(line)
        if char == "#"
    )
    if not cells:
        raise ValueError("Piece drawing has no filled cells")

    orientations = []
    for _ in range(num_rotations):
        orientations.append(_to_orientation(cells))
        cells = _rotate_cw(cells, size)
    return tuple(orientations)


class RotationSystem:
    """Ordered table of piece types and their orientations.

    Attributes:
        pieces: Piece names, indexed by piece id.
        rotations: ``rotations[piece_id][o]`` is an Orientation.
        box_size: Edge length of the square every piece is drawn in.
    """

    def __init__(
        self,
        pieces: list[str],
        rotations: list[tuple[Orientation, ...]],
        box_size: int = 4,
    ) -> None:
        if len(pieces) != len(rotations):
            raise ValueError("Every piece needs exactly one list of rotations")
        self.pieces = tuple(pieces)
        self.rotations = tuple(rotations)
        self.box_size = box_size

    @classmethod
    def from_drawings(cls, drawings: dict[str, list[str]]) -> RotationSystem:
        """Create a rotation system from named spawn drawings.

        Piece ids follow the insertion order of ``drawings``.
        """
        return cls(
            pieces=list(drawings),
            rotations=[orientations_from_drawing(d) for d in drawings.values()],
            box_size=max((len(d) for d in drawings.values()), default=4),
        )

    def __len__(self) -> int:
        return len(self.rotations)

    def piece_id(self, name: str) -> int:
        """Return the id of the piece called ``name``."""
        return self.pieces.index(name)

    def place_new_piece(self, well_width: int, piece_id: int) -> Piece:
        """Return the spawn placement of a piece.

        The drawing box sits on well row 0 in orientation 0, horizontally
        centred. When the spare columns cannot be split evenly the extra one
        goes on the left, so the box leans to the right half of the well.

        Args:
            well_width: Number of columns in the well.
            piece_id: Index into ``rotations``.

        Returns:
            The spawned Piece.
        """
        return Piece(
            id=piece_id,
            x=(well_width - self.box_size + 1) // 2,
            y=0,
            o=0,
        )


# =============================================================================
# HATETRIS pieces
# =============================================================================
# Order matters: it is both the piece id and the tie-break order used by the
# piece selectors.

PIECE_DRAWINGS: dict[str, list[str]] = {
    "S": [
        "....",
        ".##.",
        "##..",
        "....",
    ],
    "Z": [
        "....",
        "##..",
        ".##.",
        "....",
    ],
    "O": [
        "....",
        ".##.",
        ".##.",
        "....",
    ],
    "I": [
        "....",
        "####",
        "....",
        "....",
    ],
    "L": [
        "....",
        "###.",
        "#...",
        "....",
    ],
    "J": [
        "....",
        "###.",
        "..#.",
        "....",
    ],
    "T": [
        "....",
        "###.",
        ".#..",
        "....",
    ],
}

HATETRIS_ROTATION_SYSTEM = RotationSystem.from_drawings(PIECE_DRAWINGS)
