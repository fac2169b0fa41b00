"""Game logic: rotation system, board rules, and the transition engine."""

from hatetris.game.pieces import (
    HATETRIS_ROTATION_SYSTEM,
    Orientation,
    Piece,
    RotationSystem,
)
from hatetris.game.board import Board
from hatetris.game.tetris import CoreState, Move, MOVES, WellState, get_next_state

__all__ = [
    "HATETRIS_ROTATION_SYSTEM",
    "Orientation",
    "Piece",
    "RotationSystem",
    "Board",
    "CoreState",
    "Move",
    "MOVES",
    "WellState",
    "get_next_state",
]
