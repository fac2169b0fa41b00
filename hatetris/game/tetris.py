"""
State types and the transition engine.

``get_next_state`` is the single point of game-state change: it takes an
immutable WellState and one move and returns the next WellState. It never
consults anything but its arguments, so replaying the same moves from the
same state always yields the same states.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

from hatetris.game.board import Board
from hatetris.game.pieces import Piece


class Move(str, enum.Enum):
    """The four moves a player can make. Values are the replay symbols."""
    LEFT = "L"
    RIGHT = "R"
    DOWN = "D"
    UP = "U"


# Row-major order used by the replay codec and by the search.
MOVES: tuple[Move, ...] = (Move.LEFT, Move.RIGHT, Move.DOWN, Move.UP)


@dataclass(frozen=True)
class CoreState:
    """The well contents and the score; what a lock outcome is made of."""

    well: tuple[int, ...]
    score: int = 0


@dataclass(frozen=True)
class WellState:
    """A CoreState plus the live piece, or None between lock and spawn."""

    core: CoreState
    piece: Piece | None = None


def get_next_state(board: Board, state: WellState, move: Move) -> WellState:
    """Apply one move to a well state.

    L/R shift the piece one column, D drops it one row and U rotates it to
    its next orientation. If the moved piece does not fit:
      - for D, the piece locks where it was (see ``Board.lock``) and the
        result has no live piece;
      - for any other move, the input state is returned unchanged.

    Args:
        board: Well geometry and rules.
        state: Current state; must have a live piece.
        move: The move to apply.

    Returns:
        The resulting WellState.

    Raises:
        ValueError: If ``state`` has no live piece.
    """
    piece = state.piece
    if piece is None:
        raise ValueError("Cannot move: there is no live piece")

    move = Move(move)
    if move is Move.LEFT:
        candidate = replace(piece, x=piece.x - 1)
    elif move is Move.RIGHT:
        candidate = replace(piece, x=piece.x + 1)
    elif move is Move.DOWN:
        candidate = replace(piece, y=piece.y + 1)
    else:
        num_rotations = len(board.rotation_system.rotations[piece.id])
        candidate = replace(piece, o=(piece.o + 1) % num_rotations)

    if board.is_valid_position(state.core.well, candidate):
        return WellState(core=state.core, piece=candidate)

    if move is Move.DOWN:
        well, score = board.lock(state.core.well, state.core.score, piece)
        return WellState(core=CoreState(well=well, score=score), piece=None)

    return state


def is_game_over(board: Board, state: WellState) -> bool:
    """Decide whether a state the Timeline keeps is terminal.

    True if a cell sits on the row above the bar, or if the state has no
    live piece because the next one had nowhere to spawn.
    """
    return state.piece is None or board.is_game_over(state.core.well)
