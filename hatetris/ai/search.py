"""
Reachability search: every distinct lock a piece can reach from its spawn.

The poses a piece can occupy, ``(x, y, o)``, form a finite graph whose edges
are the moves the transition engine accepts. Rotation cycles and L/R
back-and-forth make that graph cyclic, so the walk keeps an explicit visited
set and a work queue instead of recursing. Every D move that fails from a
visited pose is a terminal edge: it locks the piece and yields one outcome.
"""

from __future__ import annotations

from collections import deque
from dataclasses import replace

from hatetris.game.board import Board
from hatetris.game.pieces import Piece
from hatetris.game.tetris import MOVES, CoreState, WellState, get_next_state


def _drop_through_empty_rows(board: Board, well: tuple[int, ...], piece: Piece) -> Piece:
    """Lower a freshly spawned piece while its whole box and the row below are empty.

    Inside empty rows every column and orientation is reachable at every
    height, so starting the search lower finds exactly the same locks.
    """
    box = board.rotation_system.box_size
    while piece.y + box < board.depth and not any(well[piece.y:piece.y + box + 1]):
        piece = replace(piece, y=piece.y + 1)
    return piece


def reachable_locks(board: Board, well: tuple[int, ...], piece_id: int) -> list[CoreState]:
    """Enumerate the outcomes of locking ``piece_id`` anywhere it can reach.

    Args:
        board: Well geometry and rules.
        well: Snapshot of the well the piece spawns into.
        piece_id: Piece type to place.

    Returns:
        Distinct CoreStates, in the order they were first found. Scores count
        only the lines cleared by this lock. Empty if the spawn pose itself
        does not fit, meaning this piece loses the game immediately.
    """
    spawn = board.spawn(piece_id)
    if not board.is_valid_position(well, spawn):
        return []
    start = _drop_through_empty_rows(board, well, spawn)

    core = CoreState(well=well, score=0)
    seen: set[Piece] = {start}
    queue: deque[Piece] = deque([start])
    outcomes: dict[CoreState, None] = {}

    while queue:
        piece = queue.popleft()
        state = WellState(core=core, piece=piece)
        for move in MOVES:
            next_state = get_next_state(board, state, move)
            if next_state.piece is None:
                outcomes.setdefault(next_state.core, None)
            elif next_state.piece not in seen:
                seen.add(next_state.piece)
                queue.append(next_state.piece)

    return list(outcomes)
