"""
Piece selectors: the "enemy AI" that decides which piece comes next.

A selector is injected into the Timeline and asked for a piece id every time
a piece locks. Replays only reproduce a game if the selector answers the
same way for the same well, so every selector here except ScriptedSelector
is a pure function of the well and its own static configuration.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence

from hatetris.ai.fitness import Fitness, StackHeightFitness
from hatetris.ai.search import reachable_locks
from hatetris.game.board import Board


class PieceSelector(ABC):
    """Interface for choosing the next piece."""

    @abstractmethod
    def select_piece(self, well: tuple[int, ...]) -> int:
        """Return the id of the piece to spawn into ``well``."""

    def get_name(self) -> str:
        """Get the selector's name/identifier."""
        return self.__class__.__name__


class _SearchingSelector(PieceSelector):
    """Shared machinery for selectors that look at every piece's best case."""

    def __init__(self, board: Board, fitness: Fitness | None = None) -> None:
        self.board = board
        self.fitness = fitness if fitness is not None else StackHeightFitness()

    def rate_pieces(self, well: tuple[int, ...]) -> list[float]:
        """Return each piece's best case, indexed by piece id.

        A piece's best case is the lowest badness among all the locks the
        player could reach with it. A piece that cannot even spawn has a
        best case of ``math.inf``.
        """
        ratings = []
        for piece_id in range(len(self.board.rotation_system)):
            outcomes = reachable_locks(self.board, well, piece_id)
            if outcomes:
                ratings.append(min(self.fitness(core) for core in outcomes))
            else:
                ratings.append(math.inf)
        return ratings


class AdversarialSelector(_SearchingSelector):
    """
    HATETRIS: hand out the piece whose best placement is worst.

    Ties go to the lowest piece id. A piece that cannot spawn rates as
    infinitely bad and is therefore always preferred.
    """

    def select_piece(self, well: tuple[int, ...]) -> int:
        ratings = self.rate_pieces(well)
        chosen = 0
        for piece_id, rating in enumerate(ratings):
            if rating > ratings[chosen]:
                chosen = piece_id
        return chosen


class BenignSelector(_SearchingSelector):
    """Hand out the piece whose best placement is best; ties go to the lowest id."""

    def select_piece(self, well: tuple[int, ...]) -> int:
        ratings = self.rate_pieces(well)
        chosen = 0
        for piece_id, rating in enumerate(ratings):
            if rating < ratings[chosen]:
                chosen = piece_id
        return chosen


class FixedPieceSelector(PieceSelector):
    """
    Always the same piece.

    With the I piece this is "lovetris".
    """

    def __init__(self, piece_id: int) -> None:
        self.piece_id = piece_id

    def select_piece(self, well: tuple[int, ...]) -> int:
        return self.piece_id


class ScriptedSelector(PieceSelector):
    """
    Cycle through a fixed list of piece ids.

    Stateful: the answer depends on how many times it has been asked, not on
    the well, so games built with it do not replay. Used for testing.
    """

    def __init__(self, piece_ids: Sequence[int]) -> None:
        if not piece_ids:
            raise ValueError("ScriptedSelector needs at least one piece id")
        self.piece_ids = list(piece_ids)
        self.calls = 0

    def select_piece(self, well: tuple[int, ...]) -> int:
        piece_id = self.piece_ids[self.calls % len(self.piece_ids)]
        self.calls += 1
        return piece_id
