"""
Badness functions used to rank lock outcomes.

A fitness function maps a CoreState to a number; higher means worse for the
player. The selectors only compare these numbers, so any deterministic
function will do. Two are provided:

  - StackHeightFitness: how tall the stack is. Clearing lines lowers the
    stack, so it rewards them without scoring them directly.
  - WeightedFitness: a weighted sum of board metrics (aggregate height,
    holes, bumpiness) minus a bonus for lines cleared.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from hatetris.game.board import (
    get_aggregate_height,
    get_bumpiness,
    get_holes,
    get_stack_height,
    well_to_grid,
)
from hatetris.game.tetris import CoreState


class Fitness(ABC):
    """Interface for badness functions."""

    @abstractmethod
    def __call__(self, core: CoreState) -> float:
        """Return how bad ``core`` is for the player."""

    def get_name(self) -> str:
        return self.__class__.__name__


class StackHeightFitness(Fitness):
    """Badness = number of rows between the top of the stack and the floor."""

    def __call__(self, core: CoreState) -> float:
        return get_stack_height(core.well)


@dataclass
class FitnessWeights:
    """
    Weights for WeightedFitness.

    Higher values = the metric hurts the player more.
    """
    height: float = 0.51
    holes: float = 0.36
    bumpiness: float = 0.18
    lines: float = 0.76


@dataclass
class WeightedFitness(Fitness):
    """Weighted sum of well metrics, computed on the numpy grid of the well."""

    width: int
    weights: FitnessWeights = field(default_factory=FitnessWeights)

    def __call__(self, core: CoreState) -> float:
        grid = well_to_grid(core.well, self.width)
        return (
            self.weights.height * get_aggregate_height(grid)
            + self.weights.holes * get_holes(grid)
            + self.weights.bumpiness * get_bumpiness(grid)
            - self.weights.lines * core.score
        )
