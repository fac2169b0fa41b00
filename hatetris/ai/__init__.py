"""AI components: reachability search, badness functions, and piece selectors."""

from hatetris.ai.search import reachable_locks
from hatetris.ai.fitness import Fitness, FitnessWeights, StackHeightFitness, WeightedFitness
from hatetris.ai.selectors import (
    AdversarialSelector,
    BenignSelector,
    FixedPieceSelector,
    PieceSelector,
    ScriptedSelector,
)

__all__ = [
    "reachable_locks",
    "Fitness",
    "FitnessWeights",
    "StackHeightFitness",
    "WeightedFitness",
    "AdversarialSelector",
    "BenignSelector",
    "FixedPieceSelector",
    "PieceSelector",
    "ScriptedSelector",
]
