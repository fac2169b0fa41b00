"""
Game configuration: YAML loading, validation and object wiring.

Every key is optional; missing keys fall back to the classic HATETRIS setup
(10 x 20 well, bar at row 4, adversarial selector ranking by stack height).
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field, fields
from typing import Any

import yaml

from hatetris.ai.fitness import Fitness, FitnessWeights, StackHeightFitness, WeightedFitness
from hatetris.ai.selectors import (
    AdversarialSelector,
    BenignSelector,
    FixedPieceSelector,
    PieceSelector,
)
from hatetris.errors import ConfigError
from hatetris.game.board import Board
from hatetris.game.pieces import HATETRIS_ROTATION_SYSTEM
from hatetris.timeline import Scheduler, Timeline

SELECTORS = ("hatetris", "benign", "lovetris")
FITNESSES = ("height", "weighted")


@dataclass
class GameConfig:
    """Validated game settings.

    Attributes:
        well_width: Number of columns.
        well_depth: Number of rows.
        bar: Row at which completed lines start to count.
        replay_timeout: Seconds between replay playback steps.
        selector: Which piece selector to use (see SELECTORS).
        fitness: Which badness function the searching selectors use.
        fitness_weights: Overrides for FitnessWeights when fitness is "weighted".
        legacy_replays: Decode hex replays the way the published HATETRIS
            replays were recorded (nibble 0 is a single L).
        cell_size: Pixel size of a well cell in the pygame window.
        fps: Frame rate of the pygame window.
    """
    well_width: int = 10
    well_depth: int = 20
    bar: int = 4
    replay_timeout: float = 0.05
    selector: str = "hatetris"
    fitness: str = "height"
    fitness_weights: dict[str, float] = field(default_factory=dict)
    legacy_replays: bool = False
    cell_size: int = 30
    fps: int = 60

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> GameConfig:
        """Build a config from a plain mapping, e.g. parsed YAML.

        Raises:
            ConfigError: On unknown keys, wrong value types, or unknown
                selector/fitness names.
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        for name in ("well_width", "well_depth", "bar", "cell_size", "fps"):
            if name in data and (not isinstance(data[name], int) or isinstance(data[name], bool)):
                raise ConfigError(f"{name} must be an integer, got {data[name]!r}")
        if "replay_timeout" in data:
            timeout = data["replay_timeout"]
            if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout < 0:
                raise ConfigError(f"replay_timeout must be a non-negative number, got {timeout!r}")
            data["replay_timeout"] = float(timeout)
        if "legacy_replays" in data and not isinstance(data["legacy_replays"], bool):
            raise ConfigError(f"legacy_replays must be true or false, got {data['legacy_replays']!r}")

        config = cls(**data)
        if config.cell_size < 1 or config.fps < 1:
            raise ConfigError("cell_size and fps must be positive")
        if config.selector not in SELECTORS:
            raise ConfigError(f"Unknown selector {config.selector!r}, expected one of {SELECTORS}")
        if config.fitness not in FITNESSES:
            raise ConfigError(f"Unknown fitness {config.fitness!r}, expected one of {FITNESSES}")
        if not isinstance(config.fitness_weights, dict):
            raise ConfigError("fitness_weights must be a mapping")
        return config

    def build_board(self) -> Board:
        """Create the HATETRIS board; raises ConfigError for bad geometry."""
        return Board(
            HATETRIS_ROTATION_SYSTEM,
            width=self.well_width,
            depth=self.well_depth,
            bar=self.bar,
        )

    def build_fitness(self) -> Fitness:
        if self.fitness == "weighted":
            try:
                weights = FitnessWeights(**self.fitness_weights)
            except TypeError as e:
                raise ConfigError(f"Bad fitness_weights: {e}") from e
            return WeightedFitness(width=self.well_width, weights=weights)
        return StackHeightFitness()

    def build_selector(self, board: Board) -> PieceSelector:
        if self.selector == "lovetris":
            return FixedPieceSelector(board.rotation_system.piece_id("I"))
        if self.selector == "benign":
            return BenignSelector(board, self.build_fitness())
        return AdversarialSelector(board, self.build_fitness())


def load_config(config_path: str | pathlib.Path) -> GameConfig:
    """Load a GameConfig from a YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        The validated GameConfig.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigError: If the file's contents are invalid.
    """
    config_path = pathlib.Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, "r") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return GameConfig.from_dict(data)


def build_timeline(config: GameConfig, scheduler: Scheduler | None = None) -> Timeline:
    """Wire a Timeline from a config: board, selector and playback timing."""
    board = config.build_board()
    return Timeline(
        board,
        config.build_selector(board),
        replay_timeout=config.replay_timeout,
        scheduler=scheduler,
        legacy_replays=config.legacy_replays,
    )
