"""
Tests for configuration loading and wiring.

Tests:
- Defaults describe classic HATETRIS
- Bad keys, types and names raise ConfigError
- YAML files load, including the one shipped with the project
- Timelines are wired with the configured selector
"""

import pathlib

import pytest

from ..ai.fitness import StackHeightFitness, WeightedFitness
from ..ai.selectors import AdversarialSelector, BenignSelector, FixedPieceSelector
from ..config import GameConfig, build_timeline, load_config
from ..errors import ConfigError
from ..game.pieces import Piece
from ..timeline import Mode

SHIPPED_CONFIG = pathlib.Path(__file__).resolve().parents[2] / "config" / "hatetris.yaml"


class TestGameConfig:
    """Tests for GameConfig validation."""

    def test_defaults(self):
        """An empty mapping gives the classic game."""
        config = GameConfig.from_dict({})
        assert config == GameConfig()
        board = config.build_board()
        assert (board.width, board.depth, board.bar) == (10, 20, 4)
        assert isinstance(config.build_fitness(), StackHeightFitness)
        assert isinstance(config.build_selector(board), AdversarialSelector)

    def test_none_is_defaults(self):
        """An empty YAML document is allowed."""
        assert GameConfig.from_dict(None) == GameConfig()

    def test_unknown_key(self):
        """Typos are reported instead of ignored."""
        with pytest.raises(ConfigError, match="well_widht"):
            GameConfig.from_dict({"well_widht": 12})

    @pytest.mark.parametrize("value", ["10", 10.0, True, None])
    def test_geometry_must_be_int(self, value):
        """Well sizes must be plain integers."""
        with pytest.raises(ConfigError):
            GameConfig.from_dict({"well_width": value})

    @pytest.mark.parametrize("value", [-0.5, "fast", False])
    def test_bad_replay_timeout(self, value):
        """The playback delay must be a non-negative number."""
        with pytest.raises(ConfigError):
            GameConfig.from_dict({"replay_timeout": value})

    def test_integer_timeout_becomes_float(self):
        """Whole-second delays are accepted."""
        assert GameConfig.from_dict({"replay_timeout": 1}).replay_timeout == 1.0

    @pytest.mark.parametrize("key", ["cell_size", "fps"])
    def test_display_settings_positive(self, key):
        """The pygame window needs a real cell size and frame rate."""
        with pytest.raises(ConfigError, match="positive"):
            GameConfig.from_dict({key: 0})

    @pytest.mark.parametrize("value", ["yes", 1, None])
    def test_legacy_replays_must_be_bool(self, value):
        """Only a real boolean switches the legacy decoder."""
        with pytest.raises(ConfigError, match="legacy_replays"):
            GameConfig.from_dict({"legacy_replays": value})

    def test_unknown_selector(self):
        """Only the known selectors can be named."""
        with pytest.raises(ConfigError, match="selector"):
            GameConfig.from_dict({"selector": "random"})

    def test_unknown_fitness(self):
        """Only the known fitness functions can be named."""
        with pytest.raises(ConfigError, match="fitness"):
            GameConfig.from_dict({"fitness": "holes"})

    def test_weights_must_be_mapping(self):
        """fitness_weights is a mapping of metric to weight."""
        with pytest.raises(ConfigError):
            GameConfig.from_dict({"fitness_weights": [1, 2]})

    def test_unknown_weight(self):
        """A misspelt weight is reported when the fitness is built."""
        config = GameConfig.from_dict({"fitness": "weighted", "fitness_weights": {"speed": 1}})
        with pytest.raises(ConfigError):
            config.build_fitness()

    def test_weighted_fitness(self):
        """Weights override the defaults one by one."""
        config = GameConfig.from_dict({"fitness": "weighted", "fitness_weights": {"holes": 2.0}})
        fitness = config.build_fitness()
        assert isinstance(fitness, WeightedFitness)
        assert fitness.weights.holes == 2.0
        assert fitness.weights.height == 0.51

    def test_bad_geometry_fails_on_build(self):
        """Geometry limits are enforced by the board."""
        with pytest.raises(ConfigError):
            GameConfig(well_width=3).build_board()
        with pytest.raises(ConfigError):
            GameConfig(well_depth=3, bar=4).build_board()

    def test_selectors(self):
        """Each selector name builds the matching selector."""
        board = GameConfig().build_board()
        assert isinstance(GameConfig(selector="benign").build_selector(board), BenignSelector)
        lovetris = GameConfig(selector="lovetris").build_selector(board)
        assert isinstance(lovetris, FixedPieceSelector)
        assert lovetris.piece_id == 3


class TestLoadConfig:
    """Tests for reading YAML files."""

    def test_load(self, tmp_path):
        """Values in the file override the defaults."""
        path = tmp_path / "game.yaml"
        path.write_text("well_width: 8\nbar: 2\nselector: lovetris\n")

        config = load_config(path)

        assert config.well_width == 8
        assert config.bar == 2
        assert config.well_depth == 20
        assert config.selector == "lovetris"

    def test_empty_file(self, tmp_path):
        """An empty file means all defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == GameConfig()

    def test_missing_file(self, tmp_path):
        """A missing file is reported as such."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path):
        """A YAML list is not a config."""
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_shipped_config(self):
        """The config file in the repository matches the defaults."""
        config = load_config(SHIPPED_CONFIG)
        assert config.build_board().width == GameConfig().well_width
        assert config.selector == "hatetris"
        assert config.replay_timeout == 0.05
        assert config.legacy_replays is False


class TestBuildTimeline:
    """Tests for wiring a timeline from a config."""

    def test_lovetris_timeline(self):
        """The first piece follows the configured selector."""
        timeline = build_timeline(GameConfig(selector="lovetris", replay_timeout=0.2))

        assert timeline.mode is Mode.NOT_STARTED
        assert timeline.replay_timeout == 0.2
        assert timeline.first_well_state.piece == Piece(id=3, x=3, y=0, o=0)

    def test_narrow_well(self):
        """Spawn placement follows the configured width."""
        timeline = build_timeline(GameConfig(well_width=6, selector="lovetris"))
        assert timeline.first_well_state.piece.x == 1
        assert timeline.first_well_state.core.well == (0,) * 20

    def test_legacy_replays_reach_the_timeline(self, scheduler):
        """The legacy switch changes how load_replay reads nibble 0."""
        legacy = build_timeline(GameConfig(selector="lovetris", legacy_replays=True), scheduler)
        strict = build_timeline(GameConfig(selector="lovetris"), scheduler)
        assert legacy.legacy_replays is True

        legacy.load_replay("0")
        strict.load_replay("0")

        assert legacy.replay == ["L"]
        assert strict.replay == ["L", "L"]

    def test_first_piece_must_fit(self):
        """A well too shallow for the first piece is a config error."""
        with pytest.raises(ConfigError, match="does not fit"):
            build_timeline(GameConfig(well_depth=1, bar=1, selector="lovetris"))
