"""
Tests for Config.

Invalid hyperparameters must fail in __post_init__, before any network is
built or episode is played.
"""

import os

import pytest

from config import Config


class TestConfigValidation:
    """Test Config.__post_init__ validation."""

    def test_defaults_are_valid(self):
        Config().__post_init__()

    @pytest.mark.parametrize("field, value", [
        ('LEARNING_RATE', 0),
        ('VALUE_LEARNING_RATE', -0.001),
        ('GAMMA', 0),
        ('GAMMA', 1.5),
        ('POLICY_HIDDEN_SIZE', 0),
        ('VALUE_HIDDEN_SIZE', -3),
        ('WEIGHT_INIT_SCALE', 0.0),
        ('VALUE_PASSES', 0),
        ('EXPLORATION_START', 1.5),
        ('MAX_STEPS_PER_EPISODE', 0),
        ('LOG_LEVEL', 'LOUD'),
    ])
    def test_rejects(self, field, value):
        cfg = Config()
        setattr(cfg, field, value)
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_gamma_one_allowed(self):
        """No discounting is a valid setting."""
        Config(GAMMA=1.0)

    def test_exploration_end_above_start(self):
        cfg = Config()
        cfg.EXPLORATION_START = 0.05
        cfg.EXPLORATION_END = 0.1
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_zero_episodes_rejected(self):
        with pytest.raises(AssertionError):
            Config(MAX_EPISODES=0)

    def test_constructor_validates(self):
        with pytest.raises(AssertionError):
            Config(MAX_STEPS_PER_EPISODE=0)


class TestConfigDefaults:
    """Test default hyperparameters."""

    def test_network_defaults(self):
        cfg = Config()
        assert (cfg.POLICY_HIDDEN_SIZE, cfg.VALUE_HIDDEN_SIZE) == (200, 200)
        assert cfg.LEAKY_RELU_SLOPE == 0.01
        assert cfg.WEIGHT_INIT_SCALE == 0.5

    def test_update_defaults(self):
        cfg = Config()
        assert cfg.LEARNING_RATE == 0.01
        assert cfg.GAMMA == 0.99
        assert cfg.USE_BASELINE is True
        assert cfg.DEFER_VALUE_UPDATE is True
        assert cfg.VALUE_PASSES == 4

    def test_exploration_off_by_default(self):
        cfg = Config()
        assert cfg.EXPLORATION_START == cfg.EXPLORATION_END == 0.0

    def test_unseeded_by_default(self):
        assert Config().SEED is None

    def test_game_model_dir(self):
        cfg = Config(MODEL_DIR='checkpoints', GAME_NAME='line_walk')
        assert cfg.GAME_MODEL_DIR == os.path.join('checkpoints', 'line_walk')
