"""
Pytest configuration for the test suite.

This file is automatically loaded by pytest and applies configuration
to all tests in the tests/ directory.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def small_config(tmp_path):
    """Config with small networks, short episodes and no checkpoints."""
    cfg = Config()
    cfg.POLICY_HIDDEN_SIZE = 16
    cfg.VALUE_HIDDEN_SIZE = 16
    cfg.MAX_STEPS_PER_EPISODE = 30
    cfg.SAVE_MODELS = False
    cfg.MODEL_DIR = str(tmp_path / 'models')
    cfg.LOG_DIR = str(tmp_path / 'logs')
    cfg.SEED = 0
    return cfg
