"""
Tests for the LineWalk corridor.
"""

import pytest
import numpy as np

from reinforce_nn.game.base_game import BaseGame
from reinforce_nn.game.line_walk import LineWalk


@pytest.fixture
def game(small_config):
    return LineWalk(small_config, length=5, max_steps=10, random_start=False)


class TestLineWalk:
    """Test corridor dynamics."""

    def test_is_base_game(self, game):
        assert isinstance(game, BaseGame)
        assert game.state_size == 5
        assert game.action_size == 2

    def test_reset_state_is_one_hot(self, game):
        state = game.reset()
        assert np.array_equal(state, [1, 0, 0, 0, 0])

    def test_walk_to_goal(self, game):
        game.reset()
        for _ in range(3):
            _, reward, terminated, truncated = game.step(LineWalk.RIGHT)
            assert reward == LineWalk.REWARD_STEP
            assert not terminated and not truncated
        state, reward, terminated, _ = game.step(LineWalk.RIGHT)
        assert terminated
        assert reward == LineWalk.REWARD_GOAL
        assert state[-1] == 1.0

    def test_left_wall(self, game):
        game.reset()
        state, _, _, _ = game.step(LineWalk.LEFT)
        assert game.position == 0
        assert state[0] == 1.0

    def test_truncation(self, game):
        game.reset()
        truncated = False
        for _ in range(10):
            _, _, terminated, truncated = game.step(LineWalk.LEFT)
            assert not terminated
        assert truncated

    def test_invalid_action(self, game):
        game.reset()
        with pytest.raises(ValueError):
            game.step(2)

    def test_too_short(self, small_config):
        with pytest.raises(ValueError):
            LineWalk(small_config, length=1)

    def test_random_start_never_on_goal(self, small_config):
        game = LineWalk(small_config, length=4)
        for _ in range(50):
            game.reset()
            assert game.position != game.goal

    def test_seed_reproducible(self, small_config):
        a = LineWalk(small_config)
        b = LineWalk(small_config)
        a.seed(5)
        b.seed(5)
        assert [a.reset().argmax() for _ in range(10)] == [b.reset().argmax() for _ in range(10)]
