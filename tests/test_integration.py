"""
Integration tests for the REINFORCE project.

These tests verify end-to-end functionality:
    - Agent learns from game interactions
    - Save/load preserves training state
    - Command line entry point
"""

import os

import pytest
import numpy as np

from main import build_config, main, parse_args
from reinforce_nn.ai.agent import Agent
from reinforce_nn.ai.trainer import Trainer
from reinforce_nn.game import get_game, get_game_info, list_games
from reinforce_nn.game.line_walk import LineWalk
from reinforce_nn.utils.logger import setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    """main() attaches a console handler bound to the captured stdout."""
    yield
    setup_logging(console_output=False, force=True)


@pytest.fixture
def game(small_config):
    return LineWalk(small_config)


@pytest.fixture
def agent(game, small_config):
    return Agent(game.state_size, game.action_size, small_config)


class TestGameAgentIntegration:
    """Test agent and game working together."""

    def test_agent_can_process_game_state(self, game, agent):
        state = game.reset()
        action, _ = agent.get_action(state)
        assert action in (LineWalk.LEFT, LineWalk.RIGHT)

    def test_multiple_episodes_run(self, game, agent, small_config):
        trainer = Trainer(game, agent, small_config)
        for _ in range(5):
            stats = trainer.run_episode()
            assert 0 < stats.steps <= small_config.MAX_STEPS_PER_EPISODE

    def test_loaded_agent_plays_identically(self, game, agent, small_config, tmp_path):
        Trainer(game, agent, small_config).train(num_episodes=3)
        path = str(tmp_path / 'trained.npz')
        agent.save(path)

        clone = Agent(game.state_size, game.action_size, small_config,
                      rng=np.random.default_rng(7))
        clone.load(path)

        for cell in range(game.length):
            state = np.eye(game.length)[cell]
            assert np.array_equal(agent.get_action_probs(state),
                                  clone.get_action_probs(state))


class TestGameRegistry:
    """Test game lookup."""

    def test_line_walk_registered(self):
        assert 'line_walk' in list_games()
        assert get_game('LINE_WALK') is LineWalk

    def test_unknown_game(self):
        assert get_game('flappy') is None
        assert get_game_info('flappy') is None

    def test_game_info_has_no_class(self):
        info = get_game_info('line_walk')
        assert 'class' not in info
        assert info['actions'] == ['LEFT', 'RIGHT']


class TestCommandLine:
    """Test main.py."""

    def test_overrides_applied(self):
        args = parse_args(['--lr', '0.05', '--gamma', '0.9', '--no-baseline',
                           '--exploration', '0.2', '--seed', '3'])
        config = build_config(args)
        assert config.LEARNING_RATE == 0.05
        assert config.GAMMA == 0.9
        assert config.USE_BASELINE is False
        assert config.EXPLORATION_START == 0.2
        assert config.SEED == 3

    def test_invalid_override_rejected(self):
        with pytest.raises(AssertionError):
            build_config(parse_args(['--gamma', '1.5']))

    def test_eval_and_inspect_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(['--eval', '--inspect', 'model.npz'])

    def test_short_training_run(self):
        assert main(['--episodes', '3', '--no-save', '--seed', '0']) == 0

    def test_missing_model_fails(self, tmp_path):
        assert main(['--eval', '--model', str(tmp_path / 'missing.npz')]) == 1

    def test_train_then_eval_and_inspect(self, tmp_path, capsys):
        model_dir = str(tmp_path / 'models')
        assert main(['--episodes', '2', '--seed', '0', '--model-dir', model_dir]) == 0

        final = os.path.join(model_dir, 'line_walk', 'line_walk_final.npz')
        assert os.path.exists(final)

        assert main(['--eval', '--model', final, '--episodes', '2', '--seed', '0']) == 0
        assert 'success_rate' in capsys.readouterr().out

        assert main(['--inspect', final]) == 0
        assert 'save_reason: final' in capsys.readouterr().out

    def test_zero_episodes_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(['--episodes', '0'])

    def test_corrupt_model_fails(self, tmp_path):
        path = tmp_path / 'bad.npz'
        path.write_bytes(b'not a checkpoint')
        assert main(['--eval', '--model', str(path)]) == 1

    def test_model_without_metadata_fails(self, tmp_path):
        path = tmp_path / 'weights_only.npz'
        with open(path, 'wb') as f:
            np.savez(f, policy_W1=np.zeros((200, 6)))
        assert main(['--eval', '--model', str(path)]) == 1

    def test_model_for_other_sizes_fails(self, small_config, tmp_path):
        path = str(tmp_path / 'small.npz')
        small_config.POLICY_HIDDEN_SIZE = 8
        Agent(6, 2, small_config).save(path)
        assert main(['--eval', '--model', path, '--episodes', '1']) == 1

    def test_inspect_missing_file(self, tmp_path):
        assert main(['--inspect', str(tmp_path / 'missing.npz')]) == 1
