"""
Episode Loop
============

One training episode is:
    1. reset() the game and roll out the current policy until the episode
       terminates, is truncated, or hits MAX_STEPS_PER_EPISODE
    2. Agent.update() on the finished trajectory
    3. decay the exploration rate
    4. record EpisodeStats, log every LOG_EVERY episodes, checkpoint

Rollout and update never overlap: update() runs only after the episode has
ended, and the next reset() happens only after update() has returned.
"""

import os
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Tuple

import numpy as np

from .agent import Agent, TrajectoryStep
from .errors import EmptyEpisodeError, ShapeError
from ..game.base_game import BaseGame
from ..utils.logger import get_logger, log_training_metrics

from config import Config


logger = get_logger(__name__)


@dataclass
class EpisodeStats:
    """Outcome of one training episode."""
    episode: int
    steps: int
    total_reward: float
    exploration_rate: float
    policy_loss: float
    value_loss: float
    duration: float
    terminated: bool


class TrainingMetrics:
    """
    Rolling per-episode history, capped at history_length entries.

    Each field (rewards, steps, policy_losses, value_losses,
    exploration_rates, durations) is a deque indexed by episode.
    """

    def __init__(self, history_length: int = 1000):
        self.history_length = history_length
        self.rewards: Deque[float] = deque(maxlen=history_length)
        self.steps: Deque[int] = deque(maxlen=history_length)
        self.policy_losses: Deque[float] = deque(maxlen=history_length)
        self.value_losses: Deque[float] = deque(maxlen=history_length)
        self.exploration_rates: Deque[float] = deque(maxlen=history_length)
        self.durations: Deque[float] = deque(maxlen=history_length)

    def add(self, stats: EpisodeStats) -> None:
        self.rewards.append(stats.total_reward)
        self.steps.append(stats.steps)
        self.policy_losses.append(stats.policy_loss)
        self.value_losses.append(stats.value_loss)
        self.exploration_rates.append(stats.exploration_rate)
        self.durations.append(stats.duration)

    def get_recent_average(self, metric: str, n: int = 100) -> float:
        """Mean of the last n entries of a field; 0.0 before any episode."""
        history = list(getattr(self, metric))
        return float(np.mean(history[-n:])) if history else 0.0

    def get_best_reward(self) -> float:
        return max(self.rewards) if self.rewards else 0.0

    def __len__(self) -> int:
        return len(self.rewards)


class Trainer:
    """
    Runs the REINFORCE agent against one game.

    Example:
        >>> game = LineWalk(config)
        >>> agent = Agent(game.state_size, game.action_size, config)
        >>> metrics = Trainer(game, agent, config).train(num_episodes=500)
    """

    def __init__(
        self,
        game: BaseGame,
        agent: Agent,
        config: Optional[Config] = None
    ):
        self.game = game
        self.agent = agent
        self.config = config or Config()

        self.metrics = TrainingMetrics()
        self.current_episode = 0
        self.total_steps = 0

    def collect_episode(self) -> Tuple[List[float], List[TrajectoryStep], bool]:
        """
        Roll out the current policy for one episode without learning.

        Returns:
            (rewards, trajectory, terminated), rewards aligned with trajectory
        """
        observation = self.game.reset()
        rewards: List[float] = []
        trajectory: List[TrajectoryStep] = []
        terminated = truncated = False

        while not (terminated or truncated):
            if len(trajectory) >= self.config.MAX_STEPS_PER_EPISODE:
                break
            action, result = self.agent.get_action(observation)
            observation, reward, terminated, truncated = self.game.step(action)
            trajectory.append(TrajectoryStep(forward=result, action=action))
            rewards.append(float(reward))

        return rewards, trajectory, bool(terminated)

    def run_episode(self) -> EpisodeStats:
        """
        Collect one episode, update the agent from it and decay exploration.

        Raises:
            ShapeError: game observations do not fit the networks
            EmptyEpisodeError: the episode ended before its first step
        """
        started = time.time()

        try:
            rewards, trajectory, terminated = self.collect_episode()
            losses = self.agent.update(rewards, trajectory)
        except (ShapeError, EmptyEpisodeError) as e:
            logger.error(f"Episode {self.current_episode} aborted: {e}")
            raise

        self.total_steps += len(trajectory)
        self.agent.decay_exploration(self.current_episode)

        return EpisodeStats(
            episode=self.current_episode,
            steps=len(trajectory),
            total_reward=float(sum(rewards)),
            exploration_rate=self.agent.exploration_rate,
            policy_loss=losses['policy_loss'],
            value_loss=losses['value_loss'],
            duration=time.time() - started,
            terminated=terminated
        )

    def train(
        self,
        num_episodes: Optional[int] = None,
        progress_callback=None
    ) -> TrainingMetrics:
        """
        Train for num_episodes (default MAX_EPISODES).

        With SAVE_MODELS set, writes {GAME}_best.npz whenever an episode beats
        the best reward so far, {GAME}_ep{N}.npz every SAVE_EVERY episodes and
        {GAME}_final.npz at the end, all under GAME_MODEL_DIR.

        Args:
            num_episodes: Episodes to run
            progress_callback: Called as progress_callback(episode, num_episodes, stats)

        Raises:
            ValueError: num_episodes is not positive
        """
        if num_episodes is None:
            num_episodes = self.config.MAX_EPISODES
        if num_episodes < 1:
            raise ValueError(f"num_episodes must be positive, got {num_episodes}")
        save = self.config.SAVE_MODELS

        logger.info(
            f"Training {self.config.GAME_NAME} for {num_episodes} episodes "
            f"(state_size={self.game.state_size}, action_size={self.game.action_size}, "
            f"baseline={self.config.USE_BASELINE})"
        )

        started = time.time()
        best_reward = float('-inf')

        for episode in range(num_episodes):
            self.current_episode = episode
            stats = self.run_episode()
            self.metrics.add(stats)

            if episode % self.config.LOG_EVERY == 0:
                log_training_metrics(
                    episode=episode,
                    total_reward=stats.total_reward,
                    exploration_rate=stats.exploration_rate,
                    policy_loss=stats.policy_loss,
                    value_loss=stats.value_loss,
                    steps=stats.steps
                )

            improved = stats.total_reward > best_reward
            best_reward = max(best_reward, stats.total_reward)

            if save and improved:
                self._save('best', episode, best_reward, started)
            if save and episode > 0 and episode % self.config.SAVE_EVERY == 0:
                self._save('periodic', episode, best_reward, started,
                           filename=f'{self.config.GAME_NAME}_ep{episode}.npz')

            if progress_callback:
                progress_callback(episode, num_episodes, stats)

        if save:
            self._save('final', self.current_episode, best_reward, started)

        logger.info(
            f"Training finished: best_reward={self.metrics.get_best_reward():.2f}, "
            f"avg_reward(100)={self.metrics.get_recent_average('rewards'):.2f}, "
            f"steps={self.total_steps:,}, elapsed={time.time() - started:.1f}s"
        )
        return self.metrics

    def _save(
        self,
        reason: str,
        episode: int,
        best_reward: float,
        training_start: float,
        filename: Optional[str] = None
    ) -> None:
        path = os.path.join(
            self.config.GAME_MODEL_DIR,
            filename or f'{self.config.GAME_NAME}_{reason}.npz'
        )
        self.agent.save(
            path,
            save_reason=reason,
            episode=episode,
            best_reward=best_reward,
            avg_reward_last_100=self.metrics.get_recent_average('rewards', 100),
            training_start_time=training_start
        )

    def evaluate(self, num_episodes: int = 10) -> Dict[str, float]:
        """
        Play greedy (argmax) episodes without updating either network.

        Returns:
            mean_reward, max_reward, min_reward, mean_steps and success_rate
            (fraction of episodes that terminated rather than being cut off)

        Raises:
            ValueError: num_episodes is not positive
        """
        if num_episodes < 1:
            raise ValueError(f"num_episodes must be positive, got {num_episodes}")

        totals: List[float] = []
        lengths: List[int] = []
        successes = 0

        for _ in range(num_episodes):
            observation = self.game.reset()
            episode_reward = 0.0
            n = 0
            terminated = truncated = False

            while not (terminated or truncated) and n < self.config.MAX_STEPS_PER_EPISODE:
                action = self.agent.get_greedy_action(observation)
                observation, reward, terminated, truncated = self.game.step(action)
                episode_reward += reward
                n += 1

            totals.append(episode_reward)
            lengths.append(n)
            successes += int(terminated)

        return {
            'mean_reward': float(np.mean(totals)),
            'max_reward': float(np.max(totals)),
            'min_reward': float(np.min(totals)),
            'mean_steps': float(np.mean(lengths)),
            'success_rate': successes / num_episodes,
        }
