"""
REINFORCE Agent
===============

The AI agent that learns to play games with a policy gradient and a learned
value baseline.

Key Components:
    1. Policy Network  - State -> action distribution (softmax head)
    2. Value Network   - State -> scalar return estimate (linear head)
    3. Trajectory      - Forward results and actions of the current episode
    4. Exploration     - Optional uniformly random actions

Training Algorithm (REINFORCE with baseline), once per episode:
    1. Discount the episode's rewards and standardize them -> returns G
    2. For each step t:
        a. V(s_t) from the value network; regress it towards G_t (MSE)
        b. target = one-hot at a_t, holding G_t - V(s_t)
        c. policy gradient = cross-entropy gradient against target
        d. SGD on the policy with lr / T
    3. Apply the collected value gradients VALUE_PASSES times with lr / T

References:
    Williams, 1992 - "Simple statistical gradient-following algorithms for
    connectionist reinforcement learning"
"""

import json
import os
import time
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .errors import EmptyEpisodeError, ShapeError
from .network import ForwardResult, PolicyNetwork, ValueNetwork, WeightPair
from .ops import cross_entropy, cross_entropy_grad, mse, mse_grad
from .rewards import discount_rewards
from ..utils.logger import get_logger, log_model_event

from config import Config


logger = get_logger(__name__)


def sample_categorical(probs, rng: np.random.Generator) -> int:
    """
    Inverse-CDF sample from a categorical distribution.

    Draws r ~ U(0, 1) and returns the first index whose cumulative
    probability is >= r. Falls back to the last index when rounding leaves
    the cumulative sum just below r.

    Args:
        probs: Probabilities over actions
        rng: Random source (never the global numpy state)

    Returns:
        Sampled action index
    """
    r = rng.random()
    cumulative = 0.0
    for i, p in enumerate(probs):
        cumulative += p
        if r <= cumulative:
            return i
    return len(probs) - 1


@dataclass(frozen=True)
class TrajectoryStep:
    """One rollout step: the policy forward pass and the action taken."""
    forward: ForwardResult
    action: int

    @property
    def state(self) -> np.ndarray:
        return self.forward.x

    @property
    def probs(self) -> np.ndarray:
        return self.forward.output


@dataclass
class SaveMetadata:
    """Metadata stored with each model checkpoint."""
    # Timing
    timestamp: str
    save_reason: str  # 'best', 'periodic', 'manual', 'final'
    total_training_time_seconds: float

    # Training progress
    episode: int
    update_count: int
    exploration_rate: float

    # Performance metrics
    best_reward: float
    avg_reward_last_100: float
    avg_policy_loss: float
    avg_value_loss: float

    # Config snapshot
    state_size: int
    action_size: int
    policy_hidden_size: int
    value_hidden_size: int
    learning_rate: float
    value_learning_rate: float
    gamma: float
    use_baseline: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SaveMetadata':
        return cls(**data)


class Agent:
    """
    REINFORCE agent with a value-function baseline.

    Action Selection:
        - With probability exploration_rate: uniformly random action
        - Otherwise: sample from the policy's action distribution

    Attributes:
        policy_net: Softmax-headed network used for action selection
        value_net: Linear-headed network estimating the return
        exploration_rate: Current random-action probability
        rng: Random source for sampling and exploration

    Example:
        >>> agent = Agent(state_size=5, action_size=2)
        >>> action, result = agent.get_action(state)
        >>> trajectory.append(TrajectoryStep(result, action))
        >>> agent.update(rewards, trajectory)
    """

    def __init__(
        self,
        state_size: int,
        action_size: int,
        config: Optional[Config] = None,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize the agent.

        Args:
            state_size: Dimension of state vector
            action_size: Number of possible actions
            config: Configuration object
            rng: Random source; seeded from config.SEED when omitted
        """
        self.config = config or Config()
        self.state_size = state_size
        self.action_size = action_size
        self.rng = rng if rng is not None else np.random.default_rng(self.config.SEED)

        net_kwargs = dict(
            rng=self.rng,
            slope=self.config.LEAKY_RELU_SLOPE,
            init_scale=self.config.WEIGHT_INIT_SCALE,
        )
        self.policy_net = PolicyNetwork(
            state_size, self.config.POLICY_HIDDEN_SIZE, action_size, **net_kwargs
        )
        self.value_net = ValueNetwork(
            state_size, self.config.VALUE_HIDDEN_SIZE, 1, **net_kwargs
        )

        # Exploration
        self.exploration_rate = self.config.EXPLORATION_START

        # Episode updates performed
        self.update_count = 0

        # Per-episode losses (bounded)
        self.policy_losses: deque[float] = deque(maxlen=10000)
        self.value_losses: deque[float] = deque(maxlen=10000)

        # Track whether last action was exploration (for accurate metrics)
        self._last_action_explored: bool = False

    def _check_state(self, state) -> np.ndarray:
        state = np.asarray(state, dtype=np.float64).reshape(-1)
        if state.shape[0] != self.state_size:
            raise ShapeError(
                f"state has {state.shape[0]} features, networks expect {self.state_size}"
            )
        return state

    def get_action(self, state) -> Tuple[int, ForwardResult]:
        """
        Choose an action for the current state.

        Args:
            state: Observation convertible to a vector of length state_size

        Returns:
            (action, forward_result) - keep the forward result for update()

        Note:
            After calling this method, check `agent._last_action_explored` to
            determine if the action was a random exploration action.
        """
        result = self.policy_net.forward(self._check_state(state))

        if self.exploration_rate > 0 and self.rng.random() < self.exploration_rate:
            self._last_action_explored = True
            return int(self.rng.integers(self.action_size)), result

        self._last_action_explored = False
        return sample_categorical(result.output, self.rng), result

    def get_greedy_action(self, state) -> int:
        """Most probable action under the current policy (evaluation)."""
        result = self.policy_net.forward(self._check_state(state))
        return int(np.argmax(result.output))

    def get_action_probs(self, state) -> np.ndarray:
        """Get the policy's action distribution for a state."""
        return self.policy_net.forward(self._check_state(state)).output

    def get_value(self, state) -> float:
        """Get the value network's return estimate for a state."""
        return float(self.value_net.forward(self._check_state(state)).output[0])

    def update(
        self,
        rewards: Sequence[float],
        trajectory: Sequence[TrajectoryStep]
    ) -> Dict[str, float]:
        """
        Update both networks from one finished episode.

        Args:
            rewards: Per-step rewards, aligned with trajectory
            trajectory: Steps recorded by get_action() during the episode

        Returns:
            Dict with 'policy_loss', 'value_loss' (episode means) and 'steps'

        Raises:
            EmptyEpisodeError: if the episode has no steps
            ShapeError: if rewards and trajectory lengths differ
        """
        if len(trajectory) == 0:
            raise EmptyEpisodeError("update called with an empty trajectory")
        if len(rewards) != len(trajectory):
            raise ShapeError(
                f"{len(rewards)} rewards for {len(trajectory)} trajectory steps"
            )

        returns = discount_rewards(rewards, self.config.GAMMA)
        episode_length = len(trajectory)
        policy_lr = self.config.LEARNING_RATE / episode_length
        value_lr = self.config.VALUE_LEARNING_RATE / episode_length

        deferred: List[WeightPair] = []
        policy_loss_total = 0.0
        value_loss_total = 0.0

        for t, step in enumerate(trajectory):
            target_return = returns[t]

            # Value regression towards the standardized return
            value_result = self.value_net.forward(step.state)
            baseline = value_result.output[0]
            value_loss_total += mse([target_return], value_result.output)
            value_grad = mse_grad([target_return], value_result.output)
            value_dW1, value_dW2 = self.value_net.grad(value_result, value_grad)
            if self.config.DEFER_VALUE_UPDATE:
                deferred.append((value_dW1, value_dW2))
            else:
                self.value_net.backward(value_dW1, value_dW2, value_lr)

            # Sparse target: weight only the action that was taken
            weight = target_return - baseline if self.config.USE_BASELINE else target_return
            target = np.zeros(self.action_size)
            target[step.action] = weight

            policy_loss = cross_entropy(step.probs, target)
            policy_loss_total += policy_loss
            logger.debug(
                "step=%d action=%d return=%.4f baseline=%.4f policy_loss=%.6f",
                t, step.action, target_return, baseline, policy_loss
            )
            grad_probs = cross_entropy_grad(step.probs, target)
            dW1, dW2 = self.policy_net.grad(step.forward, grad_probs)
            self.policy_net.backward(dW1, dW2, policy_lr)

        for _ in range(self.config.VALUE_PASSES if deferred else 0):
            for value_dW1, value_dW2 in deferred:
                self.value_net.backward(value_dW1, value_dW2, value_lr)

        self.update_count += 1
        stats = {
            'policy_loss': policy_loss_total / episode_length,
            'value_loss': value_loss_total / episode_length,
            'steps': float(episode_length),
        }
        self.policy_losses.append(stats['policy_loss'])
        self.value_losses.append(stats['value_loss'])
        return stats

    def decay_exploration(self, episode: Optional[int] = None) -> None:
        """Decay exploration rate.

        Args:
            episode: Current episode number. The rate only decays after
                     EXPLORATION_WARMUP episodes. If None, bypasses the
                     warmup check.
        """
        if episode is not None and episode < self.config.EXPLORATION_WARMUP:
            return

        self.exploration_rate = max(
            self.config.EXPLORATION_END,
            self.exploration_rate * self.config.EXPLORATION_DECAY
        )

    def export_weights(self) -> Dict[str, WeightPair]:
        """Copies of both networks' (W1, W2) pairs."""
        return {
            'policy': self.policy_net.export_weights(),
            'value': self.value_net.export_weights(),
        }

    def import_weights(self, weights: Dict[str, WeightPair]) -> None:
        """Load (W1, W2) pairs for both networks; ShapeError on mismatch."""
        self.policy_net.import_weights(weights['policy'])
        self.value_net.import_weights(weights['value'])

    def save(
        self,
        filepath: str,
        save_reason: str = "manual",
        episode: int = 0,
        best_reward: float = 0.0,
        avg_reward_last_100: float = 0.0,
        training_start_time: Optional[float] = None
    ) -> SaveMetadata:
        """
        Save both networks' weights to an .npz checkpoint with metadata.

        Args:
            filepath: Path to save file
            save_reason: Why this save is happening ('best', 'periodic', 'manual', 'final')
            episode: Current episode number
            best_reward: Best episode reward so far
            avg_reward_last_100: Average reward over the last 100 episodes
            training_start_time: Unix timestamp when training started

        Returns:
            SaveMetadata written with the checkpoint
        """
        dir_path = os.path.dirname(filepath)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)

        total_time = 0.0
        if training_start_time:
            total_time = time.time() - training_start_time

        metadata = SaveMetadata(
            timestamp=datetime.now().isoformat(),
            save_reason=save_reason,
            total_training_time_seconds=total_time,
            episode=episode,
            update_count=self.update_count,
            exploration_rate=self.exploration_rate,
            best_reward=float(best_reward),
            avg_reward_last_100=float(avg_reward_last_100),
            avg_policy_loss=self.get_average_loss('policy', 100),
            avg_value_loss=self.get_average_loss('value', 100),
            state_size=self.state_size,
            action_size=self.action_size,
            policy_hidden_size=self.policy_net.hidden_size,
            value_hidden_size=self.value_net.hidden_size,
            learning_rate=self.config.LEARNING_RATE,
            value_learning_rate=self.config.VALUE_LEARNING_RATE,
            gamma=self.config.GAMMA,
            use_baseline=self.config.USE_BASELINE
        )

        policy_W1, policy_W2 = self.policy_net.export_weights()
        value_W1, value_W2 = self.value_net.export_weights()

        # np.savez appends .npz when missing; write to the exact path instead
        with open(filepath, 'wb') as f:
            np.savez(
                f,
                policy_W1=policy_W1,
                policy_W2=policy_W2,
                value_W1=value_W1,
                value_W2=value_W2,
                metadata=np.array(json.dumps(metadata.to_dict()))
            )

        log_model_event('save', filepath, reason=save_reason, episode=episode)
        return metadata

    def load(self, filepath: str) -> Optional[SaveMetadata]:
        """
        Load both networks' weights from a checkpoint.

        Args:
            filepath: Path to checkpoint file

        Returns:
            SaveMetadata, or None if the file does not exist

        Raises:
            ShapeError: if the checkpoint was saved for other network sizes
        """
        if not os.path.exists(filepath):
            logger.error(f"Model file not found: {filepath}")
            return None

        with np.load(filepath, allow_pickle=False) as data:
            weights = {
                'policy': (data['policy_W1'], data['policy_W2']),
                'value': (data['value_W1'], data['value_W2']),
            }
            metadata = SaveMetadata.from_dict(json.loads(str(data['metadata'])))

        self.import_weights(weights)
        self.exploration_rate = metadata.exploration_rate
        self.update_count = metadata.update_count

        log_model_event('load', filepath, episode=metadata.episode,
                        updates=metadata.update_count)
        return metadata

    def get_average_loss(self, which: str = 'policy', n: int = 100) -> float:
        """Get average of the last n episode losses for 'policy' or 'value'."""
        losses = self.policy_losses if which == 'policy' else self.value_losses
        if not losses:
            return 0.0
        recent = list(losses)[-n:]
        return float(sum(recent) / len(recent))
