"""
Environment interface.

The trainer drives an environment with exactly two calls per episode loop:

    state = game.reset()
    state, reward, terminated, truncated = game.step(action)

Observations must convert to a float vector of length state_size; the
networks never look at what the features mean. `terminated` marks a real
end of the episode, `truncated` a cut-off such as a step limit.

New environments subclass BaseGame and are added to GAME_REGISTRY in
reinforce_nn/game/__init__.py.
"""

from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np


class BaseGame(ABC):
    """Headless environment consumed by Trainer."""

    @property
    @abstractmethod
    def state_size(self) -> int:
        """Length of every observation vector."""

    @property
    @abstractmethod
    def action_size(self) -> int:
        """Number of discrete actions, indexed 0..action_size-1."""

    @abstractmethod
    def reset(self) -> np.ndarray:
        """Start a new episode and return its first observation."""

    @abstractmethod
    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool]:
        """
        Apply one action.

        Returns:
            (observation, reward, terminated, truncated)
        """

    def close(self) -> None:
        """Release resources held by the environment."""

    def seed(self, seed: int) -> None:
        """Reseed the environment's random source, if it has one."""
