"""
LineWalk
========

A tiny headless corridor used for smoke training and tests.

The agent stands on a 1-D track of `length` cells and must walk to the goal
in the rightmost cell. Each step costs a small penalty, reaching the goal
pays a bonus and ends the episode, and the episode is truncated after
`max_steps` steps.

State representation (length features):
    one-hot encoding of the agent's cell

Actions:
    0 = LEFT
    1 = RIGHT
"""

from typing import Optional, Tuple

import numpy as np

from .base_game import BaseGame

from config import Config


class LineWalk(BaseGame):
    """
    One-dimensional corridor with a goal at the right end.

    Example:
        >>> game = LineWalk(length=5)
        >>> state = game.reset()
        >>> state, reward, terminated, truncated = game.step(LineWalk.RIGHT)
    """

    LEFT = 0
    RIGHT = 1

    REWARD_GOAL = 1.0
    REWARD_STEP = -0.01

    def __init__(
        self,
        config: Optional[Config] = None,
        length: Optional[int] = None,
        max_steps: int = 50,
        random_start: bool = True
    ):
        """
        Initialize the corridor.

        Args:
            config: Configuration object (uses default if None)
            length: Number of cells (defaults to config.LINE_WALK_LENGTH)
            max_steps: Steps before the episode is truncated
            random_start: Start on a random non-goal cell instead of cell 0
        """
        self.config = config or Config()
        self.length = length if length is not None else self.config.LINE_WALK_LENGTH
        if self.length < 2:
            raise ValueError(f"LineWalk needs at least 2 cells, got {self.length}")
        self.max_steps = max_steps
        self.random_start = random_start

        self._rng = np.random.default_rng(self.config.SEED)
        self.position = 0
        self.steps = 0

    @property
    def state_size(self) -> int:
        return self.length

    @property
    def action_size(self) -> int:
        return 2

    @property
    def goal(self) -> int:
        return self.length - 1

    def seed(self, seed: int) -> None:
        self._rng = np.random.default_rng(seed)

    def reset(self) -> np.ndarray:
        if self.random_start:
            self.position = int(self._rng.integers(0, self.goal))
        else:
            self.position = 0
        self.steps = 0
        return self.get_state()

    def get_state(self) -> np.ndarray:
        state = np.zeros(self.length)
        state[self.position] = 1.0
        return state

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool]:
        if action not in (self.LEFT, self.RIGHT):
            raise ValueError(f"Invalid action {action} (expected 0 or 1)")

        delta = 1 if action == self.RIGHT else -1
        self.position = min(max(self.position + delta, 0), self.goal)
        self.steps += 1

        terminated = self.position == self.goal
        truncated = not terminated and self.steps >= self.max_steps
        reward = self.REWARD_GOAL if terminated else self.REWARD_STEP
        return self.get_state(), reward, terminated, truncated
