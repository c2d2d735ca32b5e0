"""
Episode Reward Processing
=========================

Turns one episode's per-step rewards into policy-gradient targets:

    G[t] = r[t] + gamma * G[t+1],   G[T] = 0
    returns = (G - mean(G)) / (std(G) + eps)

Standardization runs over the whole episode, after discounting.
"""

import warnings
from typing import Sequence

import numpy as np

from .errors import EmptyEpisodeError, NumericGuardTriggered, ShapeError
from .ops import EPSILON


def discount_rewards(rewards: Sequence[float], gamma: float) -> np.ndarray:
    """
    Discount and standardize one episode's rewards.

    Args:
        rewards: Per-step rewards, in order
        gamma: Discount factor in (0, 1]

    Returns:
        Standardized discounted returns, same length as rewards

    Raises:
        ShapeError: if rewards is not one-dimensional
        EmptyEpisodeError: if rewards is empty
    """
    rewards = np.asarray(rewards, dtype=np.float64)
    if rewards.ndim != 1:
        raise ShapeError(f"rewards must be a 1-D sequence, got shape {rewards.shape}")
    if rewards.shape[0] == 0:
        raise EmptyEpisodeError("cannot discount an episode with no rewards")

    returns = np.zeros_like(rewards)
    running = 0.0
    for t in reversed(range(rewards.shape[0])):
        running = rewards[t] + gamma * running
        returns[t] = running

    mean = returns.mean()
    std = returns.std()
    if std < 1e-12:
        warnings.warn(
            f"constant returns over {rewards.shape[0]} steps, standardized to ~0",
            NumericGuardTriggered,
            stacklevel=2,
        )
    return (returns - mean) / (std + EPSILON)
