"""
AI Module
=========

Hand-derived neural networks and the REINFORCE learner.

Classes:
    FeedForwardNetwork - Two-layer network with a softmax or linear head
    Agent              - Policy-gradient agent with a value baseline
    Trainer            - Training loop orchestration
"""

from .errors import ShapeError, EmptyEpisodeError, NumericGuardTriggered
from .network import FeedForwardNetwork, ForwardResult, PolicyNetwork, ValueNetwork
from .rewards import discount_rewards
from .agent import Agent, TrajectoryStep, sample_categorical
from .trainer import Trainer

__all__ = [
    'ShapeError', 'EmptyEpisodeError', 'NumericGuardTriggered',
    'FeedForwardNetwork', 'ForwardResult', 'PolicyNetwork', 'ValueNetwork',
    'discount_rewards',
    'Agent', 'TrajectoryStep', 'sample_categorical',
    'Trainer',
]
