"""
Configuration file for the REINFORCE Neural Network Agent
=========================================================

All hyperparameters, network sizes, and training options are centralized here.
Modify these values to experiment with different training configurations.

Usage:
    from config import Config
    cfg = Config()
    print(cfg.LEARNING_RATE)
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """
    Central configuration for the entire project.

    Sections:
    1. Environment - Which game to train on
    2. Neural Network - Layer sizes and initialization
    3. Training - Policy-gradient hyperparameters
    4. Exploration - Random-action settings
    5. Training Control - Episode limits, logging, checkpoints
    6. System - Paths and seeding
    """

    # =========================================================================
    # ENVIRONMENT
    # =========================================================================

    # Registered game to train on (see reinforce_nn.game.list_games())
    GAME_NAME: str = 'line_walk'

    # LineWalk track length (number of cells, goal is the rightmost one)
    LINE_WALK_LENGTH: int = 6

    # =========================================================================
    # NEURAL NETWORK ARCHITECTURE
    # =========================================================================

    # Hidden layer width for each network (input -> hidden -> output)
    POLICY_HIDDEN_SIZE: int = 200
    VALUE_HIDDEN_SIZE: int = 200

    # Negative-side slope of the hidden leaky ReLU
    LEAKY_RELU_SLOPE: float = 0.01

    # Weights start as Uniform(-scale, scale)
    WEIGHT_INIT_SCALE: float = 0.5

    # =========================================================================
    # TRAINING HYPERPARAMETERS
    # =========================================================================

    # Policy learning rate, divided by episode length at every update
    LEARNING_RATE: float = 0.01

    # Value (baseline) learning rate, also divided by episode length
    VALUE_LEARNING_RATE: float = 0.01

    # Discount factor (gamma)
    # 0.99 = far-sighted, considers distant future
    GAMMA: float = 0.99

    # Policy target at the taken action:
    #   True  -> advantage (return - value baseline)
    #   False -> raw standardized return
    USE_BASELINE: bool = True

    # Apply value gradients after the whole episode instead of step by step
    DEFER_VALUE_UPDATE: bool = True

    # How many times deferred value gradients are applied per episode
    VALUE_PASSES: int = 4

    # =========================================================================
    # EXPLORATION SETTINGS
    # =========================================================================

    # Probability of taking a uniformly random action instead of sampling
    # from the policy (0.0 = pure policy sampling)
    EXPLORATION_START: float = 0.0

    # Floor for the exploration rate
    EXPLORATION_END: float = 0.0

    # Multiplicative decay per episode
    EXPLORATION_DECAY: float = 0.995

    # Episodes before decay kicks in
    EXPLORATION_WARMUP: int = 0

    # =========================================================================
    # TRAINING CONTROL
    # =========================================================================

    # Total episodes to train
    MAX_EPISODES: int = 10000

    # Maximum steps per episode (prevents infinite games)
    MAX_STEPS_PER_EPISODE: int = 10000

    # Print stats every N episodes
    LOG_EVERY: int = 10

    # Save model every N episodes
    SAVE_EVERY: int = 100

    # Write checkpoints at all (disabled in tests and --no-save runs)
    SAVE_MODELS: bool = True

    # =========================================================================
    # SYSTEM SETTINGS
    # =========================================================================

    # Paths
    MODEL_DIR: str = 'models'
    LOG_DIR: str = 'logs'

    # Console verbosity: DEBUG, INFO, WARNING, ERROR
    LOG_LEVEL: str = 'INFO'

    @property
    def GAME_MODEL_DIR(self) -> str:
        """Get game-specific model directory (e.g., 'models/line_walk/')."""
        import os
        return os.path.join(self.MODEL_DIR, self.GAME_NAME)

    # Random seed for reproducibility (None for random)
    SEED: Optional[int] = None

    def __post_init__(self):
        """Validation."""
        assert self.POLICY_HIDDEN_SIZE > 0, "Policy hidden size must be positive"
        assert self.VALUE_HIDDEN_SIZE > 0, "Value hidden size must be positive"
        assert self.WEIGHT_INIT_SCALE > 0, "Weight init scale must be positive"
        assert self.LEARNING_RATE > 0, "Learning rate must be positive"
        assert self.VALUE_LEARNING_RATE > 0, "Value learning rate must be positive"
        assert 0 < self.GAMMA <= 1, "Gamma must be in (0, 1]"
        assert self.VALUE_PASSES >= 1, "Value passes must be at least 1"
        assert 0 <= self.EXPLORATION_END <= 1, "Exploration end must be in [0, 1]"
        assert 0 <= self.EXPLORATION_START <= 1, "Exploration start must be in [0, 1]"
        assert self.EXPLORATION_START >= self.EXPLORATION_END, "Exploration start must be >= end"
        assert self.MAX_EPISODES > 0, "Max episodes must be positive"
        assert self.MAX_STEPS_PER_EPISODE > 0, "Max steps per episode must be positive"
        assert self.LOG_LEVEL in ('DEBUG', 'INFO', 'WARNING', 'ERROR'), \
            f"Unknown log level: {self.LOG_LEVEL}"


# Global config instance for easy importing
config = Config()


if __name__ == "__main__":
    # Print configuration summary
    cfg = Config()
    print("=" * 60)
    print("REINFORCE Agent - Configuration Summary")
    print("=" * 60)
    print(f"\nGame: {cfg.GAME_NAME}")
    print(f"\nNetworks:")
    print(f"   Policy hidden: {cfg.POLICY_HIDDEN_SIZE}")
    print(f"   Value hidden:  {cfg.VALUE_HIDDEN_SIZE}")
    print(f"\nTraining:")
    print(f"   Learning rate: {cfg.LEARNING_RATE} (value: {cfg.VALUE_LEARNING_RATE})")
    print(f"   Gamma: {cfg.GAMMA}")
    print(f"   Baseline: {cfg.USE_BASELINE}")
    print(f"\nExploration:")
    print(f"   Rate: {cfg.EXPLORATION_START} -> {cfg.EXPLORATION_END}")
    print(f"   Decay: {cfg.EXPLORATION_DECAY}")
    print("=" * 60)
