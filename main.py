"""
REINFORCE Agent - Main Entry Point
==================================

Train a hand-written policy network with REINFORCE and a value baseline,
or evaluate a saved checkpoint.

Usage:
    python main.py                              Train on the default game
    python main.py --episodes 500 --seed 1      Short reproducible run
    python main.py --eval --model models/line_walk/line_walk_best.npz
    python main.py --inspect models/line_walk/line_walk_final.npz
"""

import argparse
import sys
import zipfile
from typing import List, Optional

from config import Config
from reinforce_nn.ai.agent import Agent
from reinforce_nn.ai.errors import EmptyEpisodeError, ShapeError
from reinforce_nn.ai.trainer import Trainer
from reinforce_nn.game import get_game, list_games
from reinforce_nn.utils.logger import get_logger, setup_logging


logger = get_logger(__name__)


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    available_games = list_games()

    parser = argparse.ArgumentParser(
        description="REINFORCE Agent - Train a hand-derived policy network to play games",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
EXAMPLES
========

Training:
    python main.py                         Train with default settings
    python main.py --episodes 2000 --lr 0.02
    python main.py --exploration 0.2       Start with 20% random actions

Evaluation:
    python main.py --eval --model models/line_walk/line_walk_best.npz

AVAILABLE GAMES: {', '.join(available_games)}
        """
    )

    # Mode selection
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        '--eval', action='store_true',
        help='Evaluation mode: greedy rollouts with a loaded model, no training'
    )
    mode_group.add_argument(
        '--inspect', type=str, metavar='MODEL_PATH',
        help='Load a model file and show its metadata'
    )

    # Game selection
    parser.add_argument(
        '--game', type=str, default=None,
        choices=available_games,
        help=f'Game to train/evaluate. Available: {", ".join(available_games)}'
    )

    # Model options
    parser.add_argument(
        '--model', type=str, default=None,
        help='Path to model file to load'
    )
    parser.add_argument(
        '--model-dir', type=str, default=None,
        help='Directory for checkpoints (default: models)'
    )
    parser.add_argument(
        '--no-save', action='store_true',
        help='Do not write checkpoints'
    )

    # Training parameters
    parser.add_argument(
        '--episodes', type=positive_int, default=None,
        help='Number of training or evaluation episodes'
    )
    parser.add_argument(
        '--lr', type=float, default=None,
        help='Policy learning rate'
    )
    parser.add_argument(
        '--value-lr', type=float, default=None,
        help='Value network learning rate'
    )
    parser.add_argument(
        '--gamma', type=float, default=None,
        help='Discount factor'
    )
    parser.add_argument(
        '--exploration', type=float, default=None,
        help='Initial random-action probability'
    )
    parser.add_argument(
        '--no-baseline', action='store_true',
        help='Weight the policy gradient by the raw return instead of the advantage'
    )

    # Other options
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for reproducibility'
    )
    parser.add_argument(
        '--log-level', type=str, default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Console log level (default: INFO)'
    )
    parser.add_argument(
        '--log-file', action='store_true',
        help='Also write a timestamped log file under LOG_DIR'
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Apply CLI overrides to a fresh Config and re-validate it."""
    config = Config()

    if args.game:
        config.GAME_NAME = args.game
    if args.model_dir:
        config.MODEL_DIR = args.model_dir
    if args.no_save:
        config.SAVE_MODELS = False
    if args.episodes is not None:
        config.MAX_EPISODES = args.episodes
    if args.lr is not None:
        config.LEARNING_RATE = args.lr
    if args.value_lr is not None:
        config.VALUE_LEARNING_RATE = args.value_lr
    if args.gamma is not None:
        config.GAMMA = args.gamma
    if args.exploration is not None:
        config.EXPLORATION_START = args.exploration
        config.EXPLORATION_END = min(config.EXPLORATION_END, args.exploration)
    if args.no_baseline:
        config.USE_BASELINE = False
    if args.seed is not None:
        config.SEED = args.seed
    if args.log_level:
        config.LOG_LEVEL = args.log_level

    config.__post_init__()
    return config


def inspect_model(filepath: str) -> int:
    """Load a checkpoint's metadata and print it."""
    import json
    import numpy as np

    try:
        with np.load(filepath, allow_pickle=False) as data:
            metadata = json.loads(str(data['metadata']))
    except (OSError, KeyError, ValueError, zipfile.BadZipFile) as e:
        logger.error(f"Failed to read model {filepath}: {e}")
        return 1

    print("\n" + "=" * 60)
    print(f"Model Inspection: {filepath}")
    print("=" * 60)
    for key, value in metadata.items():
        print(f"   {key}: {value}")
    print("=" * 60)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    config = build_config(args)

    setup_logging(
        log_dir=config.LOG_DIR,
        level=config.LOG_LEVEL,
        file_output=args.log_file,
        force=True
    )

    if args.inspect:
        return inspect_model(args.inspect)

    GameClass = get_game(config.GAME_NAME)
    if GameClass is None:
        logger.error(f"Unknown game: {config.GAME_NAME}")
        return 1

    game = GameClass(config)
    if config.SEED is not None:
        game.seed(config.SEED)
    agent = Agent(game.state_size, game.action_size, config)

    if args.model:
        try:
            loaded = agent.load(args.model)
        except (OSError, KeyError, TypeError, ValueError, zipfile.BadZipFile) as e:
            logger.error(f"Failed to load model {args.model}: {e}")
            return 1
        if loaded is None:
            return 1

    trainer = Trainer(game, agent, config)

    if args.eval:
        num_eval = args.episodes if args.episodes is not None else 10
        results = trainer.evaluate(num_episodes=num_eval)
        print("\n" + "=" * 60)
        print("Evaluation Results")
        print("=" * 60)
        for key, value in results.items():
            print(f"   {key}: {value:.3f}")
        print("=" * 60)
        return 0

    try:
        trainer.train()
    except KeyboardInterrupt:
        logger.warning("Training interrupted by user")
        if config.SAVE_MODELS:
            trainer._save('interrupted', trainer.current_episode,
                          trainer.metrics.get_best_reward(), 0.0)
    except (ShapeError, EmptyEpisodeError) as e:
        logger.error(f"Training stopped: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
