"""
Logging for the REINFORCE agent project.

Every module logs through a child of the 'reinforce_nn' logger:

    from reinforce_nn.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Training started")

Verbosity comes from Config.LOG_LEVEL (or --log-level):
    DEBUG   - per-step update details
    INFO    - episode summaries and checkpoint events (default)
    WARNING - numeric guards and interruptions
    ERROR   - aborted episodes and unreadable models

The console handler honours that level; the optional log file always
records DEBUG and above.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


ROOT_LOGGER_NAME = 'reinforce_nn'
LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

_LINE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'


class ColoredFormatter(logging.Formatter):
    """Colors the level name when writing to a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str = _LINE_FORMAT, stream=None):
        super().__init__(fmt)
        stream = stream if stream is not None else sys.stdout
        self.enabled = hasattr(stream, 'isatty') and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if not self.enabled or color is None:
            return super().format(record)
        # Color a copy so other handlers see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    name = level.upper()
    if name not in LEVELS:
        raise ValueError(f"Unknown log level '{level}' (expected one of {LEVELS})")
    return getattr(logging, name)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(stream=sys.stdout))
    return handler


def _file_handler(log_dir: str, filename: Optional[str]) -> logging.FileHandler:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    if filename is None:
        filename = f"training_{datetime.now():%Y%m%d_%H%M%S}.log"
    handler = logging.FileHandler(directory / filename, mode='a', encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_LINE_FORMAT))
    return handler


def setup_logging(
    log_dir: str = 'logs',
    level: Union[str, int] = 'INFO',
    console_output: bool = True,
    file_output: bool = False,
    log_filename: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Attach handlers to the 'reinforce_nn' logger.

    Args:
        log_dir: Directory for the log file
        level: Console level name ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        console_output: Write to stdout
        file_output: Also write to log_dir/log_filename
        log_filename: Defaults to training_YYYYMMDD_HHMMSS.log
        force: Replace handlers installed by an earlier call
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers and not force:
        return

    console_level = _to_level(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if console_output:
        root.addHandler(_console_handler(console_level))
    if file_output:
        root.addHandler(_file_handler(log_dir, log_filename))

    root.setLevel(logging.DEBUG if file_output else console_level)
    root.debug(f"Logging configured (console={console_output}, file={file_output})")


def get_logger(name: str) -> logging.Logger:
    """
    Logger under the 'reinforce_nn' namespace.

    Module names inside the package (reinforce_nn.ai.agent) are used as-is;
    anything else ('training', 'model', '__main__') is prefixed.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def get_log_path() -> Optional[Path]:
    """Path of the active log file, or None when logging only to the console."""
    for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def log_training_metrics(
    episode: int,
    total_reward: float,
    exploration_rate: float,
    policy_loss: Optional[float] = None,
    value_loss: Optional[float] = None,
    steps: Optional[int] = None,
) -> None:
    """One INFO line per logged episode on the 'training' logger."""
    fields = [
        ('ep', episode, 'd'),
        ('reward', total_reward, '.2f'),
        ('explore', exploration_rate, '.4f'),
        ('policy_loss', policy_loss, '.6f'),
        ('value_loss', value_loss, '.6f'),
        ('steps', steps, 'd'),
    ]
    line = " | ".join(
        f"{key}={value:{spec}}" for key, value, spec in fields if value is not None
    )
    get_logger('training').info(line)


def log_model_event(event: str, path: str, **kwargs) -> None:
    """
    Log a checkpoint save or load on the 'model' logger.

    Example:
        log_model_event('save', 'models/line_walk/line_walk_best.npz', episode=12)
        # SAVE | models/line_walk/line_walk_best.npz | episode=12
    """
    parts = [event.upper(), str(path)]
    parts.extend(f"{key}={value}" for key, value in kwargs.items())
    get_logger('model').info(" | ".join(parts))
