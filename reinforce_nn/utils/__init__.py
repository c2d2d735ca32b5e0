"""Utility modules for the REINFORCE agent project."""

from .logger import get_logger, setup_logging, get_log_path

__all__ = ['get_logger', 'setup_logging', 'get_log_path']
