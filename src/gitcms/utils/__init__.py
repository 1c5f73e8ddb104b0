"""Utility modules for git-cms."""

from .config import Config
from .logger import setup_logging, get_logger, OperationLogger
from .validators import ValidationError, ContentValidator

__all__ = [
    'Config',
    'setup_logging',
    'get_logger',
    'OperationLogger',
    'ValidationError',
    'ContentValidator'
]
