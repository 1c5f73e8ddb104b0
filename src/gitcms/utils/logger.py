"""Logging configuration for git-cms."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime


# ANSI color codes for terminal output
class Colors:
    """Terminal color codes."""
    RESET = '\033[0m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    BOLD = '\033[1m'


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log messages."""

    COLORS = {
        'DEBUG': Colors.CYAN,
        'INFO': Colors.GREEN,
        'WARNING': Colors.YELLOW,
        'ERROR': Colors.RED,
        'CRITICAL': Colors.RED + Colors.BOLD,
    }

    def __init__(self, *args, use_colors: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        if not self.use_colors or record.levelname not in self.COLORS:
            return super().format(record)

        # Color a copy so the file handler sees plain names
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{Colors.RESET}"
        colored.name = f"{Colors.BLUE}{record.name}{Colors.RESET}"
        return super().format(colored)


def setup_logging(
    config: Optional[Dict[str, Any]] = None,
    log_file: Optional[str] = None,
    console_level: Optional[str] = None,
    file_level: Optional[str] = None,
    use_colors: bool = True
) -> None:
    """Setup logging configuration.

    Args:
        config: Logging configuration dict
        log_file: Override log file path; an empty string disables the file handler
        console_level: Override console log level
        file_level: Override file log level
        use_colors: Whether to use colored output
    """
    config = config or {}

    level = config.get('level', 'INFO')
    if log_file is None:
        log_file = config.get('file', 'logs/git-cms.log')
    max_size = config.get('max_size', 10) * 1024 * 1024  # MB to bytes
    backup_count = config.get('backup_count', 5)
    format_str = config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_level = console_level or level
    file_level = file_level or level

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # handlers filter
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, console_level.upper()))
    console_handler.setFormatter(ColoredFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
        use_colors=use_colors
    ))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size,
            backupCount=backup_count
        )
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(logging.Formatter(format_str))
        root_logger.addHandler(file_handler)

    # urllib3 connection chatter drowns out gateway logs at DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    logging.info(f"Logging initialized - Console: {console_level}, File: {file_level} -> {log_file or 'disabled'}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class OperationLogger:
    """Context manager for logging operations with timing."""

    def __init__(self, logger: logging.Logger, operation: str, **kwargs):
        """Initialize operation logger.

        Args:
            logger: Logger instance
            operation: Operation description
            **kwargs: Additional context to log
        """
        self.logger = logger
        self.operation = operation
        self.context = kwargs
        self.start_time = None
        self.success = True
        self.error = None

    def __enter__(self):
        self.start_time = datetime.now()
        context_str = ', '.join(f"{k}={v}" for k, v in self.context.items())
        msg = f"Starting {self.operation}"
        if context_str:
            msg += f" ({context_str})"
        self.logger.info(msg)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = (datetime.now() - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(f"Completed {self.operation} in {duration:.2f}s")
        else:
            self.success = False
            self.error = exc_val
            self.logger.error(f"Failed {self.operation} after {duration:.2f}s: {exc_val}")

        return False  # Don't suppress exceptions
