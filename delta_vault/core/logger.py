"""
Logging for the delta-neutral vault.

Every module logs through a child of the ``delta_vault`` logger. Handlers
live on that package logger only: colored lines on stderr (stdout stays free
for CLI output) and a rotating plain-text file under the log directory.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "delta_vault"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI escapes used per level."""
    RESET = "\033[0m"
    DIM = "\033[2m"
    CYAN = "\033[36m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BOLD = "\033[1m"


LEVEL_COLORS = {
    logging.DEBUG: Colors.DIM,
    logging.INFO: Colors.CYAN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.RED + Colors.BOLD,
}


class ColoredFormatter(logging.Formatter):
    """Wraps each line in its level color when the stream is a terminal."""

    def __init__(self, fmt: str, datefmt: str, use_color: bool = True):
        super().__init__(fmt, datefmt)
        self._use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if not self._use_color:
            return line
        return f"{LEVEL_COLORS.get(record.levelno, Colors.RESET)}{line}{Colors.RESET}"


def get_log_dir() -> Path:
    """Directory for log files: VAULT_LOG_DIR, or ./logs."""
    return Path(os.getenv("VAULT_LOG_DIR", "logs"))


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logger(
    level: int | str | None = None,
    log_file: str | Path | None = None,
) -> logging.Logger:
    """
    Configure the package logger once and return it.

    Later calls return the already configured logger unchanged, so the
    first caller (CLI, test harness, or first import) decides the setup.

    Args:
        level: Log level name or number. Defaults to LOG_LEVEL, else INFO
        log_file: Rotating log file. Defaults to <log dir>/vault.log

    Returns:
        The ``delta_vault`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logger.handlers:
        return logger

    level = _resolve_level(level)
    logger.setLevel(level)
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(
        ColoredFormatter(LOG_FORMAT, DATE_FORMAT, use_color=sys.stderr.isatty())
    )
    logger.addHandler(console)

    log_path = Path(log_file) if log_file else get_log_dir() / "vault.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module of this package.

    Names outside the package are re-rooted under it so their records reach
    the package handlers.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Vault initialized")
    """
    setup_logger()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
