"""
Analytics Installer Logging Configuration

Configurable logging with debug mode support.
"""

import os
import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional

from analytics_installer.wizard.ui import mask_secrets


# Check for debug mode
DEBUG_MODE = os.environ.get("ANALYTICS_INSTALLER_DEBUG", "").lower() in ("1", "true", "yes")

ROOT_LOGGER = "analytics_installer"


class SecretMaskingFormatter(logging.Formatter):
    """Formatter that masks secrets in log messages."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return mask_secrets(message)


def setup_logging(
    level: Optional[int] = None,
    log_file: Optional[Path] = None,
    quiet: bool = False
) -> logging.Logger:
    """Set up logging configuration.

    The interactive wizard owns the terminal, so it runs with quiet=True and
    only logs to a file when one is configured.

    Args:
        level: Logging level (default: DEBUG if ANALYTICS_INSTALLER_DEBUG, else INFO)
        log_file: Optional path to log file
        quiet: If True, suppress console output

    Returns:
        Configured logger
    """
    if level is None:
        level = logging.DEBUG if DEBUG_MODE else logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if log_file else level)
    logger.propagate = False

    # Clear existing handlers
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)

        if DEBUG_MODE:
            console_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        else:
            console_format = "%(message)s"

        console_handler.setFormatter(SecretMaskingFormatter(console_format))
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_format = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
        file_handler.setFormatter(SecretMaskingFormatter(file_format))
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a logger under the installer namespace.

    Args:
        name: Logger name (will be prefixed with 'analytics_installer.')

    Returns:
        Logger
    """
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def get_log_path(project_root: Path) -> Path:
    """Get the default log file path."""
    return project_root / "logs" / f"analytics-installer-{datetime.now().strftime('%Y-%m-%d')}.log"
