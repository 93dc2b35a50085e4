"""
Logging configuration for the track relay.
Uses loguru for enhanced logging capabilities.
"""

import sys
from pathlib import Path
from loguru import logger

from trackrelay.config import RelayConfig


def setup_logging(config: RelayConfig, console: bool = True) -> None:
    """
    Configure logging for the relay.

    Args:
        config: Relay configuration
        console: Whether to output to console
    """

    # Remove default handler
    logger.remove()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    simple_format = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"

    if console:
        logger.add(
            sys.stdout,
            format=log_format,
            level=config.log_level,
            colorize=True,
        )

    # File output is opt-in
    if not config.log_file:
        logger.info(f"Logging initialized - Level: {config.log_level}")
        return

    log_path = Path(config.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        str(log_path),
        format=simple_format,
        level=config.log_level,
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        enqueue=True,  # Thread-safe
    )

    # Error file (separate file for errors only)
    error_log_path = log_path.parent / "error.log"
    logger.add(
        str(error_log_path),
        format=simple_format,
        level="ERROR",
        rotation="10 MB",
        retention="60 days",
        compression="zip",
        enqueue=True,
    )

    logger.info(f"Logging initialized - Level: {config.log_level}, File: {log_path}")


class BatchLogger:
    """Context logger for one tracking batch."""

    def __init__(self, batch_id: str):
        self.batch_id = batch_id
        self._logger = logger.bind(batch_id=batch_id)

    def info(self, message: str, **kwargs):
        self._logger.info(f"[Batch:{self.batch_id[:8]}] {message}", **kwargs)

    def debug(self, message: str, **kwargs):
        self._logger.debug(f"[Batch:{self.batch_id[:8]}] {message}", **kwargs)

    def warning(self, message: str, **kwargs):
        self._logger.warning(f"[Batch:{self.batch_id[:8]}] {message}", **kwargs)

    def error(self, message: str, **kwargs):
        self._logger.error(f"[Batch:{self.batch_id[:8]}] {message}", **kwargs)
