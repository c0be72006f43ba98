"""
Logging Configuration
Sets up the package logger for phase sheet reading.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def setup_logging(level: int | str = logging.WARNING, log_file: str | Path | None = None) -> logging.Logger:
    """
    Configures the logger for the 'phase_sheet' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG or "INFO")
        log_file: Optional path to save logs to a file.

    Returns:
        The configured 'phase_sheet' logger.
    """
    logger = logging.getLogger("phase_sheet")
    logger.setLevel(level)

    # Drop handlers from an earlier call so messages are not duplicated
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    # Console Handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File Handler (Optional)
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized.")
    return logger
