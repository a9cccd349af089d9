"""Logging configuration for the Soundstorm player."""

import logging
from pathlib import Path


def setup_logging() -> logging.Logger:
    """
    Configure logging to ~/.soundstorm.log

    The terminal belongs to the REPL/TUI, so records only go to the file
    unless the file can't be opened.

    Returns:
        logging.Logger: Configured logger instance
    """
    log_path = Path.home() / ".soundstorm.log"

    logger = logging.getLogger("soundstorm")
    logger.setLevel(logging.DEBUG)

    # Remove existing handlers to avoid duplicates
    for old in logger.handlers:
        old.close()
    logger.handlers = []

    try:
        handler = logging.FileHandler(log_path)
        handler.setLevel(logging.DEBUG)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)
    except OSError as e:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        logger.addHandler(console_handler)
        logger.warning(f"Could not create log file at {log_path}: {e}")

    return logger
