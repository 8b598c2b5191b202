"""
Logging configuration for the commit message API.

LOG_LEVEL selects the level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
"""

import sys
import logging

VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def configure_logging(level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger."""
    log_level = level.upper()
    if log_level not in VALID_LEVELS:
        sys.stderr.write(f"Warning: Invalid LOG_LEVEL '{level}', defaulting to INFO\n")
        log_level = "INFO"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(console_handler)

    # httpx logs every request URL at INFO, and ours carry ?key=
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
