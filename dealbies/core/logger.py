"""Logging setup for the Dealbies backend.

All application loggers live under the ``dealbies`` namespace so one handler
configured at startup covers every module.
"""

import logging
import sys

LOGGER_NAME = "dealbies"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the root ``dealbies`` logger (idempotent)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(console_handler)

    # Keep SQLAlchemy quiet unless DATABASE_ECHO asks for statements
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.dialects").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.orm").setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger, e.g. ``get_logger("redirector")``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


__all__ = ["setup_logging", "get_logger", "LOGGER_NAME"]
