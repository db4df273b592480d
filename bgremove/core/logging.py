import logging
import sys
from typing import Optional

from bgremove.core.config import get_settings


def setup_logging(name: str = "bgremove", level: Optional[str] = None) -> logging.Logger:
    """Configure and return the application logger."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level or get_settings().log_level)

    return logger
