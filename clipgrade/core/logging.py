"""
Logging configuration for clipgrade.

Everything logs under the "clipgrade" namespace to stdout. Model responses
are multi-line and can be long, so log lines quote them through
`excerpt()`.
"""
import logging
import sys
from typing import Optional

from clipgrade.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
EXCERPT_LENGTH = 120


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the clipgrade logger tree."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    logger = logging.getLogger("clipgrade")
    logger.setLevel(numeric_level)

    return logger


def excerpt(text: Optional[str], limit: int = EXCERPT_LENGTH) -> str:
    """Single-line, bounded view of free text for log messages."""
    if not text:
        return ""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[:limit].rstrip() + "..."


# Global logger instance
logger = setup_logging(settings.log_level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the clipgrade namespace."""
    if name:
        return logging.getLogger(f"clipgrade.{name}")
    return logger
