"""
Logging Configuration

Centralized logging using loguru with structured output.
"""

import sys
from pathlib import Path

from loguru import logger

from config import get_settings

_settings = get_settings()

# Remove default handler
logger.remove()

# Add console handler with custom format
logger.add(
    sys.stderr,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[component]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>",
    level=_settings.log_level,
    colorize=True,
)

# Add file handler for persistent logs
logger.add(
    str(Path(_settings.log_dir) / "pipeline_{time:YYYY-MM-DD}.log"),
    rotation="10 MB",
    retention="7 days",
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]}:{function}:{line} | {message}",
    level=_settings.log_level,
)

logger.configure(extra={"component": "app"})


def get_logger(name: str):
    """Get a logger bound to a component name."""
    return logger.bind(component=name)


# Pre-configured loggers for the pipeline stages
question_logger = get_logger("questions")
visualization_logger = get_logger("visualization")
insights_logger = get_logger("insights")
api_logger = get_logger("api")
cache_logger = get_logger("cache")
