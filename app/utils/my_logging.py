# app/utils/my_logging.py
"""Logging configuration"""
import logging
import sys
from typing import Optional

from app.config.settings import get_settings

# Library loggers that drown booking decisions at INFO
NOISY_LOGGERS = [
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic",
    "httpx",
    "redis",
    "uvicorn.access",
]


def setup_logging(quiet_libraries: Optional[bool] = None):
    """
    Configure application logging.

    Level comes from LOG_LEVEL. Library loggers are held at WARNING unless
    QUIET_LIBRARY_LOGS is off (or `quiet_libraries=False` is passed).
    """
    settings = get_settings()
    if quiet_libraries is None:
        quiet_libraries = settings.QUIET_LIBRARY_LOGS

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    logging.getLogger().setLevel(level)

    if quiet_libraries:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
