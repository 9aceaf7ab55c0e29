# common/logger/__init__.py
"""
Application logging: structlog wrapper with optional persistence.

The request middleware lives in ``common.logger.logger_middleware`` and is
imported explicitly by the app factory.
"""

from .logger import logger, AppLogger, get_app_logger, TimingStats

__all__ = ["logger", "AppLogger", "get_app_logger", "TimingStats"]
