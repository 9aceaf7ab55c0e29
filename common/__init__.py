# common/__init__.py
"""
Cross-cutting pieces shared by the clinic service: configuration,
structured logging, error types and small helpers.
"""

from .context_vars import *
from .api_error import *
from .config import *
from .logger import logger, get_app_logger, AppLogger
