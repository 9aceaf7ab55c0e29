# common/logger/log_backends/__init__.py
"""
Log persistence backends, selected through LOG_BACKENDS.
"""

from .base import LogBackend
from .file_backend import FileBackend
from .registry import get_active_backends, register_backend, get_all_metrics

__all__ = [
    "LogBackend",
    "FileBackend",
    "get_active_backends",
    "register_backend",
    "get_all_metrics",
]
