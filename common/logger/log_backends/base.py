# common/logger/log_backends/base.py
"""Base class for log persistence backends."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class LogBackend(ABC):
    """
    A destination for persisted log entries.

    Entries carry at least ``message``, ``timestamp`` (ISO) and ``level``.
    """

    def __init__(self, **config: Any):
        self.config = config

    @abstractmethod
    def write(self, log_entry: Dict[str, Any]) -> bool:
        """Write one entry. Returns False on failure instead of raising."""

    @abstractmethod
    def get_metrics(self) -> Dict[str, Any]:
        """Backend health counters."""

    def shutdown(self, timeout: float = 5.0) -> None:
        """Release resources. No-op by default."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used in LOG_BACKENDS."""


__all__ = ["LogBackend"]
