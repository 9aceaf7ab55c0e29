# common/logger/log_backends/registry.py
"""
Registry of log persistence backends.

Configure via LOG_BACKENDS (comma-separated):
    LOG_BACKENDS=file
"""

import sys
from typing import Any, Dict, List, Type
from common.config import require_env
from .base import LogBackend
from .file_backend import FileBackend


_BACKEND_REGISTRY: Dict[str, Type[LogBackend]] = {
    "file": FileBackend,
}

_active_backends: List[LogBackend] = []
_backends_initialized = False


def register_backend(name: str, backend_class: Type[LogBackend]) -> None:
    """
    Make a custom backend selectable through LOG_BACKENDS.

    Example:
        >>> register_backend("audit", AuditTrailBackend)
    """
    _BACKEND_REGISTRY[name] = backend_class


def _initialize_backends() -> None:
    global _backends_initialized

    if _backends_initialized:
        return

    backend_names = [
        name.strip() for name in require_env("LOG_BACKENDS").split(",") if name.strip()
    ]

    for backend_name in backend_names:
        backend_class = _BACKEND_REGISTRY.get(backend_name)
        if backend_class is None:
            print(
                f"Warning: Unknown backend '{backend_name}'. "
                f"Available: {', '.join(_BACKEND_REGISTRY)}",
                file=sys.stderr,
            )
            continue

        try:
            _active_backends.append(backend_class())
        except OSError as e:
            print(f"Failed to initialize backend '{backend_name}': {e}", file=sys.stderr)

    if not _active_backends:
        _active_backends.append(FileBackend())

    _backends_initialized = True


def get_active_backends() -> List[LogBackend]:
    if not _backends_initialized:
        _initialize_backends()
    return _active_backends


def get_all_metrics() -> Dict[str, Any]:
    return {backend.name: backend.get_metrics() for backend in get_active_backends()}


__all__ = [
    "register_backend",
    "get_active_backends",
    "get_all_metrics",
]
