# common/config/logging_config.py
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from .env_config import require_env, get_env
from .config_types import EnvLogLevel, EnvLogBackends
from common.api_error import ConfigurationError

_default_log_level_env_key = "LOG_LEVEL"
_default_log_backend_env_key = "LOG_BACKEND"
_default_log_folder_env_key = "LOG_FOLDER_PATH"


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    log_level: EnvLogLevel
    log_backend: EnvLogBackends
    log_folder: Optional[Path] = None

    @property
    def level_value(self) -> str:
        return self.log_level.value

    @property
    def level_int(self) -> int:
        return self.log_level.level


def load_logging_config(
    log_level_env_key: str = _default_log_level_env_key,
    log_backend_env_key: str = _default_log_backend_env_key,
) -> LoggingConfig:
    """
    Load logging configuration from environment.

    Args:
        log_level_env_key: Env var holding the level (DEBUG..CRITICAL)
        log_backend_env_key: Env var holding the persistence backend

    Raises:
        ConfigurationError: If either variable is missing or invalid
    """
    try:
        log_level_val = require_env(log_level_env_key).upper()
        log_backend_val = require_env(log_backend_env_key).lower()
        folder = get_env(_default_log_folder_env_key)

        return LoggingConfig(
            log_level=EnvLogLevel(log_level_val),
            log_backend=EnvLogBackends(log_backend_val),
            log_folder=Path(folder) if folder else None,
        )

    except ValueError as exc:
        valid_levels = ", ".join(level.value for level in EnvLogLevel)
        valid_backends = ", ".join(backend.value for backend in EnvLogBackends)

        raise ConfigurationError(
            f"Invalid logging configuration. "
            f"{log_level_env_key} must be one of [{valid_levels}], "
            f"{log_backend_env_key} must be one of [{valid_backends}]"
        ) from exc


__all__ = [
    "LoggingConfig",
    "load_logging_config",
]
