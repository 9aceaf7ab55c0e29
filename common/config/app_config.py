# common/config/app_config.py
"""
Complete clinic service configuration with validation.
Database configuration with SSL support, plus billing tunables.
"""

from typing import Optional, Any
from pydantic import BaseModel, Field, field_validator, model_validator, SecretStr
from .config_types import EnvLogLevel, DbDriver, SslMode, Environment
from .env_config import require_env, get_env, get_int_env
from .logging_config import LoggingConfig
from pathlib import Path

DEFAULT_FREE_RETURN_DAYS = 7


class DatabaseConfig(BaseModel):
    """
    Database configuration with SSL/TLS support.

    PostgreSQL drivers build a network URL. The aiosqlite driver treats
    ``name`` as a file path (or ``:memory:``) and ignores host/port.
    """

    # Basic connection
    host: str = Field(..., min_length=1)
    port: int = Field(..., gt=0, le=65535)
    name: str = Field(..., min_length=1, description="Database name")
    slow_query_threshold: float = Field(
        ..., description="Threshold (ms) for a query to be considered slow"
    )
    username: Optional[str] = Field(default=None, min_length=1)
    password: Optional[SecretStr] = Field(default=None)

    # Connection pooling
    pool_size: int = Field(..., ge=1, le=100)
    max_overflow: int = Field(..., ge=0, le=100)
    pool_timeout: int = Field(..., ge=1, le=300)
    pool_recycle: int = Field(..., ge=300)

    # SSL/TLS Configuration
    ssl_mode: Optional[SslMode] = Field(default=None)
    ssl_cert_path: Optional[Path] = Field(default=None)
    ssl_key_path: Optional[Path] = Field(default=None)
    ssl_ca_path: Optional[Path] = Field(default=None)

    driver: DbDriver = Field(...)

    model_config = {"frozen": True}

    @field_validator("ssl_cert_path", "ssl_key_path", "ssl_ca_path")
    @classmethod
    def validate_ssl_paths(cls, v: Optional[Path]) -> Optional[Path]:
        """Validate SSL certificate paths exist."""
        if v is not None and not v.exists():
            raise ValueError(f"SSL file not found: {v}")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.driver == DbDriver.AIOSQLITE

    def get_connection_url(self, include_password: bool = False) -> str:
        """
        Build SQLAlchemy connection URL.

        Args:
            include_password: If True, include the real password (for connecting).
                              If False, mask it (for logging).
        """
        if self.is_sqlite:
            return f"sqlite+aiosqlite:///{self.name}"

        if self.username:
            if include_password and self.password:
                auth = f"{self.username}:{self.password.get_secret_value()}"
            else:
                auth = f"{self.username}:****"
            return f"postgresql+{self.driver.value}://{auth}@{self.host}:{self.port}/{self.name}"

        return f"postgresql+{self.driver.value}://{self.host}:{self.port}/{self.name}"

    def requires_ssl(self) -> bool:
        return self.ssl_mode in [
            SslMode.REQUIRE,
            SslMode.VERIFY_CA,
            SslMode.VERIFY_FULL,
        ]

    def to_dict_safe(self) -> dict[str, Any]:
        """Convert to dict with sensitive data masked (safe for logging)."""
        data = self.model_dump()
        if data.get("password"):
            data["password"] = "****"
        return data


class BillingConfig(BaseModel):
    """
    Revenue calculation tunables.

    lookup_concurrency bounds how many prior-visit lookups may be in flight
    while computing a day's revenue (1 = strictly sequential).
    """

    lookup_concurrency: int = Field(1, ge=1, le=32)
    default_free_return_days: int = Field(DEFAULT_FREE_RETURN_DAYS, ge=0, le=365)

    model_config = {"frozen": True}


class AppConfig(BaseModel):
    """
    Complete application configuration.

    Loaded from environment variables and validated at startup. Invalid
    configuration fails fast with a readable message.
    """

    app_title: str = Field(..., min_length=1)
    app_version: str = Field(..., pattern=r"^\d+\.\d+\.\d+$")  # Semantic versioning
    environment: str = Field(..., pattern="^(development|staging|production)$")

    logging: LoggingConfig
    database: Optional[DatabaseConfig] = None
    billing: BillingConfig = Field(default_factory=BillingConfig)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_production_settings(self) -> "AppConfig":
        if self.environment == "production":
            if self.database is None:
                raise ValueError("Database config required in production")
            if self.logging.log_level == EnvLogLevel.DEBUG:
                raise ValueError("DEBUG log level not allowed in production")
        return self


def load_database_config(environment: Environment) -> Optional[DatabaseConfig]:
    """
    Load database configuration from environment.

    Required:
    - DB_HOST, DB_PORT, DB_NAME
    - DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT, DB_POOL_RECYCLE
    - DB_DRIVER (asyncpg, psycopg, aiosqlite)
    - SLOW_QUERY_THRESHOLD

    Optional (dev) / Required (prod):
    - DB_USER, DB_PASSWORD, DB_SSL_MODE

    Optional:
    - DB_SSL_CERT, DB_SSL_KEY, DB_SSL_CA
    """
    host = get_env("DB_HOST")
    if not host:
        return None

    port_str = require_env("DB_PORT")
    name = require_env("DB_NAME")
    pool_size_str = require_env("DB_POOL_SIZE")
    max_overflow_str = require_env("DB_MAX_OVERFLOW")
    pool_timeout_str = require_env("DB_POOL_TIMEOUT")
    pool_recycle_str = require_env("DB_POOL_RECYCLE")
    driver_str = require_env("DB_DRIVER")
    slow_query_threshold = float(require_env("SLOW_QUERY_THRESHOLD"))

    try:
        driver = DbDriver(driver_str)
    except ValueError:
        valid_drivers = [d.value for d in DbDriver]
        raise ValueError(
            f"Invalid DB_DRIVER: {driver_str}. Must be one of: {valid_drivers}"
        )

    if environment.is_production:
        username: Optional[str] = require_env("DB_USER")
        password_str: Optional[str] = require_env("DB_PASSWORD")
        ssl_mode_str: Optional[str] = require_env("DB_SSL_MODE")
    else:
        username = get_env("DB_USER")
        password_str = get_env("DB_PASSWORD")
        ssl_mode_str = get_env("DB_SSL_MODE")

    ssl_mode: Optional[SslMode] = None
    if ssl_mode_str:
        try:
            ssl_mode = SslMode(ssl_mode_str)
        except ValueError:
            valid_modes = [m.value for m in SslMode]
            raise ValueError(
                f"Invalid DB_SSL_MODE: {ssl_mode_str}. Must be one of: {valid_modes}"
            )

    ssl_cert = get_env("DB_SSL_CERT")
    ssl_key = get_env("DB_SSL_KEY")
    ssl_ca = get_env("DB_SSL_CA")

    return DatabaseConfig(
        host=host,
        port=int(port_str),
        name=name,
        username=username,
        password=SecretStr(password_str) if password_str else None,
        pool_size=int(pool_size_str),
        max_overflow=int(max_overflow_str),
        pool_timeout=int(pool_timeout_str),
        pool_recycle=int(pool_recycle_str),
        ssl_mode=ssl_mode,
        ssl_cert_path=Path(ssl_cert) if ssl_cert else None,
        ssl_key_path=Path(ssl_key) if ssl_key else None,
        ssl_ca_path=Path(ssl_ca) if ssl_ca else None,
        driver=driver,
        slow_query_threshold=slow_query_threshold,
    )


def load_billing_config() -> BillingConfig:
    """
    Load billing tunables. Both are optional:
    - BILLING_LOOKUP_CONCURRENCY (default 1)
    - BILLING_DEFAULT_FREE_RETURN_DAYS (default 7)
    """
    return BillingConfig(
        lookup_concurrency=get_int_env("BILLING_LOOKUP_CONCURRENCY", 1),
        default_free_return_days=get_int_env(
            "BILLING_DEFAULT_FREE_RETURN_DAYS", DEFAULT_FREE_RETURN_DAYS
        ),
    )


def load_app_config() -> AppConfig:
    """
    Load complete application configuration.

    Raises:
        ValidationError: If configuration is invalid
        ConfigurationError: If required env vars are missing
    """
    from .logging_config import load_logging_config

    env_str = require_env("ENVIRONMENT")

    try:
        environment = Environment(env_str)
    except ValueError:
        valid_envs = [e.value for e in Environment]
        raise ValueError(
            f"Invalid ENVIRONMENT: {env_str}. Must be one of: {valid_envs}"
        )

    return AppConfig(
        app_title=require_env("APP_TITLE"),
        app_version=require_env("APP_VERSION"),
        environment=env_str,
        logging=load_logging_config(),
        database=load_database_config(environment),
        billing=load_billing_config(),
    )


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "BillingConfig",
    "DEFAULT_FREE_RETURN_DAYS",
    "load_app_config",
    "load_database_config",
    "load_billing_config",
]
