"""
Alembic environment configuration.
Uses the same DatabaseConfig as the application for consistency.
"""

import os
import sys
from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context
from dotenv import load_dotenv

# Add project to path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from app.db.models import DbBaseModel  # noqa: E402
from common.api_error import ConfigurationError  # noqa: E402
from common.config import get_config, initialize_config  # noqa: E402

load_dotenv()
try:
    initialize_config()
except ConfigurationError as e:
    print(f"FATAL: Configuration error:\n{e}")
    sys.exit(1)

# Alembic Config object
config = context.config

# Load app configuration (includes database config)
app_config = get_config()

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Target metadata for autogenerate
target_metadata = DbBaseModel.metadata


def get_sync_url() -> str:
    """
    Synchronous database URL for Alembic.

    The app runs on asyncpg/aiosqlite; migrations use psycopg2/pysqlite.
    """
    if not app_config.database:
        raise RuntimeError("Database configuration not found in environment")

    db_config = app_config.database

    if db_config.is_sqlite:
        return f"sqlite:///{db_config.name}"

    if db_config.driver.value == "asyncpg":
        driver = "postgresql"  # Uses psycopg2 by default
    else:
        driver = "postgresql+psycopg"

    if db_config.username and db_config.password:
        password = db_config.password.get_secret_value()
        auth = f"{db_config.username}:{password}@"
    elif db_config.username:
        auth = f"{db_config.username}@"
    else:
        auth = ""

    return f"{driver}://{auth}{db_config.host}:{db_config.port}/{db_config.name}"


def get_connect_args() -> dict:
    """
    Connection arguments including SSL configuration.

    Returns the same SSL settings used by the application.
    """
    if not app_config.database or app_config.database.is_sqlite:
        return {}

    db_config = app_config.database
    connect_args = {}

    # psycopg2 uses libpq parameter names
    if db_config.ssl_mode:
        ssl_mode = db_config.ssl_mode.value

        if ssl_mode == "disable":
            connect_args["sslmode"] = "disable"
        elif ssl_mode in ["require", "verify-ca", "verify-full"]:
            connect_args["sslmode"] = ssl_mode

            if db_config.ssl_ca_path:
                connect_args["sslrootcert"] = str(db_config.ssl_ca_path)
            if db_config.ssl_cert_path:
                connect_args["sslcert"] = str(db_config.ssl_cert_path)
            if db_config.ssl_key_path:
                connect_args["sslkey"] = str(db_config.ssl_key_path)

    return connect_args


def _is_sqlite() -> bool:
    return bool(app_config.database and app_config.database.is_sqlite)


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    This configures the context with just a URL and not an Engine.
    Calls to context.execute() emit SQL to script output.
    """
    context.configure(
        url=get_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_is_sqlite(),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Run migrations in 'online' mode.

    Creates an Engine and associates a connection with the context.
    """
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_sync_url()

    # NullPool: migrations open one short-lived connection
    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        connect_args=get_connect_args(),
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=_is_sqlite(),
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
