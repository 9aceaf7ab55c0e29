# app/db/db_manager.py
"""
Database manager focused on connection management and session handling.
Schema migrations are handled separately via Alembic CLI.

Design principles:
- Single responsibility: Connection/session management only
- Fail fast: Invalid configuration crashes on startup
- Explicit over implicit: No magic auto-migrations in production
- Request timing: engine events feed the per-request RequestTimer
"""

from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
    AsyncEngine,
)
from sqlalchemy import event, inspect, text
from sqlalchemy.pool import StaticPool
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Any, Optional, Union
from pathlib import Path
import time
from common import DatabaseConfig, logger, request_timer_context_var

_SQLITE_PREFIX = "sqlite+aiosqlite://"
_POSTGRES_PREFIXES = ("postgresql+asyncpg://", "postgresql+psycopg://")


class DbManager:
    """
    Database connection and session manager.

    Responsibilities:
    - Async engine/connection pool management
    - Session lifecycle management
    - Health checks and monitoring
    - Feeding ``db``/``sql``/``query_count`` into the active RequestTimer

    NOT responsible for:
    - Schema migration (use Alembic CLI). ``create_all`` exists only for
      local sqlite databases and tests.

    Usage:
        # Startup
        db_manager = DbManager.from_config(config.database)
        await db_manager.verify_connection()

        # Runtime
        async with db_manager.session() as session:
            result = await session.execute(...)

        # Shutdown
        await db_manager.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo: bool = False,
        echo_pool: bool = False,
        connect_args: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize database manager.

        Args:
            url: Database URL (postgresql+asyncpg://, postgresql+psycopg:// or sqlite+aiosqlite://)
            pool_size: Number of persistent connections (ignored for sqlite)
            max_overflow: Additional connections beyond pool_size
            pool_timeout: Seconds to wait for connection from pool
            pool_recycle: Recycle connections after N seconds
            pool_pre_ping: Test connections before using
            echo: Log all SQL statements (use for debugging)
            echo_pool: Log connection pool events
            connect_args: Driver-specific connection arguments (SSL, etc.)
        """
        self._validate_url(url)
        self.is_sqlite = url.startswith(_SQLITE_PREFIX)

        self._config: dict[str, Union[str, int]] = {
            "url": url,
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_recycle": pool_recycle,
        }

        engine_kwargs: dict[str, Any] = {
            "echo": echo,
            "echo_pool": echo_pool,
            "connect_args": dict(connect_args or {}),
        }
        if self.is_sqlite:
            # One shared connection keeps an in-memory database alive
            if ":memory:" in url or url.rstrip("/") == _SQLITE_PREFIX.rstrip("/"):
                engine_kwargs["poolclass"] = StaticPool
                engine_kwargs["connect_args"].setdefault("check_same_thread", False)
        else:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
                pool_pre_ping=pool_pre_ping,
            )

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self._register_timing_events()

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        self._verified = False

        if self.is_sqlite:
            logger.info("DbManager initialized", backend="sqlite")
        else:
            logger.info(
                f"DbManager initialized: pool_size={pool_size}, "
                f"max_overflow={max_overflow}, pre_ping={pool_pre_ping}"
            )

    @classmethod
    def from_config(
        cls,
        config: DatabaseConfig,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        ssl_mode: Optional[str] = None,
        ssl_cert_path: Optional[Path] = None,
        ssl_key_path: Optional[Path] = None,
        ssl_ca_path: Optional[Path] = None,
        **kwargs: Any,
    ) -> "DbManager":
        """
        Create DbManager from DatabaseConfig with SSL support.

        Credentials and SSL arguments override the config values.

        Example:
            db_manager = DbManager.from_config(config.database)
        """
        if config.is_sqlite:
            return cls(url=config.get_connection_url(), **kwargs)

        final_username = username or config.username
        final_password = password or (
            config.password.get_secret_value() if config.password else None
        )

        if final_username and final_password:
            auth = f"{final_username}:{final_password}@"
        elif final_username:
            auth = f"{final_username}@"
        else:
            auth = ""
        url = f"postgresql+{config.driver.value}://{auth}{config.host}:{config.port}/{config.name}"

        connect_args = kwargs.pop("connect_args", {})

        final_ssl_mode = ssl_mode or (
            config.ssl_mode.value if config.ssl_mode else None
        )
        final_ssl_cert = ssl_cert_path or config.ssl_cert_path
        final_ssl_key = ssl_key_path or config.ssl_key_path
        final_ssl_ca = ssl_ca_path or config.ssl_ca_path

        if final_ssl_mode and config.driver.value == "asyncpg":
            import ssl as ssl_module

            if final_ssl_mode == "disable":
                connect_args["ssl"] = False
            elif final_ssl_mode in ["require", "verify-ca", "verify-full"]:
                ssl_context = ssl_module.create_default_context()
                if final_ssl_ca:
                    ssl_context.load_verify_locations(cafile=str(final_ssl_ca))
                if final_ssl_cert and final_ssl_key:
                    ssl_context.load_cert_chain(
                        certfile=str(final_ssl_cert),
                        keyfile=str(final_ssl_key),
                    )

                if final_ssl_mode == "verify-full":
                    ssl_context.check_hostname = True
                    ssl_context.verify_mode = ssl_module.CERT_REQUIRED
                else:
                    ssl_context.check_hostname = False
                    ssl_context.verify_mode = ssl_module.CERT_NONE

                connect_args["ssl"] = ssl_context

        return cls(
            url=url,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            connect_args=connect_args,
            **kwargs,
        )

    @staticmethod
    def _validate_url(url: str) -> None:
        if not url or not url.startswith((*_POSTGRES_PREFIXES, _SQLITE_PREFIX)):
            raise ValueError(
                f"Invalid database URL. Expected one of {_POSTGRES_PREFIXES} or {_SQLITE_PREFIX}, got: {url[:20]}..."
            )

    def _register_timing_events(self) -> None:
        """Accumulate SQL time and query count on the request's timer, if any."""
        sync_engine = self.engine.sync_engine

        @event.listens_for(sync_engine, "before_cursor_execute")
        def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            conn.info.setdefault("query_start_time", []).append(time.perf_counter())

        @event.listens_for(sync_engine, "after_cursor_execute")
        def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            starts = conn.info.get("query_start_time")
            if not starts:
                return
            elapsed_ms = (time.perf_counter() - starts.pop()) * 1000
            timer = request_timer_context_var.get()
            if timer is not None:
                timer.add("sql", elapsed_ms)
                timer.add("query_count", 1)

    async def verify_connection(self) -> None:
        """
        Verify database connection on startup.

        Raises:
            ConnectionError: If connection fails
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            self._verified = True
            logger.info("✓ Database connection verified")
        except Exception as e:
            logger.error(f"❌ Database connection failed: {e}")
            raise ConnectionError(f"Failed to connect to database: {e}") from e

    async def verify_migrations_current(self) -> Optional[str]:
        """
        Check that Alembic has stamped the database.

        Returns:
            The current revision, or None for sqlite (schema built by create_all)

        Raises:
            RuntimeError: If alembic_version table doesn't exist
        """
        if self.is_sqlite:
            logger.info("Skipping migration check for sqlite database")
            return None

        async with self.engine.connect() as conn:
            table_exists = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).has_table("alembic_version")
            )
            if not table_exists:
                raise RuntimeError(
                    "alembic_version table not found. "
                    "Have you run 'alembic upgrade head'?"
                )

            result = await conn.execute(text("SELECT version_num FROM alembic_version"))
            current_version = result.scalar()

        logger.info(f"Current migration version: {current_version}")
        return current_version

    async def create_all(self) -> None:
        """Create every table from model metadata (sqlite/dev/tests only)."""
        from app.db.models import DbBaseModel

        async with self.engine.begin() as conn:
            await conn.run_sync(DbBaseModel.metadata.create_all)
        logger.info("✓ Tables created from metadata")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional database session.

        Automatically commits on success, rolls back on exception.

        Usage:
            async with db_manager.session() as session:
                patient = await session.get(Patient, patient_id)
                patient.phone = "0500000000"
                # Commits automatically on exit
        """
        timer = request_timer_context_var.get()
        start = time.perf_counter()
        session = self.session_maker()
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Session error, rolled back: {e}")
            raise
        finally:
            await session.close()
            if timer is not None:
                timer.add("db", (time.perf_counter() - start) * 1000)

    async def health_check(self) -> dict[str, Any]:
        """
        Connectivity check with response time and pool status.

        Example:
            {
                "healthy": True,
                "response_time_ms": 5.2,
                "pool_status": "Pool size: 10 ..."
            }
        """
        start = time.perf_counter()

        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database health check failed", error=str(e))
            return {
                "healthy": False,
                "error": str(e),
            }

        return {
            "healthy": True,
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
            "pool_status": self.engine.pool.status(),
        }

    async def get_pool_stats(self) -> dict[str, Any]:
        """
        Connection pool statistics parsed from ``pool.status()``.
        """
        status = self.engine.pool.status()

        checked_out = 0
        overflow = 0
        in_pool = 0

        try:
            for part in status.split("  "):
                if "Checked out connections:" in part:
                    checked_out = int(part.split(":")[-1].strip())
                elif "Current Overflow:" in part:
                    overflow = int(part.split(":")[-1].strip())
                elif "Connections in pool:" in part:
                    in_pool = int(part.split(":")[-1].strip())
        except (ValueError, IndexError):
            logger.debug("Unparseable pool status", status=status)

        return {
            "pool_size_configured": self._config["pool_size"],
            "max_overflow_configured": self._config["max_overflow"],
            "connections_in_use": checked_out,
            "connections_in_pool": in_pool,
            "overflow_active": overflow,
            "total_connections": checked_out + in_pool,
            "status_raw": status,
        }

    async def dispose(self) -> None:
        """
        Dispose of all connections. Call this on application shutdown.
        """
        await self.engine.dispose()
        logger.info("✓ Database connections disposed")

    def get_config_snapshot(self) -> dict[str, Any]:
        snapshot = self._config.copy()
        snapshot["url"] = self.engine.url.render_as_string(hide_password=True)
        return snapshot


__all__ = ["DbManager"]
