# app/db/deps.py
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncGenerator
from .db_manager import DbManager

# Note: No import from main.py here!


def get_db_manager(request: Request) -> DbManager:
    """
    The DbManager created during lifespan.

    Services that open their own sessions (concurrent lookups) take this
    instead of the request-scoped session.
    """
    manager = getattr(request.app.state, "db_manager", None)

    if not manager:
        raise RuntimeError(
            "DbManager not found in app.state. Ensure lifespan is configured."
        )
    return manager


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits when the endpoint returns."""
    manager = get_db_manager(request)

    async with manager.session() as session:
        yield session


__all__ = ["get_db", "get_db_manager"]
