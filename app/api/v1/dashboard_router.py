# app/api/v1/dashboard_router.py
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.db import DbManager, get_db, get_db_manager
from app.db.schemas import DailyStatsResponse
from app.services.v1 import DashboardService
from common.config import get_config
from common.logger.logger_middleware import enable_perf_headers

dashboard_router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(enable_perf_headers)],
)


@dashboard_router.get(
    "/daily",
    response_model=DailyStatsResponse,
    summary="Daily appointment counts and revenue",
    description="""
    Revenue counts completed appointments only. A return visit within the
    doctor's free-return window of a previous completed visit is free.

    **Database Impact:** a handful of aggregate queries plus one prior-visit
    lookup per completed return visit (bounded by BILLING_LOOKUP_CONCURRENCY).
    """,
)
async def daily_stats(
    on: Optional[date] = Query(None, description="YYYY-MM-DD, defaults to today"),
    db: AsyncSession = Depends(get_db),
    db_manager: DbManager = Depends(get_db_manager),
):
    service = DashboardService(
        db,
        db_manager,
        lookup_concurrency=get_config().billing.lookup_concurrency,
    )
    return await service.daily_stats(on or date.today())


__all__ = ["dashboard_router"]
