# app/services/v1/dashboard_service.py
from datetime import date, timezone
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.billing import ZERO, summarize_daily_revenue
from app.db import DbManager
from app.db.models import Appointment, AppointmentStatus, OPEN_STATUSES, Patient
from app.db.schemas import DailyStatsResponse
from common.logger import get_app_logger
from common.scripts import get_day_bounds
from .appointment_service import AppointmentService, SqlPriorVisitLookup
from .doctor_service import DoctorService
from .settings_service import SettingsService

logger = get_app_logger(__name__)

CENT = Decimal("0.01")


class DashboardService:
    """
    Headline figures for one calendar day.

    Revenue honours free return visits; prior-visit lookups go through
    ``db_manager`` so they can run with bounded concurrency.
    """

    def __init__(
        self,
        db: AsyncSession,
        db_manager: DbManager,
        lookup_concurrency: int = 1,
    ):
        self.db = db
        self.db_manager = db_manager
        self.lookup_concurrency = lookup_concurrency

    async def _status_counts(self, day: date) -> dict[AppointmentStatus, int]:
        query = (
            select(Appointment.status, func.count(Appointment.appointment_id))
            .where(Appointment.appointment_date == day)
            .group_by(Appointment.status)
            .execution_options(logging_token="DashboardService.status_counts")
        )
        return {status: count for status, count in (await self.db.execute(query)).all()}

    async def _patient_counts(self, day: date) -> tuple[int, int]:
        start, end = get_day_bounds(day)
        total = await self.db.execute(select(func.count(Patient.patient_id)))
        registered = await self.db.execute(
            select(func.count(Patient.patient_id)).where(
                Patient.created_at >= start.replace(tzinfo=timezone.utc),
                Patient.created_at < end.replace(tzinfo=timezone.utc),
            )
        )
        return int(total.scalar_one()), int(registered.scalar_one())

    async def daily_stats(self, day: date) -> DailyStatsResponse:
        counts = await self._status_counts(day)
        total_patients, new_patients = await self._patient_counts(day)

        billable = await AppointmentService(self.db).billable_appointments_for(day)
        summary = await summarize_daily_revenue(
            billable,
            SqlPriorVisitLookup(self.db_manager),
            concurrency=self.lookup_concurrency,
        )

        completed = counts.get(AppointmentStatus.COMPLETED, 0)
        average = (
            (summary.total / completed).quantize(CENT, rounding=ROUND_HALF_UP)
            if completed
            else ZERO
        )

        logger.info(
            "Daily stats computed",
            day=day.isoformat(),
            completed=completed,
            revenue=str(summary.total),
            free_return_visits=summary.free_return_visits,
        )

        return DailyStatsResponse(
            day=day,
            total_appointments=sum(counts.values()),
            completed_appointments=completed,
            waiting_appointments=sum(counts.get(s, 0) for s in OPEN_STATUSES),
            total_patients=total_patients,
            new_patients=new_patients,
            available_doctors=await DoctorService(self.db).count_available(),
            revenue=summary.total,
            average_revenue=average,
            free_return_visits=summary.free_return_visits,
            missing_fee_policies=summary.missing_fee_policies,
            currency_code=await SettingsService(self.db).currency_code(),
            contributions=summary.contributions,
        )


__all__ = ["DashboardService"]
