"""Monthly cycle management: starting and closing salary periods."""

import calendar
import logging
from datetime import datetime
from typing import Any, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from components.core import realtime
from components.core.database import DatabaseManager
from components.core.errors import NotFound
from components.core.realtime import ChangeFeed
from components.cost.models import MonthlyCost, PAID, PENDING, SKIPPED
from components.cost.repository import CostRepository
from components.history import models as history_models
from components.history.models import CostRecord
from components.period.models import SalaryPeriod, ACTIVE, CLOSED
from components.period.repository import PeriodRepository
from components.template.repository import TemplateRepository
from components.user.models import User

logger = logging.getLogger(__name__)


def scheduled_payment_date(start_date: datetime, payment_day: int) -> datetime:
    """
    Payment date for ``payment_day`` in the month of ``start_date``.

    Days past the end of the month are clamped to its last day, so a day of
    31 falls on April 30th and on February 28th/29th.
    """
    last_day = calendar.monthrange(start_date.year, start_date.month)[1]
    day = min(max(payment_day, 1), last_day)
    return datetime(start_date.year, start_date.month, day)


def archive_status(status: str) -> str:
    if status == PAID:
        return history_models.PAID
    if status == SKIPPED:
        return history_models.SKIPPED
    return history_models.UNPAID


def archive_cost(cost: MonthlyCost, closed_at: datetime) -> CostRecord:
    """Build the history record of a cost as it stands when its period closes."""
    return CostRecord(
        user_id=cost.user_id,
        name=cost.name,
        amount=cost.actual_amount or 0,
        budget=cost.budget,
        bank_account_id=cost.temporary_account_id or cost.bank_account_id,
        status=archive_status(cost.status),
        paid_at=cost.paid_at or closed_at,
        salary_period_id=cost.salary_period_id,
        is_archived_item=True,
    )


class PeriodService:
    """Start and close one user's monthly periods atomically."""

    def __init__(self, db: DatabaseManager, user_id: int, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.user_id = user_id
        self.feed = feed

    def _publish(self, *collections: str) -> None:
        if self.feed is not None:
            self.feed.publish(self.user_id, *collections)

    async def _claim_owner(self, session: AsyncSession) -> None:
        # Bumps the versioned user row, so a concurrent start that read the
        # same version fails with StaleDataError and is retried.
        owner = await session.get(User, self.user_id)
        if owner is None:
            raise NotFound(f"User {self.user_id} not found")
        owner.periods_started = (owner.periods_started or 0) + 1
        await session.flush()

    async def start_new_period(
        self,
        start_date: datetime,
        templates: Optional[Sequence[Any]] = None,
    ) -> SalaryPeriod:
        """
        Close the active period (if any) and open a new one seeded from templates.

        ``templates`` are objects exposing ``name``, ``default_budget``,
        ``bank_account_id``, ``payment_day`` and ``order``; when omitted the
        user's active templates are read inside the transaction.
        """

        async def work(session: AsyncSession) -> SalaryPeriod:
            await self._claim_owner(session)
            periods = PeriodRepository(session, self.user_id)
            seeds = templates
            if seeds is None:
                seeds = await TemplateRepository(session, self.user_id).get_all(archived=False)

            previous = await periods.get_active()
            if previous is not None:
                previous.status = CLOSED
                previous.end_date = start_date

            period = await periods.add(SalaryPeriod(start_date=start_date, status=ACTIVE))

            for index, template in enumerate(seeds):
                session.add(MonthlyCost(
                    user_id=self.user_id,
                    name=template.name,
                    budget=template.default_budget,
                    bank_account_id=template.bank_account_id,
                    payment_date=scheduled_payment_date(start_date, template.payment_day),
                    order=template.order or index,
                    status=PENDING,
                    salary_period_id=period.id,
                ))
            await session.flush()
            logger.info(
                "Started period %s at %s with %d costs (user %s, closed previous: %s)",
                period.id, start_date, len(seeds), self.user_id,
                previous.id if previous is not None else None,
            )
            return period

        period = await self.db.run_in_transaction(work)
        self._publish(realtime.PERIODS, realtime.COSTS)
        return period

    async def close_period(self, summary: Any = None) -> SalaryPeriod:
        """
        Archive every cost of the active period to history and close it.

        Raises:
            NotFound: there is no active period.
        """

        async def work(session: AsyncSession) -> SalaryPeriod:
            period = await PeriodRepository(session, self.user_id).get_active()
            if period is None:
                raise NotFound("No active period")

            costs = await CostRepository(session, self.user_id).list_for_period(period.id)
            closed_at = datetime.now()
            for cost in costs:
                session.add(archive_cost(cost, closed_at))
                await session.delete(cost)

            period.status = CLOSED
            period.end_date = closed_at
            period.last_summary = summary
            await session.flush()
            logger.info(
                "Closed period %s, archived %d costs (user %s)",
                period.id, len(costs), self.user_id,
            )
            return period

        period = await self.db.run_in_transaction(work)
        self._publish(realtime.PERIODS, realtime.COSTS, realtime.HISTORY)
        return period

    async def list_periods(self) -> List[SalaryPeriod]:
        async with self.db.get_db() as session:
            return await PeriodRepository(session, self.user_id).get_all()

    async def get_active(self) -> Optional[SalaryPeriod]:
        async with self.db.get_db() as session:
            return await PeriodRepository(session, self.user_id).get_active()
