"""Repository for monthly cost operations."""

import logging
from datetime import datetime
from typing import List

from sqlalchemy import func, select

from components.core import realtime
from components.core.errors import InvalidState, NotFound
from components.core.repository import UserScopedRepository
from components.cost.models import MonthlyCost, PENDING, SKIPPED
from components.cost import schemas
from components.period.models import SalaryPeriod, ACTIVE

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1)


def _sort_key(cost: MonthlyCost):
    return (cost.payment_date or cost.paid_at or _EPOCH, cost.order, cost.id)


class CostRepository(UserScopedRepository[MonthlyCost]):
    """Repository for cost instances of a period."""
    model = MonthlyCost
    collection = realtime.COSTS
    label = "Cost"

    async def list_for_period(self, period_id: int) -> List[MonthlyCost]:
        """Get every cost of a period, earliest payment date first."""
        result = await self.session.execute(
            self._scoped().where(MonthlyCost.salary_period_id == period_id)
        )
        return sorted(result.scalars().all(), key=_sort_key)

    async def add_item(self, item: schemas.CostCreate) -> MonthlyCost:
        """Add an ad-hoc pending cost to the active period."""
        result = await self.session.execute(
            select(SalaryPeriod.id)
            .where(SalaryPeriod.user_id == self.user_id, SalaryPeriod.status == ACTIVE)
            .order_by(SalaryPeriod.start_date.desc())
            .limit(1)
        )
        period_id = result.scalar_one_or_none()
        if period_id is None:
            raise NotFound("Start a period before adding items")

        result = await self.session.execute(
            select(func.count(MonthlyCost.id)).where(
                MonthlyCost.user_id == self.user_id,
                MonthlyCost.salary_period_id == period_id,
            )
        )
        db_cost = MonthlyCost(
            name=item.name,
            budget=item.amount,
            bank_account_id=item.bank_account_id,
            payment_date=item.payment_date,
            order=result.scalar() or 0,
            status=PENDING,
            salary_period_id=period_id,
        )
        await self.add(db_cost)
        await self._commit()
        return db_cost

    async def update_item(self, cost_id: int, updates: schemas.CostUpdate) -> MonthlyCost:
        """Apply field-level edits without any status rule."""
        db_cost = await self.get_or_raise(cost_id)
        for field, value in updates.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(db_cost, field, value)
        await self._commit()
        return db_cost

    async def delete_item(self, cost_id: int) -> None:
        """Remove a cost. Balances are not touched, whatever the status."""
        db_cost = await self.get_or_raise(cost_id)
        await self.session.delete(db_cost)
        await self._commit()

    async def _transition(self, cost_id: int, expected: str, target: str) -> MonthlyCost:
        db_cost = await self.get_or_raise(cost_id)
        if db_cost.status != expected:
            raise InvalidState(f"Cost {cost_id} is not {expected}")
        db_cost.status = target
        await self._commit()
        logger.info("Cost %s: %s -> %s", cost_id, expected, target)
        return db_cost

    async def skip(self, cost_id: int) -> MonthlyCost:
        return await self._transition(cost_id, PENDING, SKIPPED)

    async def unskip(self, cost_id: int) -> MonthlyCost:
        return await self._transition(cost_id, SKIPPED, PENDING)
