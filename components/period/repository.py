"""Repository for salary period operations."""

from typing import List, Optional

from components.core import realtime
from components.core.repository import UserScopedRepository
from components.period.models import SalaryPeriod, ACTIVE


class PeriodRepository(UserScopedRepository[SalaryPeriod]):
    """Repository for salary periods."""
    model = SalaryPeriod
    collection = realtime.PERIODS
    label = "Period"

    async def get_all(self) -> List[SalaryPeriod]:
        """Get every period, newest start date first."""
        result = await self.session.execute(
            self._scoped().order_by(SalaryPeriod.start_date.desc(), SalaryPeriod.id.desc())
        )
        return list(result.scalars().all())

    async def get_active(self) -> Optional[SalaryPeriod]:
        result = await self.session.execute(
            self._scoped()
            .where(SalaryPeriod.status == ACTIVE)
            .order_by(SalaryPeriod.start_date.desc(), SalaryPeriod.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
