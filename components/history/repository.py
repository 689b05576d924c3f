"""Repository for history records."""

from typing import List

from components.core import realtime
from components.core.repository import UserScopedRepository
from components.history.models import CostRecord


class HistoryRepository(UserScopedRepository[CostRecord]):
    """Read-only access to archived costs."""
    model = CostRecord
    collection = realtime.HISTORY
    label = "Record"

    async def get_recent(self, limit: int = 50) -> List[CostRecord]:
        """Get the most recent records, newest payment first."""
        result = await self.session.execute(
            self._scoped()
            .order_by(CostRecord.paid_at.desc(), CostRecord.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
