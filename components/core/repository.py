"""Base repository for per-user collections."""

from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from components.core.errors import NotFound
from components.core.realtime import ChangeFeed

ModelT = TypeVar("ModelT")


class UserScopedRepository(Generic[ModelT]):
    """
    Repository over one entity kind, restricted to one user's rows.

    Subclasses set ``model`` (the ORM class, which must have a ``user_id``
    column) and ``collection`` (the change-feed channel). Methods that only
    flush can run inside a caller's transaction; ``_commit`` is for
    standalone CRUD and notifies subscribers once the commit has landed.
    """
    model: Type[ModelT]
    collection: str
    label: str = "Record"

    def __init__(self, session: AsyncSession, user_id: int, feed: Optional[ChangeFeed] = None):
        """Initialize repository with database session and owner."""
        self.session = session
        self.user_id = user_id
        self.feed = feed

    def _scoped(self) -> Select:
        return select(self.model).where(self.model.user_id == self.user_id)

    async def get(self, record_id: int) -> Optional[ModelT]:
        result = await self.session.execute(
            self._scoped().where(self.model.id == record_id)
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, record_id: int) -> ModelT:
        record = await self.get(record_id)
        if record is None:
            raise NotFound(f"{self.label} {record_id} not found")
        return record

    async def list_all(self) -> List[ModelT]:
        result = await self.session.execute(self._scoped().order_by(self.model.id))
        return list(result.scalars().all())

    async def add(self, record: ModelT) -> ModelT:
        record.user_id = self.user_id
        self.session.add(record)
        await self.session.flush()
        return record

    async def _commit(self, *also_changed: str) -> None:
        await self.session.commit()
        if self.feed is not None:
            self.feed.publish(self.user_id, self.collection, *also_changed)
