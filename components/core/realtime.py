"""In-process change feed backing the realtime snapshot streams."""

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

ACCOUNTS = "accounts"
TEMPLATES = "templates"
PERIODS = "periods"
COSTS = "costs"
HISTORY = "history"

COLLECTIONS = (ACCOUNTS, TEMPLATES, PERIODS, COSTS, HISTORY)


class ChangeFeed:
    """Fan-out of "collection changed" notifications, keyed by user."""

    def __init__(self) -> None:
        self._listeners: Dict[Tuple[int, str], List[asyncio.Queue]] = {}

    def subscribe(self, user_id: int, collection: str) -> asyncio.Queue:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        queue: asyncio.Queue = asyncio.Queue()
        self._listeners.setdefault((user_id, collection), []).append(queue)
        return queue

    def unsubscribe(self, user_id: int, collection: str, queue: asyncio.Queue) -> None:
        key = (user_id, collection)
        queues = self._listeners.get(key)
        if not queues:
            return
        if queue in queues:
            queues.remove(queue)
        if not queues:
            del self._listeners[key]

    def listener_count(self, user_id: int, collection: str) -> int:
        return len(self._listeners.get((user_id, collection), []))

    def publish(self, user_id: int, *collections: str) -> None:
        """Notify every listener of ``user_id`` on the given collections."""
        for collection in collections:
            for queue in self._listeners.get((user_id, collection), []):
                queue.put_nowait(collection)
            logger.debug("Published change on %s for user %s", collection, user_id)

    async def snapshots(
        self,
        user_id: int,
        collection: str,
        fetch: Callable[[], Awaitable[T]],
    ) -> AsyncIterator[T]:
        """
        Yield a full snapshot now and again after every change.

        Bursts of notifications that arrive while a snapshot is being fetched
        collapse into a single refetch. Closing the generator unregisters the
        listener.
        """
        queue = self.subscribe(user_id, collection)
        try:
            yield await fetch()
            while True:
                await queue.get()
                while not queue.empty():
                    queue.get_nowait()
                yield await fetch()
        finally:
            self.unsubscribe(user_id, collection, queue)
