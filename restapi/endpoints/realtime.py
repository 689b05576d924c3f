"""Realtime snapshot streams over websockets."""

import asyncio
import logging
from contextlib import suppress
from typing import Any, Awaitable, Callable, List, Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder

from components.account.repository import AccountRepository
from components.account import schemas as account_schemas
from components.core import realtime
from components.core.database import DatabaseManager
from components.core.init_db import get_db_manager, get_feed
from components.core.realtime import ChangeFeed
from components.cost.repository import CostRepository
from components.cost import schemas as cost_schemas
from components.history.repository import HistoryRepository
from components.history import schemas as history_schemas
from components.period.repository import PeriodRepository
from components.period import schemas as period_schemas
from components.template.repository import TemplateRepository
from components.template import schemas as template_schemas
from components.user.models import User
from restapi.endpoints.auth import get_websocket_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


def build_fetcher(
    db_manager: DatabaseManager,
    user_id: int,
    collection: str,
    archived: bool = False,
    limit: int = 50,
) -> Callable[[], Awaitable[List[Any]]]:
    """Return a coroutine function reading one full snapshot of ``collection``."""

    async def fetch() -> List[Any]:
        async with db_manager.get_db() as session:
            if collection == realtime.ACCOUNTS:
                rows = await AccountRepository(session, user_id).get_all()
                schema = account_schemas.Account
            elif collection == realtime.TEMPLATES:
                rows = await TemplateRepository(session, user_id).get_all(archived=archived)
                schema = template_schemas.Template
            elif collection == realtime.PERIODS:
                rows = await PeriodRepository(session, user_id).get_all()
                schema = period_schemas.SalaryPeriod
            elif collection == realtime.COSTS:
                active = await PeriodRepository(session, user_id).get_active()
                rows = [] if active is None else await CostRepository(session, user_id).list_for_period(active.id)
                schema = cost_schemas.MonthlyCost
            else:
                rows = await HistoryRepository(session, user_id).get_recent(limit)
                schema = history_schemas.CostRecord
            return jsonable_encoder([schema.model_validate(row) for row in rows])

    return fetch


@router.websocket("/ws/{collection}")
async def subscribe(
    websocket: WebSocket,
    collection: str,
    archived: bool = Query(False),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db_manager: DatabaseManager = Depends(get_db_manager),
    feed: ChangeFeed = Depends(get_feed),
    current_user: User = Depends(get_websocket_user),
):
    """
    Stream full snapshots of one collection.

    A snapshot is sent on connect and again after every change; clients
    replace their local view with each message. Closing the socket releases
    the listener.
    """
    if collection not in realtime.COLLECTIONS:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Unknown collection")
        return

    await websocket.accept()
    fetch = build_fetcher(db_manager, current_user.id, collection, archived, limit or db_manager.settings.HISTORY_DEFAULT_LIMIT)
    snapshots = feed.snapshots(current_user.id, collection, fetch)

    async def pump() -> None:
        async for snapshot in snapshots:
            await websocket.send_json(snapshot)

    sender = asyncio.create_task(pump())
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        sender.cancel()
        with suppress(asyncio.CancelledError, WebSocketDisconnect):
            await sender
        await snapshots.aclose()
        logger.debug("Websocket for %s closed (user %s)", collection, current_user.id)
