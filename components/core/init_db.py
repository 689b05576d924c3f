"""Database initialization and dependency injection."""

from typing import AsyncGenerator, Optional

import fastapi
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import HTTPConnection

from components.core.database import DatabaseManager
from components.core.realtime import ChangeFeed
# Import all models to ensure they're registered
import components.user.models
import components.account.models
import components.template.models
import components.period.models
import components.cost.models
import components.history.models


def get_db_manager(connection: HTTPConnection) -> DatabaseManager:
    """FastAPI dependency returning the app's store client."""
    return connection.app.state.db


def get_feed(connection: HTTPConnection) -> ChangeFeed:
    """FastAPI dependency returning the app's change feed."""
    return connection.app.state.feed


async def get_db(
    db_manager: DatabaseManager = Depends(get_db_manager),
) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    async with db_manager.get_db() as session:
        yield session


def init_db(app: fastapi.FastAPI, db_manager: Optional[DatabaseManager] = None) -> None:
    """Attach the store client and the change feed to the app."""
    app.state.db = db_manager or DatabaseManager()
    app.state.feed = ChangeFeed()
