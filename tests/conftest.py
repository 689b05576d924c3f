from datetime import date, datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from components.account.models import Account
from components.core import init_db  # noqa: F401
from components.core.config import Settings
from components.core.database import DatabaseManager
from components.core.realtime import ChangeFeed
from components.core.security import create_access_token, get_password_hash
from components.template.models import Template
from components.user.models import User
from restapi.router import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(DB_URL=f"sqlite+aiosqlite:///{tmp_path / 'budgetflow.db'}")


@pytest_asyncio.fixture
async def db(settings):
    manager = DatabaseManager(create_async_engine(settings.async_db_url), settings=settings)
    await manager.connect()
    yield manager
    await manager.disconnect()


@pytest.fixture
def feed():
    return ChangeFeed()


async def make_user(db, login="alice"):
    async with db.get_db() as session:
        user = User(login=login, password=get_password_hash("secret123"), registration_date=date.today())
        session.add(user)
        await session.commit()
        return user


@pytest_asyncio.fixture
async def user(db):
    return await make_user(db)


async def make_account(db, user_id, name="Main", balance=10000):
    async with db.get_db() as session:
        account = Account(user_id=user_id, name=name, balance=balance)
        session.add(account)
        await session.commit()
        return account


async def make_template(db, user_id, account_id, name="Rent", budget=85000, day=1, order=0, archived=False):
    async with db.get_db() as session:
        template = Template(
            user_id=user_id,
            name=name,
            default_budget=budget,
            bank_account_id=account_id,
            payment_day=day,
            order=order,
            is_archived=archived,
            updated_at=datetime(2024, 1, 1),
        )
        session.add(template)
        await session.commit()
        return template


async def reload(db, model, record_id):
    async with db.get_db() as session:
        return await session.get(model, record_id)


@pytest_asyncio.fixture
async def client(db):
    app = create_app(db)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
def auth_headers(user):
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}
