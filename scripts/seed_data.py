"""Script to seed a demo user with accounts and templates."""

import asyncio
import logging
from datetime import date, datetime

from components.account.models import Account
from components.core import init_db  # noqa: F401  registers every model
from components.core.database import DatabaseManager
from components.core.security import get_password_hash
from components.template.models import Template
from components.user.models import User

logger = logging.getLogger(__name__)

ACCOUNTS = [
    ("Main Bank", 2450000, "bg-primary", "account_balance"),
    ("Household Bank", 845000, "bg-accent-danger", "account_balance"),
    ("Utilities Bank", 1120500, "bg-accent-success", "account_balance"),
    ("Credit Card", 500000, "bg-accent-purple", "credit_card"),
]

# (name, default budget, account index, payment day)
TEMPLATES = [
    ("Credit card bill", 127500, 0, 27),
    ("Rent", 85000, 1, 27),
    ("Electricity", 12000, 2, 5),
    ("Mobile phone", 8000, 2, 10),
    ("Gas", 5000, 2, 12),
    ("Savings / investment", 95000, 3, 25),
]


async def seed_data(login: str = "demo", password: str = "password123") -> None:
    """Seed test data into the database."""
    db_manager = DatabaseManager()
    await db_manager.connect()
    try:
        async def work(session):
            user = User(
                login=login,
                password=get_password_hash(password),
                registration_date=date.today(),
            )
            session.add(user)
            await session.flush()

            accounts = [
                Account(user_id=user.id, name=name, balance=balance, color=color, icon=icon)
                for name, balance, color, icon in ACCOUNTS
            ]
            session.add_all(accounts)
            await session.flush()

            now = datetime.now()
            session.add_all([
                Template(
                    user_id=user.id,
                    name=name,
                    default_budget=budget,
                    bank_account_id=accounts[account_index].id,
                    payment_day=day,
                    order=order,
                    is_archived=False,
                    updated_at=now,
                )
                for order, (name, budget, account_index, day) in enumerate(TEMPLATES)
            ])
            return user

        user = await db_manager.run_in_transaction(work, max_attempts=1)
        logger.info("Seeded user %s (id %s)", login, user.id)
    finally:
        await db_manager.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed_data())
