"""Ledger operations moving money between accounts and monthly costs."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from components.account.repository import AccountRepository
from components.core import realtime
from components.core.database import DatabaseManager
from components.core.errors import InsufficientFunds, InvalidState, ValidationFailed
from components.core.realtime import ChangeFeed
from components.cost.models import MonthlyCost, PAID, PENDING
from components.cost.repository import CostRepository

logger = logging.getLogger(__name__)


class LedgerService:
    """
    Pay and cancel-payment for one user's costs.

    Both operations touch an account and a cost together, so each runs as a
    single transaction: every row is re-read inside it and a conflicting
    concurrent write makes the whole unit retry instead of half-applying.
    """

    def __init__(self, db: DatabaseManager, user_id: int, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.user_id = user_id
        self.feed = feed

    def _publish(self) -> None:
        if self.feed is not None:
            self.feed.publish(self.user_id, realtime.COSTS, realtime.ACCOUNTS)

    async def pay_cost(
        self,
        cost_id: int,
        actual_amount: int,
        account_id: int,
        paid_at: Optional[datetime] = None,
    ) -> MonthlyCost:
        """
        Mark a pending cost paid and debit ``account_id`` by ``actual_amount``.

        Raises:
            NotFound: the cost or the account does not exist.
            InvalidState: the cost is not pending.
            InsufficientFunds: the account balance is below ``actual_amount``.
        """
        if actual_amount < 0:
            raise ValidationFailed("Actual amount must not be negative")
        paid_at = paid_at or datetime.now()

        async def work(session: AsyncSession) -> MonthlyCost:
            cost = await CostRepository(session, self.user_id).get_or_raise(cost_id)
            account = await AccountRepository(session, self.user_id).get_or_raise(account_id)

            if cost.status != PENDING:
                raise InvalidState(f"Cost {cost_id} is not pending")
            if account.balance < actual_amount:
                raise InsufficientFunds(
                    f"Account {account_id} balance {account.balance} is below {actual_amount}"
                )

            cost.status = PAID
            cost.actual_amount = actual_amount
            cost.paid_at = paid_at
            cost.payment_date = paid_at
            if account_id != cost.bank_account_id:
                cost.temporary_account_id = account_id
            account.balance = account.balance - actual_amount
            await session.flush()
            return cost

        cost = await self.db.run_in_transaction(work)
        logger.info(
            "Paid cost %s with %s from account %s (user %s)",
            cost_id, actual_amount, account_id, self.user_id,
        )
        self._publish()
        return cost

    async def cancel_payment(self, cost_id: int) -> MonthlyCost:
        """
        Revert a paid cost to pending and refund the account actually charged.

        Raises:
            NotFound: the cost or the charged account does not exist.
            InvalidState: the cost is not paid.
        """
        refunded = {}

        async def work(session: AsyncSession) -> MonthlyCost:
            cost = await CostRepository(session, self.user_id).get_or_raise(cost_id)
            if cost.status != PAID:
                raise InvalidState(f"Cost {cost_id} is not paid")

            charged_id = cost.temporary_account_id or cost.bank_account_id
            account = await AccountRepository(session, self.user_id).get_or_raise(charged_id)

            account.balance = account.balance + (cost.actual_amount or 0)
            refunded.update(account_id=charged_id, amount=cost.actual_amount or 0)

            cost.status = PENDING
            cost.paid_at = None
            cost.actual_amount = None
            cost.temporary_account_id = None
            await session.flush()
            return cost

        cost = await self.db.run_in_transaction(work)
        logger.info(
            "Cancelled payment of cost %s, refunded %s to account %s (user %s)",
            cost_id, refunded["amount"], refunded["account_id"], self.user_id,
        )
        self._publish()
        return cost
