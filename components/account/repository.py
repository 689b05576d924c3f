"""Repository for account operations."""

import logging
from typing import List

from sqlalchemy import select, or_

from components.account.models import Account
from components.account import schemas
from components.core import realtime
from components.core.errors import ReferenceConflict
from components.core.repository import UserScopedRepository
from components.cost.models import MonthlyCost
from components.template.models import Template

logger = logging.getLogger(__name__)

REASON_TEMPLATES = "templates"
REASON_COSTS = "costs"


class AccountRepository(UserScopedRepository[Account]):
    """Repository for account operations."""
    model = Account
    collection = realtime.ACCOUNTS
    label = "Account"

    async def create(self, account: schemas.AccountCreate) -> Account:
        """Create a new account."""
        db_account = Account(**account.model_dump())
        await self.add(db_account)
        await self._commit()
        return db_account

    async def get_all(self) -> List[Account]:
        """Get every account of the user."""
        return await self.list_all()

    async def update(self, account_id: int, account: schemas.AccountUpdate) -> Account:
        """Rename, rebalance or restyle an account."""
        db_account = await self.get_or_raise(account_id)
        for field, value in account.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(db_account, field, value)
        await self._commit()
        return db_account

    async def check_usage(self, account_id: int) -> schemas.AccountUsage:
        """
        Check whether the account can be deleted.

        Templates are checked before costs, and a cost blocks deletion through
        either its assigned account or its temporary override.
        """
        result = await self.session.execute(
            select(Template.id).where(
                Template.user_id == self.user_id,
                Template.bank_account_id == account_id,
            ).limit(1)
        )
        if result.first() is not None:
            return schemas.AccountUsage(can_delete=False, reason=REASON_TEMPLATES)

        result = await self.session.execute(
            select(MonthlyCost.id).where(
                MonthlyCost.user_id == self.user_id,
                or_(
                    MonthlyCost.bank_account_id == account_id,
                    MonthlyCost.temporary_account_id == account_id,
                ),
            ).limit(1)
        )
        if result.first() is not None:
            return schemas.AccountUsage(can_delete=False, reason=REASON_COSTS)

        return schemas.AccountUsage(can_delete=True)

    async def delete(self, account_id: int) -> None:
        """Delete an account that nothing references any more."""
        db_account = await self.get_or_raise(account_id)
        usage = await self.check_usage(account_id)
        if not usage.can_delete:
            raise ReferenceConflict(
                f"Account {account_id} is still referenced by {usage.reason}",
                reason=usage.reason,
            )
        await self.session.delete(db_account)
        await self._commit()
        logger.info("Deleted account %s for user %s", account_id, self.user_id)
