"""Account endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.repository import AccountRepository
from components.account import schemas
from components.core.init_db import get_db, get_feed
from components.core.realtime import ChangeFeed
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
    responses={404: {"description": "Not found"}},
)


def get_repository(
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_feed),
    current_user: User = Depends(get_current_user),
) -> AccountRepository:
    return AccountRepository(db, current_user.id, feed)


@router.get("/", response_model=List[schemas.Account])
async def read_accounts(repo: AccountRepository = Depends(get_repository)):
    """Get all accounts of the current user."""
    return await repo.get_all()


@router.post("/", response_model=schemas.Account, status_code=status.HTTP_201_CREATED)
async def create_account(
    account: schemas.AccountCreate,
    repo: AccountRepository = Depends(get_repository),
):
    """Create a new account."""
    return await repo.create(account)


@router.get("/{account_id}", response_model=schemas.Account)
async def read_account(account_id: int, repo: AccountRepository = Depends(get_repository)):
    return await repo.get_or_raise(account_id)


@router.patch("/{account_id}", response_model=schemas.Account)
async def update_account(
    account_id: int,
    account: schemas.AccountUpdate,
    repo: AccountRepository = Depends(get_repository),
):
    """Rename, rebalance or restyle an account."""
    return await repo.update(account_id, account)


@router.get("/{account_id}/usage", response_model=schemas.AccountUsage)
async def check_account_usage(account_id: int, repo: AccountRepository = Depends(get_repository)):
    """
    Check whether an account can be deleted.

    ``reason`` is ``templates`` or ``costs`` when something still references it.
    """
    await repo.get_or_raise(account_id)
    return await repo.check_usage(account_id)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(account_id: int, repo: AccountRepository = Depends(get_repository)):
    """Delete an account nothing references. Fails with ``reference_conflict`` otherwise."""
    await repo.delete(account_id)
