"""Monthly cost and ledger endpoints for the API."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import DatabaseManager
from components.core.init_db import get_db, get_db_manager, get_feed
from components.core.realtime import ChangeFeed
from components.cost.ledger import LedgerService
from components.cost.repository import CostRepository
from components.cost import schemas
from components.period.repository import PeriodRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/costs",
    tags=["costs"],
    responses={404: {"description": "Not found"}},
)


def get_repository(
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_feed),
    current_user: User = Depends(get_current_user),
) -> CostRepository:
    return CostRepository(db, current_user.id, feed)


def get_ledger(
    db_manager: DatabaseManager = Depends(get_db_manager),
    feed: ChangeFeed = Depends(get_feed),
    current_user: User = Depends(get_current_user),
) -> LedgerService:
    return LedgerService(db_manager, current_user.id, feed)


@router.get("/", response_model=List[schemas.MonthlyCost])
async def read_costs(
    period_id: Optional[int] = Query(None, description="Period to list (defaults to the active one)"),
    repo: CostRepository = Depends(get_repository),
):
    """Get the costs of a period ordered by payment date."""
    if period_id is None:
        active = await PeriodRepository(repo.session, repo.user_id).get_active()
        if active is None:
            return []
        period_id = active.id
    return await repo.list_for_period(period_id)


@router.post("/", response_model=schemas.MonthlyCost, status_code=status.HTTP_201_CREATED)
async def add_item(item: schemas.CostCreate, repo: CostRepository = Depends(get_repository)):
    """Add an ad-hoc item to the active period."""
    return await repo.add_item(item)


@router.patch("/{cost_id}", response_model=schemas.MonthlyCost)
async def update_item(
    cost_id: int,
    updates: schemas.CostUpdate,
    repo: CostRepository = Depends(get_repository),
):
    return await repo.update_item(cost_id, updates)


@router.delete("/{cost_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(cost_id: int, repo: CostRepository = Depends(get_repository)):
    """Remove a cost. No balance is reverted."""
    await repo.delete_item(cost_id)


@router.post("/{cost_id}/pay", response_model=schemas.MonthlyCost)
async def pay_cost(
    cost_id: int,
    payment: schemas.PaymentCreate,
    ledger: LedgerService = Depends(get_ledger),
):
    """
    Pay a pending cost from an account.

    Errors carry the code ``not_found``, ``invalid_state`` or
    ``insufficient_funds``; none of them changes any balance.
    """
    return await ledger.pay_cost(cost_id, payment.actual_amount, payment.account_id, payment.paid_at)


@router.post("/{cost_id}/cancel-payment", response_model=schemas.MonthlyCost)
async def cancel_payment(cost_id: int, ledger: LedgerService = Depends(get_ledger)):
    """Revert a payment and refund the account that was charged."""
    return await ledger.cancel_payment(cost_id)


@router.post("/{cost_id}/skip", response_model=schemas.MonthlyCost)
async def skip_cost(cost_id: int, repo: CostRepository = Depends(get_repository)):
    return await repo.skip(cost_id)


@router.post("/{cost_id}/unskip", response_model=schemas.MonthlyCost)
async def unskip_cost(cost_id: int, repo: CostRepository = Depends(get_repository)):
    return await repo.unskip(cost_id)
