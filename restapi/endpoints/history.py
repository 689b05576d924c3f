"""History endpoints for the API."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.init_db import get_db
from components.history.repository import HistoryRepository
from components.history.reports import group_by_month, latest_months
from components.history import schemas
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/history",
    tags=["history"],
)


@router.get("/", response_model=schemas.HistoryReport)
async def read_history(
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Number of most recent records"),
    months: int = Query(6, ge=1, le=120, description="Number of months in the summary"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Get the most recent archived costs and their monthly summary.

    The summary only counts paid records and lists months newest first.
    """
    repo = HistoryRepository(db, current_user.id)
    records = await repo.get_recent(limit or get_settings().HISTORY_DEFAULT_LIMIT)
    return schemas.HistoryReport(
        records=[schemas.CostRecord.model_validate(record) for record in records],
        months=latest_months(records, months),
    )


@router.get("/monthly", response_model=List[schemas.MonthlyRecord])
async def read_monthly_summary(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get paid totals per month over the most recent records."""
    repo = HistoryRepository(db, current_user.id)
    records = await repo.get_recent(limit or get_settings().HISTORY_DEFAULT_LIMIT)
    return group_by_month(records)
