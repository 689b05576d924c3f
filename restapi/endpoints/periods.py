"""Salary period endpoints for the API."""

from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import DatabaseManager
from components.core.init_db import get_db, get_db_manager, get_feed
from components.core.realtime import ChangeFeed
from components.period.service import PeriodService
from components.period import schemas
from components.template.repository import TemplateRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/periods",
    tags=["periods"],
    responses={404: {"description": "Not found"}},
)


def get_service(
    db_manager: DatabaseManager = Depends(get_db_manager),
    feed: ChangeFeed = Depends(get_feed),
    current_user: User = Depends(get_current_user),
) -> PeriodService:
    return PeriodService(db_manager, current_user.id, feed)


@router.get("/", response_model=List[schemas.SalaryPeriod])
async def read_periods(service: PeriodService = Depends(get_service)):
    """Get all periods, newest first."""
    return await service.list_periods()


@router.get("/active", response_model=Optional[schemas.SalaryPeriod])
async def read_active_period(service: PeriodService = Depends(get_service)):
    """Get the active period, or null when none is running."""
    return await service.get_active()


@router.post("/", response_model=schemas.SalaryPeriod, status_code=status.HTTP_201_CREATED)
async def start_period(
    body: schemas.PeriodStart,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    service: PeriodService = Depends(get_service),
):
    """
    Start a new period.

    The previous active period, if any, is closed with end date = the new
    start date. One pending cost is created per template.
    """
    templates = None
    if body.template_ids is not None:
        repo = TemplateRepository(db, current_user.id)
        templates = [await repo.get_or_raise(template_id) for template_id in body.template_ids]
    return await service.start_new_period(body.start_date, templates)


@router.post("/active/close", response_model=schemas.SalaryPeriod)
async def close_period(
    body: Optional[schemas.PeriodClose] = None,
    service: PeriodService = Depends(get_service),
):
    """Archive every cost of the active period to history and close it."""
    summary = body.summary if body is not None else None
    return await service.close_period(summary)
