"""Health check endpoint for monitoring application status."""

from fastapi import APIRouter, Depends
from sqlalchemy import text

from components.core import schemas
from components.core.database import DatabaseManager
from components.core.init_db import get_db_manager

router = APIRouter(
    prefix="/health_check",
    tags=["services"],
    responses={200: {"description": "Service is healthy"}},
)


@router.get("/", response_model=schemas.HealthCheck)
async def health_check(db_manager: DatabaseManager = Depends(get_db_manager)) -> schemas.HealthCheck:
    """Check the health status of the service and its database."""
    async with db_manager.get_db() as session:
        await session.execute(text("SELECT 1"))
    return schemas.HealthCheck(
        service_name="BudgetFlow",
        status="healthy"
    )
