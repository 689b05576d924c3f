"""Pydantic schemas for salary period data validation."""

from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel


class PeriodStart(BaseModel):
    """
    Schema for starting a period.

    When ``template_ids`` is omitted every active template is used.
    """
    start_date: datetime
    template_ids: Optional[List[int]] = None


class PeriodClose(BaseModel):
    """Schema for closing the active period."""
    summary: Optional[Any] = None


class SalaryPeriod(BaseModel):
    """Schema for salary period response."""
    id: int
    start_date: datetime
    end_date: Optional[datetime] = None
    status: str
    last_summary: Optional[Any] = None

    class Config:
        from_attributes = True
