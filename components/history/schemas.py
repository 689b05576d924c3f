"""Pydantic schemas for history data."""

from datetime import datetime
from typing import Dict, List
from pydantic import BaseModel


class CostRecord(BaseModel):
    """Schema for an archived cost."""
    id: int
    name: str
    amount: int
    budget: int
    bank_account_id: int
    status: str
    paid_at: datetime
    salary_period_id: int
    is_archived_item: bool

    class Config:
        from_attributes = True


class MonthlyRecord(BaseModel):
    """Paid totals of one calendar month."""
    month: str  # YYYY/MM
    total: int
    costs: Dict[str, int]


class HistoryReport(BaseModel):
    """Schema for the history page."""
    records: List[CostRecord]
    months: List[MonthlyRecord]
