"""Pydantic schemas for monthly cost data validation."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from components.core.schemas import Amount, OptionalAmount


class CostCreate(BaseModel):
    """Schema for adding an ad-hoc item to the active period."""
    name: str = Field(..., min_length=1, max_length=100)
    amount: Amount = 0
    bank_account_id: int
    payment_date: datetime


class CostUpdate(BaseModel):
    """Schema for field-level cost edits."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    budget: OptionalAmount = None
    bank_account_id: Optional[int] = None
    payment_date: Optional[datetime] = None


class PaymentCreate(BaseModel):
    """Schema for paying a pending cost."""
    actual_amount: Amount = Field(..., ge=0)
    account_id: int
    paid_at: Optional[datetime] = None


class MonthlyCost(BaseModel):
    """Schema for monthly cost response."""
    id: int
    name: str
    budget: int
    bank_account_id: int
    temporary_account_id: Optional[int] = None
    payment_date: Optional[datetime] = None
    order: int
    status: str
    paid_at: Optional[datetime] = None
    actual_amount: Optional[int] = None
    salary_period_id: int

    class Config:
        from_attributes = True
