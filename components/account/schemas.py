"""Pydantic schemas for account data validation."""

from typing import Optional
from pydantic import BaseModel, Field

from components.core.schemas import Amount, OptionalAmount


class AccountBase(BaseModel):
    """Base account schema."""
    name: str = Field(..., min_length=1, max_length=100)
    balance: Amount = 0
    color: str = "bg-primary"
    icon: str = "account_balance"


class AccountCreate(AccountBase):
    """Schema for account creation."""
    trend: float = 0.0


class AccountUpdate(BaseModel):
    """Schema for account update. Omitted fields are left untouched."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    balance: OptionalAmount = None
    color: Optional[str] = None
    icon: Optional[str] = None
    trend: Optional[float] = None


class Account(AccountBase):
    """Schema for account response."""
    id: int
    trend: float

    class Config:
        from_attributes = True


class AccountUsage(BaseModel):
    """Result of the deletion guard."""
    can_delete: bool
    reason: Optional[str] = None
