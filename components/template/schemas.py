"""Pydantic schemas for template data validation."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from components.core.schemas import Amount, OptionalAmount


class TemplateBase(BaseModel):
    """Base template schema."""
    name: str = Field(..., min_length=1, max_length=100)
    default_budget: Amount = 0
    bank_account_id: int
    payment_day: int = Field(..., ge=1, le=31)


class TemplateCreate(TemplateBase):
    """Schema for template creation."""
    pass


class TemplateUpdate(BaseModel):
    """Schema for template update."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    default_budget: OptionalAmount = None
    bank_account_id: Optional[int] = None
    payment_day: Optional[int] = Field(None, ge=1, le=31)


class Template(TemplateBase):
    """Schema for template response."""
    id: int
    order: int
    is_archived: bool
    updated_at: datetime

    class Config:
        from_attributes = True


class TemplateReorder(BaseModel):
    """New display order, given as the full list of template ids."""
    template_ids: List[int]
