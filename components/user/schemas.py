"""Pydantic schemas for user data validation."""

from datetime import date
from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for user registration."""
    login: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class User(BaseModel):
    """Schema for user response."""
    id: int
    login: str
    registration_date: date

    class Config:
        from_attributes = True


class UserWithToken(User):
    """Schema for user response carrying a fresh access token."""
    access_token: str
    token_type: str = "bearer"
