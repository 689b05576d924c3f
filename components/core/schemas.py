"""Core schemas for the application."""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator


def coerce_amount(value: Any) -> int:
    """
    Turn form input into an integer amount.

    Thousands separators are accepted ("12,000"); anything that is not a
    number becomes 0 instead of being rejected.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    text = str(value).replace(",", "").strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return 0


Amount = Annotated[int, BeforeValidator(coerce_amount)]
OptionalAmount = Annotated[Optional[int], BeforeValidator(lambda v: None if v is None else coerce_amount(v))]


class HealthCheck(BaseModel):
    """Schema for health check response."""
    service_name: str
    status: str


class Problem(BaseModel):
    """Schema for error responses."""
    type: str = "about:blank"
    title: str
    status: int
    code: str
    detail: str
    reason: Optional[str] = None
