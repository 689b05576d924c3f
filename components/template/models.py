"""Fixed cost template model for the database."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey

from components.core.database import Base


class Template(Base):
    """Recurring fixed cost used to seed every new period."""
    __tablename__ = "fixed_cost_templates"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    default_budget = Column(Integer, nullable=False, default=0)
    bank_account_id = Column(Integer, nullable=False, index=True)
    payment_day = Column(Integer, nullable=False)  # Day of month, 1-31
    order = Column(Integer, nullable=False, default=0)
    is_archived = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime, nullable=False)
