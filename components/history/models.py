"""Fixed cost history record model for the database."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey

from components.core.database import Base

PAID = "paid"
SKIPPED = "skipped"
UNPAID = "unpaid"


class CostRecord(Base):
    """Archived outcome of a monthly cost, written when its period closes."""
    __tablename__ = "fixed_cost_records"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    amount = Column(Integer, nullable=False, default=0)
    budget = Column(Integer, nullable=False, default=0)
    bank_account_id = Column(Integer, nullable=False)
    status = Column(String(10), nullable=False)
    paid_at = Column(DateTime, nullable=False, index=True)
    salary_period_id = Column(Integer, nullable=False, index=True)  # Outlives the period row
    is_archived_item = Column(Boolean, nullable=False, default=True)
