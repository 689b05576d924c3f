"""Monthly fixed cost model for the database."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from components.core.database import Base

PENDING = "pending"
PAID = "paid"
SKIPPED = "skipped"


class MonthlyCost(Base):
    """A period's concrete instance of a fixed cost."""
    __tablename__ = "monthly_fixed_costs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    budget = Column(Integer, nullable=False, default=0)
    bank_account_id = Column(Integer, nullable=False, index=True)
    temporary_account_id = Column(Integer, nullable=True, index=True)  # Account actually debited
    payment_date = Column(DateTime, nullable=True)
    order = Column(Integer, nullable=False, default=0)
    status = Column(String(10), nullable=False, default=PENDING)
    paid_at = Column(DateTime, nullable=True)
    actual_amount = Column(Integer, nullable=True)
    salary_period_id = Column(Integer, ForeignKey("salary_periods.id"), nullable=False, index=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
