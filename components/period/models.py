"""Salary period model for the database."""

from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey

from components.core.database import Base

ACTIVE = "active"
CLOSED = "closed"


class SalaryPeriod(Base):
    """One monthly budgeting cycle. At most one per user is active."""
    __tablename__ = "salary_periods"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    status = Column(String(10), nullable=False, default=ACTIVE)
    last_summary = Column(JSON, nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
