"""Bank account model for the database."""

from sqlalchemy import Column, Integer, String, Float, ForeignKey

from components.core.database import Base


class Account(Base):
    """Balance-bearing account the fixed costs are paid from."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    balance = Column(Integer, nullable=False, default=0)
    color = Column(String(50), nullable=False, default="bg-primary")
    icon = Column(String(50), nullable=False, default="account_balance")
    trend = Column(Float, nullable=False, default=0.0)  # Cosmetic, set by the user
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
