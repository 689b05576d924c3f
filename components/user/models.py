"""User model for the database."""

from sqlalchemy import Column, Integer, String, Date

from components.core.database import Base


class User(Base):
    """User owning accounts, templates, periods and history."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    login = Column(String(50), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # Hashed password
    registration_date = Column(Date, nullable=False)
    periods_started = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
