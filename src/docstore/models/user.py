from sqlalchemy import Column, Integer, String

from ..database import Base


class User(Base):
    """SQLAlchemy model for application users."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False)
    # stored as given, callers hash before persisting
    password = Column(String, nullable=False)
