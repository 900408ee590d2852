"""Database setup shared by the user and document tables."""

from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import settings

engine = create_engine(settings.database_url, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in timestamp columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def init_db() -> None:
    """Create database tables if they do not exist."""
    # models register themselves on Base.metadata at import
    from .models import document, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
