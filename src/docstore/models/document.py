from sqlalchemy import Column, DateTime, Integer, String, Text

from ..database import Base, utcnow


class Document(Base):
    """Stored PDF document with its content encoded as text."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String, nullable=False)
    data = Column(Text, nullable=False)
    size = Column(Integer, nullable=False)
    mime_type = Column(String, nullable=False, default="application/pdf")
    created_at = Column(DateTime, nullable=False, default=utcnow)
    # no onupdate, update_document sets it explicitly
    updated_at = Column(DateTime, nullable=False, default=utcnow)
