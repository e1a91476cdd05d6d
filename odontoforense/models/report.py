"""Report (laudo) model definitions."""

from sqlalchemy import Boolean, Column, Integer, String, Text, func
from odontoforense.database import Base, UTCDateTime


class Report(Base):
    """Represents a technical report written for a case."""
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    case_id = Column(Integer, index=True, nullable=False)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    author = Column(String)
    generated_by_ai = Column(Boolean, default=False, nullable=False)
    created_at = Column(UTCDateTime, server_default=func.now())
