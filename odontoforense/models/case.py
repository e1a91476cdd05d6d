"""Forensic case model definitions."""

from sqlalchemy import Column, Integer, String, Text, func
from odontoforense.database import Base, UTCDateTime

CASE_STATUSES = ("em_andamento", "finalizado", "arquivado")


class Case(Base):
    """Represents a forensic investigation grouping evidence and reports."""
    __tablename__ = "cases"

    id = Column(Integer, primary_key=True, index=True)
    case_number = Column(String, unique=True, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text)
    status = Column(String, nullable=False, default="em_andamento")
    location = Column(String)
    opened_at = Column(UTCDateTime)
    created_at = Column(UTCDateTime, server_default=func.now())
