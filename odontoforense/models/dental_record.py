"""Dental record bank model definitions."""

from sqlalchemy import Column, Date, Integer, String, Text, func
from odontoforense.database import Base, UTCDateTime


class DentalRecord(Base):
    """Reference dental record used for comparison against evidence."""
    __tablename__ = "dental_records"

    id = Column(Integer, primary_key=True, index=True)
    subject_name = Column(String, nullable=False)
    sex = Column(String)
    birth_date = Column(Date)
    identification_document = Column(String, index=True)
    dental_chart = Column(Text, nullable=False)
    notes = Column(Text)
    created_at = Column(UTCDateTime, server_default=func.now())
