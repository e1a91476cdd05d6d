"""Evidence model definitions."""

from sqlalchemy import Column, Integer, String, Text, func
from odontoforense.database import Base, UTCDateTime


class Evidence(Base):
    """Represents one collected item (file plus metadata) tied to a case."""
    __tablename__ = "evidence"

    id = Column(Integer, primary_key=True, index=True)
    case_id = Column(Integer, index=True, nullable=False)  # checked in the routes, no FK
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    collected_at = Column(UTCDateTime, nullable=False)
    description = Column(Text)
    collection_location = Column(String)
    file_url = Column(String)
    created_at = Column(UTCDateTime, server_default=func.now())
