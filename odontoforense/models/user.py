"""User model definitions."""

import enum

from sqlalchemy import Column, Integer, String, func
from odontoforense.database import Base, UTCDateTime


class Role(str, enum.Enum):
    ADMIN = "admin"
    PERITO = "perito"
    ASSISTENTE = "assistente"


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.ASSISTENTE.value)
    created_at = Column(UTCDateTime, server_default=func.now())
