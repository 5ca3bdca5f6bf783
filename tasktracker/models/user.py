import uuid
from datetime import datetime, UTC

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from tasktracker.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_id)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    # bcrypt hash, never the plaintext
    password = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    tasks = relationship("Task", back_populates="owner", cascade="all, delete-orphan")
