import enum
from datetime import datetime, UTC

from sqlalchemy import Column, String, ForeignKey, Date, DateTime, Enum
from sqlalchemy.orm import relationship
from tasktracker.database import Base
from tasktracker.models.user import _new_id


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _enum_values(cls):
    return [member.value for member in cls]


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(32), primary_key=True, default=_new_id)
    title = Column(String, nullable=False)
    status = Column(
        Enum(TaskStatus, values_callable=_enum_values, native_enum=False),
        default=TaskStatus.PENDING,
        nullable=False,
    )
    priority = Column(
        Enum(TaskPriority, values_callable=_enum_values, native_enum=False),
        default=TaskPriority.MEDIUM,
        nullable=False,
    )
    due_date = Column(Date, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    user_id = Column(String(32), ForeignKey("users.id"), index=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False, index=True)

    owner = relationship("User", back_populates="tasks")
