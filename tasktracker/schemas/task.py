from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from tasktracker.models.task import TaskPriority, TaskStatus


class _CamelModel(BaseModel):
    # JSON uses camelCase (dueDate, userId); snake_case is accepted on input too
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreate(_CamelModel):
    title: str
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    user_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        if not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()

    @field_validator("due_date", mode="before")
    @classmethod
    def date_part_of_datetime(cls, v):
        """Browsers send dates as full ISO timestamps; keep only the calendar day."""
        if isinstance(v, str) and "T" in v:
            return datetime.fromisoformat(v).date()
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TaskStatusUpdate(_CamelModel):
    id: str
    status: TaskStatus
    completed_at: Optional[datetime] = None


class TaskOut(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    title: str
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    user_id: str
    created_at: datetime


class DeleteResult(BaseModel):
    success: bool = True
