"""Task CRUD scoped to the authenticated user.

The acting user always comes from the verified session. A ``user_id`` sent by
the client is only checked against it, never trusted on its own.
"""
import logging
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tasktracker.errors import BadRequestError, ForbiddenError, InternalError, NotFoundError
from tasktracker.models.task import Task, TaskStatus
from tasktracker.models.user import User

logger = logging.getLogger(__name__)


def _check_scope(user: User, requested_user_id: Optional[str]):
    if requested_user_id is not None and requested_user_id != user.id:
        raise ForbiddenError("Not allowed to access another user's tasks")


def _get_owned(db: Session, user: User, task_id: str, action: str) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    if task.user_id != user.id:
        raise ForbiddenError(f"Not allowed to {action} this task")
    return task


def _naive_utc(value: datetime) -> datetime:
    # naive input is taken to be UTC already
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def _commit(db: Session, failure: str):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(failure)
        raise InternalError(failure)


def list_tasks(db: Session, user: User, requested_user_id: Optional[str] = None):
    _check_scope(user, requested_user_id)
    try:
        return (
            db.query(Task)
            .filter(Task.user_id == user.id)
            .order_by(Task.created_at.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to fetch tasks")
        raise InternalError("Failed to fetch tasks")


def create_task(db: Session, user: User, title, priority, due_date=None, requested_user_id=None):
    _check_scope(user, requested_user_id)
    task = Task(
        title=title,
        status=TaskStatus.PENDING,
        priority=priority,
        due_date=due_date,
        user_id=user.id,
    )
    db.add(task)
    _commit(db, "Failed to create task")
    db.refresh(task)
    return task


def update_status(db: Session, user: User, task_id: str, status: TaskStatus,
                  completed_at: Optional[datetime] = None):
    """Set the status; ``completed_at`` is stamped on completion and cleared on reopen.

    Timestamps are stored as naive UTC. Re-completing a completed task without
    a timestamp keeps the original completion time.
    """
    task = _get_owned(db, user, task_id, "update")
    if status == TaskStatus.COMPLETED:
        if completed_at is not None:
            task.completed_at = _naive_utc(completed_at)
        elif task.status != TaskStatus.COMPLETED or task.completed_at is None:
            task.completed_at = _naive_utc(datetime.now(UTC))
    else:
        task.completed_at = None
    task.status = status
    _commit(db, "Failed to update task")
    db.refresh(task)
    return task


def delete_task(db: Session, user: User, task_id: Optional[str]):
    if not task_id:
        raise BadRequestError("Task ID is required")
    task = _get_owned(db, user, task_id, "delete")
    db.delete(task)
    _commit(db, "Failed to delete task")
