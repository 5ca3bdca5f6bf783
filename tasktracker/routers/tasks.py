from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from tasktracker.database import get_db
from tasktracker.errors import UnauthorizedError
from tasktracker.models.user import User
from tasktracker.schemas.task import DeleteResult, TaskCreate, TaskOut, TaskStatusUpdate
from tasktracker.services import auth as auth_service
from tasktracker.services import tasks as task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the user from the claims SessionMiddleware already verified."""
    claims = getattr(request.state, "token_claims", None)
    if not claims:
        raise UnauthorizedError()
    return auth_service.resolve_user(db, claims)


@router.get("", response_model=List[TaskOut])
def list_tasks(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return task_service.list_tasks(db, user, user_id)


@router.post("", response_model=TaskOut)
def create_task(task: TaskCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return task_service.create_task(
        db,
        user,
        title=task.title,
        priority=task.priority,
        due_date=task.due_date,
        requested_user_id=task.user_id,
    )


@router.put("", response_model=TaskOut)
def update_task(update: TaskStatusUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return task_service.update_status(db, user, update.id, update.status, update.completed_at)


@router.delete("", response_model=DeleteResult)
def delete_task(
    task_id: Optional[str] = Query(None, alias="id"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task_service.delete_task(db, user, task_id)
    return {"success": True}
