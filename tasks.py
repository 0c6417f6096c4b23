"""Task CRUD scoped to the owning user.

Every lookup filters on both the task id and the owner id, so a task that
belongs to someone else raises the same NotFoundError as a missing one.
"""

import logging
from dataclasses import dataclass
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from errors import NotFoundError
from models import Task, utcnow
from query import TaskQuery, total_pages
from schemas import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"

# Largest id an INTEGER primary key can hold
MAX_TASK_ID = 2 ** 63 - 1


@dataclass
class TaskPage:
    items: List[Task]
    total: int
    page: int
    limit: int

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_tasks(db: Session, query: TaskQuery) -> TaskPage:
    # Owner filter is always applied
    q = db.query(Task).filter(Task.owner_id == query.owner_id)

    if query.search:
        pattern = f"%{_escape_like(query.search)}%"
        q = q.filter(or_(
            Task.title.ilike(pattern, escape="\\"),
            Task.description.ilike(pattern, escape="\\"),
        ))

    if query.status is not None:
        q = q.filter(Task.status == query.status.value)

    total = q.count()
    if query.offset >= total:
        return TaskPage(items=[], total=total, page=query.page, limit=query.limit)

    for field, descending in query.order:
        column = getattr(Task, field)
        q = q.order_by(column.desc() if descending else column.asc())

    items = q.offset(query.offset).limit(query.limit).all()
    return TaskPage(items=items, total=total, page=query.page, limit=query.limit)


def get_task(db: Session, owner_id: int, task_id: int) -> Task:
    if not 1 <= task_id <= MAX_TASK_ID:
        raise NotFoundError(TASK_NOT_FOUND)
    task = db.query(Task).filter(
        Task.id == task_id,
        Task.owner_id == owner_id
    ).first()
    if task is None:
        raise NotFoundError(TASK_NOT_FOUND)
    return task


def create_task(db: Session, owner_id: int, payload: TaskCreate) -> Task:
    task = Task(
        title=payload.title,
        description=payload.description or "",
        status=payload.status.value,
        owner_id=owner_id,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("User %s created task %s", owner_id, task.id)
    return task


def update_task(db: Session, owner_id: int, task_id: int, payload: TaskUpdate) -> Task:
    task = get_task(db, owner_id, task_id)

    for field, value in payload.changes().items():
        setattr(task, field, value)
    task.updated_at = utcnow()

    db.commit()
    db.refresh(task)
    logger.info("User %s updated task %s", owner_id, task.id)
    return task


def delete_task(db: Session, owner_id: int, task_id: int) -> None:
    task = get_task(db, owner_id, task_id)
    db.delete(task)
    db.commit()
    logger.info("User %s deleted task %s", owner_id, task_id)
