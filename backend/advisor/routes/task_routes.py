"""Owner-scoped task CRUD."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ..auth import UserIdentity, current_user
from ..db.session import session_scope
from ..errors import NotFoundOrNotOwned
from ..pipeline import get_today, reject_owner_body, validated_body
from ..repositories import tasks
from ..shaping import envelope, shape_task
from ..validation import TaskBatch, parse_task_id, validate_task_create, validate_task_query, validate_task_update

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

TASK_NOT_FOUND = "Task not found or not owned by user"


def task_id_param(
    user: UserIdentity = Depends(current_user),
    owner_keys: None = Depends(reject_owner_body),
    id: Optional[str] = Query(default=None),
) -> int:
    return parse_task_id(id)


@router.get("")
def list_tasks(
    user: UserIdentity = Depends(current_user),
    today: date = Depends(get_today),
    due_date: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    offset: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    query = validate_task_query(due_date=due_date, limit=limit, offset=offset)
    with session_scope(commit=False) as session:
        rows = tasks.list_for_user(
            session, user.id, due_on=query.due_on(today), limit=query.limit, offset=query.offset
        )
        return envelope([shape_task(row) for row in rows])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_tasks(
    batch: TaskBatch = Depends(validated_body(validate_task_create)),
    user: UserIdentity = Depends(current_user),
) -> Dict[str, Any]:
    with session_scope() as session:
        created = tasks.create_many(session, user.id, [task.model_dump() for task in batch.tasks])
        shaped = [shape_task(row) for row in created]
    return envelope(shaped if batch.many else shaped[0])


@router.patch("")
def update_task(
    task_id: int = Depends(task_id_param),
    updates: Dict[str, Any] = Depends(validated_body(validate_task_update)),
    user: UserIdentity = Depends(current_user),
) -> Dict[str, Any]:
    with session_scope() as session:
        model = tasks.update(session, user.id, task_id, updates)
        if model is None:
            raise NotFoundOrNotOwned(TASK_NOT_FOUND, code="TASK_NOT_FOUND")
        return envelope(shape_task(model))


@router.delete("")
def delete_task(
    task_id: int = Depends(task_id_param),
    user: UserIdentity = Depends(current_user),
) -> Dict[str, Any]:
    with session_scope() as session:
        model = tasks.delete(session, user.id, task_id)
        if model is None:
            raise NotFoundOrNotOwned(TASK_NOT_FOUND, code="TASK_NOT_FOUND")
        return envelope(shape_task(model))
