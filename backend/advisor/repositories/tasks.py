"""Task persistence."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from ..db.models import TaskModel
from .owned_resources import OwnedResourceStore


class TaskStore(OwnedResourceStore[TaskModel]):
    def __init__(self) -> None:
        super().__init__(TaskModel, key_fields=())

    def list_for_user(
        self,
        session: Session,
        user_id: str,
        *,
        due_on: Optional[date] = None,
        limit: int,
        offset: int = 0,
    ) -> List[TaskModel]:
        # The due-date filter is part of the query, so a page is never emptied
        # by tasks due on other days.
        where = [TaskModel.due_date == due_on] if due_on is not None else []
        return self.list(
            session,
            user_id,
            where=where,
            order_by=[TaskModel.created_at.desc(), TaskModel.id.desc()],
            limit=limit,
            offset=offset,
        )


tasks = TaskStore()

__all__ = ["TaskStore", "tasks"]
