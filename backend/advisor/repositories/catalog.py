"""Read access to the shared resource catalog and the rows that join onto it."""

from __future__ import annotations

import json
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.models import ProgressModel, RatingModel, ResourceModel
from ..errors import NotFoundOrNotOwned


def search_resources(
    session: Session,
    *,
    tag: Optional[str] = None,
    locale: Optional[str] = None,
    type: Optional[str] = None,
    limit: int,
    offset: int = 0,
) -> List[ResourceModel]:
    stmt = select(ResourceModel)
    if tag:
        stmt = stmt.where(ResourceModel.tags.contains(json.dumps(tag), autoescape=True))
    if locale:
        stmt = stmt.where(ResourceModel.locale == locale)
    if type:
        stmt = stmt.where(ResourceModel.type == type)
    stmt = stmt.order_by(ResourceModel.created_at.desc(), ResourceModel.id.desc()).limit(limit).offset(offset)
    return list(session.execute(stmt).scalars().all())


def progress_with_resources(session: Session, user_id: str) -> List[Tuple[ProgressModel, Optional[ResourceModel]]]:
    stmt = (
        select(ProgressModel, ResourceModel)
        .outerjoin(ResourceModel, ProgressModel.resource_id == ResourceModel.id)
        .where(ProgressModel.user_id == user_id)
        .order_by(ProgressModel.updated_at.desc())
    )
    return [(entry, resource) for entry, resource in session.execute(stmt).all()]


def ratings_with_resources(session: Session, user_id: str) -> List[Tuple[RatingModel, ResourceModel]]:
    stmt = (
        select(RatingModel, ResourceModel)
        .join(ResourceModel, RatingModel.resource_id == ResourceModel.id)
        .where(RatingModel.user_id == user_id)
        .order_by(RatingModel.updated_at.desc())
    )
    return [(entry, resource) for entry, resource in session.execute(stmt).all()]


def require_resource(session: Session, resource_id: int) -> ResourceModel:
    """The catalog row for ``resource_id``; owned rows may only point at real resources."""
    resource = session.get(ResourceModel, resource_id)
    if resource is None:
        raise NotFoundOrNotOwned("Resource not found", code="RESOURCE_NOT_FOUND")
    return resource


__all__ = ["progress_with_resources", "ratings_with_resources", "require_resource", "search_resources"]
