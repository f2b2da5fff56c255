"""Read-only resource catalog."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ..auth import UserIdentity, current_user
from ..db.session import session_scope
from ..repositories.catalog import search_resources
from ..shaping import envelope_many, shape_resource
from ..validation import validate_resource_query

router = APIRouter(prefix="/api/resources", tags=["resources"])


@router.get("")
def list_resources(
    user: UserIdentity = Depends(current_user),
    tag: Optional[str] = Query(default=None),
    locale: Optional[str] = Query(default=None),
    type: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    offset: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    query = validate_resource_query(tag=tag, locale=locale, type=type, limit=limit, offset=offset)
    with session_scope(commit=False) as session:
        rows = search_resources(
            session,
            tag=query.tag,
            locale=query.locale,
            type=query.type,
            limit=query.limit,
            offset=query.offset,
        )
        return envelope_many(shape_resource(row) for row in rows)
