"""Per-resource completion tracking."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..auth import UserIdentity, current_user
from ..db.session import session_scope
from ..pipeline import validated_body
from ..repositories import progress_entries
from ..repositories.catalog import progress_with_resources, require_resource
from ..shaping import envelope, envelope_many, shape_progress
from ..validation import ProgressInput, validate_progress

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("")
def list_progress(user: UserIdentity = Depends(current_user)) -> Dict[str, Any]:
    with session_scope(commit=False) as session:
        rows = progress_with_resources(session, user.id)
        return envelope_many(shape_progress(entry, resource) for entry, resource in rows)


@router.post("")
def record_progress(
    payload: ProgressInput = Depends(validated_body(validate_progress)),
    user: UserIdentity = Depends(current_user),
) -> Dict[str, Any]:
    with session_scope() as session:
        resource = require_resource(session, payload.resource_id)
        model = progress_entries.upsert(
            session, user.id, {"completion": payload.completion}, secondary_key=payload.resource_id
        )
        return envelope(shape_progress(model, resource))
