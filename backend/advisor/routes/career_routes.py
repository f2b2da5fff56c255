"""Public career suggestions and daily task templates."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query

from ..careers import generate_daily_tasks, pick_careers
from ..shaping import envelope

router = APIRouter(prefix="/api/careers", tags=["careers"])


@router.get("")
def list_careers(strength: Optional[str] = Query(default=None)) -> Dict[str, Any]:
    return envelope(pick_careers(strength))


@router.get("/daily-tasks")
def daily_tasks(
    strengths: Optional[List[str]] = Query(default=None),
    weaknesses: Optional[List[str]] = Query(default=None),
) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    if strengths is not None:
        result["strengths"] = strengths
    if weaknesses is not None:
        result["weaknesses"] = weaknesses
    return envelope(generate_daily_tasks(result or None))
