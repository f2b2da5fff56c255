"""Shared FastAPI dependencies for the owned-resource endpoints.

Every mutating request runs authenticate -> decode body -> validate before any
storage call. Authentication is resolved first so an anonymous caller always
gets 401, even when the body is also invalid.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Callable, TypeVar

from fastapi import Depends, Request

from .auth import UserIdentity, current_user
from .config import Settings, get_settings
from .errors import ValidationFailed
from .streaks import today_in
from .validation import reject_owner_keys

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def read_json_body(request: Request) -> Any:
    raw = await request.body()
    try:
        return json.loads(raw)
    except ValueError as exc:
        logger.debug("Rejected undecodable body on %s: %s", request.url.path, exc)
        raise ValidationFailed("INVALID_JSON", "Invalid JSON in request body") from exc


def validated_body(validator: Callable[[Any], T]) -> Callable[..., Any]:
    """Build a dependency that authenticates, decodes the body and runs ``validator``."""

    async def dependency(request: Request, user: UserIdentity = Depends(current_user)) -> T:
        body = await read_json_body(request)
        return validator(body)

    dependency.__name__ = f"validated_{getattr(validator, '__name__', 'body')}"
    return dependency


async def reject_owner_body(request: Request, user: UserIdentity = Depends(current_user)) -> None:
    """Refuse owner keys in an object body ahead of query-parameter checks.

    Undecodable bodies pass through; the body validator reports them later.
    """
    try:
        body = json.loads(await request.body())
    except ValueError:
        return
    if isinstance(body, dict):
        reject_owner_keys(body)


def get_today(settings: Settings = Depends(get_settings)) -> date:
    return today_in(settings.timezone)


__all__ = ["get_today", "read_json_body", "reject_owner_body", "validated_body"]
