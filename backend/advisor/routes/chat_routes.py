"""Rule-based career chat."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ..chat import matched_keyword, reply
from ..shaping import envelope
from .. import telemetry

router = APIRouter(prefix="/api/chat", tags=["chat"])


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=2000)


@router.post("")
def chat(request: ChatRequest) -> Dict[str, Any]:
    answer = reply(request.message)
    telemetry.chat_reply(request.message, matched_keyword(request.message))
    return envelope({"reply": answer})
