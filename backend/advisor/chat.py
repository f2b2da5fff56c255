"""Keyword-driven career chat replies."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

FALLBACK_REPLY = (
    "Great question! Focus on consistent practice, feedback loops, and pick one project to apply your skills."
)

KEYWORD_REPLIES: Tuple[Tuple[str, str], ...] = (
    (
        "software",
        "Software engineering blends problem solving with building products. "
        "Start with Python/JS and data structures.",
    ),
    ("data", "Data roles value SQL, statistics, and storytelling. Practice with public datasets and Kaggle."),
    (
        "design",
        "UX/UI design needs user research, prototyping, and critique. Learn Figma and usability principles.",
    ),
)

_REPLIES: Dict[str, str] = dict(KEYWORD_REPLIES)


def matched_keyword(message: str) -> Optional[str]:
    # First matching keyword wins.
    text = message.lower()
    return next((keyword for keyword, _ in KEYWORD_REPLIES if keyword in text), None)


def reply(message: str) -> str:
    keyword = matched_keyword(message)
    return _REPLIES[keyword] if keyword else FALLBACK_REPLY


__all__ = ["FALLBACK_REPLY", "KEYWORD_REPLIES", "matched_keyword", "reply"]
