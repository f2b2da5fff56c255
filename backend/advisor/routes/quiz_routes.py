"""Public quiz endpoints: draw questions and score answers."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..quiz import DEFAULT_QUESTION_COUNT, QUESTION_BANK, pick_questions, score_answers
from ..shaping import envelope

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


class ScoreRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    question_ids: List[str] = Field(min_length=1)
    answers: Dict[str, str] = Field(default_factory=dict)
    language: str = "en"


@router.get("")
def draw_questions(
    count: int = Query(default=DEFAULT_QUESTION_COUNT, ge=1, le=len(QUESTION_BANK)),
) -> Dict[str, Any]:
    questions = pick_questions(count)
    return envelope(
        [
            {
                "id": question.id,
                "prompt": question.prompt,
                "options": [{"value": option.value, "label": option.label} for option in question.options],
            }
            for question in questions
        ]
    )


@router.post("/score")
def score_quiz(request: ScoreRequest) -> Dict[str, Any]:
    result = score_answers(request.question_ids, request.answers, language=request.language)
    return envelope(result)
