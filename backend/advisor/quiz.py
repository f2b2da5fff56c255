"""Skill quiz question bank and scoring."""

from __future__ import annotations

import random
from collections import Counter
from typing import Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

SKILLS = ("tech", "communication", "analysis", "leadership", "creativity")
DEFAULT_QUESTION_COUNT = 10
STRENGTH_COUNT = 3
WEAKNESS_COUNT = 2


class QuizOption(BaseModel):
    value: str
    label: str
    skill: str
    correct: bool = False


class QuizQuestion(BaseModel):
    id: str
    prompt: str
    options: List[QuizOption]

    def option(self, value: str) -> Optional[QuizOption]:
        return next((option for option in self.options if option.value == value), None)


class QuizResult(BaseModel):
    total: int
    correct: int
    score: int
    strengths: List[str]
    weaknesses: List[str]
    scores: Dict[str, int] = Field(default_factory=dict)
    language: str = "en"


def _question(qid: str, prompt: str, skill: str, correct: str, options: Sequence[tuple[str, str]]) -> QuizQuestion:
    return QuizQuestion(
        id=qid,
        prompt=prompt,
        options=[
            QuizOption(value=value, label=label, skill=skill, correct=value == correct)
            for value, label in options
        ],
    )


QUESTION_BANK: List[QuizQuestion] = [
    _question("q1", "Pick the data structure best for FIFO:", "tech", "queue", [
        ("stack", "Stack"), ("queue", "Queue"), ("tree", "Tree"), ("graph", "Graph"),
    ]),
    _question(
        "q2",
        "You must present a complex idea to a non-technical audience. What do you do first?",
        "communication",
        "story",
        [
            ("jargon", "Use industry jargon"),
            ("story", "Start with a simple story/analogy"),
            ("charts", "Show 10 charts immediately"),
            ("skip", "Skip context"),
        ],
    ),
    _question("q3", "Which SQL clause filters rows?", "analysis", "where", [
        ("select", "SELECT"), ("where", "WHERE"), ("group", "GROUP BY"), ("join", "JOIN"),
    ]),
    _question("q4", "A teammate is struggling. What's a good leadership approach?", "leadership", "coach", [
        ("ignore", "Ignore to build resilience"),
        ("micromanage", "Micromanage details"),
        ("coach", "Offer coaching and set clear goals"),
        ("blame", "Publicly blame the teammate"),
    ]),
    _question("q5", "Brainstorming aims to...", "creativity", "quantity", [
        ("criticize", "Criticize ideas early"),
        ("quantity", "Generate many ideas before judging"),
        ("solo", "Work strictly alone"),
        ("finalize", "Finalize the plan immediately"),
    ]),
    _question("q6", "Time complexity of binary search?", "tech", "ologn", [
        ("o1", "O(1)"), ("on", "O(n)"), ("ologn", "O(log n)"), ("on2", "O(n^2)"),
    ]),
    _question("q7", "Which helps avoid bias in analysis?", "analysis", "hypothesis", [
        ("cherrypick", "Cherry-pick supporting data"),
        ("hypothesis", "Form a hypothesis and attempt falsification"),
        ("assume", "Assume correlations imply causation"),
        ("ignoreOutliers", "Ignore outliers always"),
    ]),
    _question("q8", "Best way to give feedback?", "communication", "specific", [
        ("vague", "Be vague to be nice"),
        ("specific", "Be specific, timely, and actionable"),
        ("public", "Public criticism"),
        ("delay", "Wait months"),
    ]),
    _question("q9", "MVP stands for:", "creativity", "min", [
        ("least", "Least Viable Product"),
        ("min", "Minimum Viable Product"),
        ("most", "Most Valuable Product"),
        ("market", "Market Valuable Plan"),
    ]),
    _question("q10", "When delegating tasks, you should...", "leadership", "clarity", [
        ("vague2", "Keep goals vague"),
        ("clarity", "Clarify outcomes and autonomy"),
        ("oversee", "Oversee every minute"),
        ("noFollow", "Avoid follow-up"),
    ]),
    _question("q11", "APIs communicate over...", "tech", "http", [
        ("telepathy", "Telepathy"), ("http", "HTTP/HTTPS"), ("pdf", "PDF uploads"), ("sms", "SMS only"),
    ]),
    _question("q12", "Which encourages innovation?", "creativity", "psychSafety", [
        ("punish", "Punish all failure"),
        ("psychSafety", "Psychological safety and experiments"),
        ("copy", "Copy competitors only"),
        ("neverChange", "Never change process"),
    ]),
]

_BY_ID: Dict[str, QuizQuestion] = {question.id: question for question in QUESTION_BANK}


def get_question(question_id: str) -> Optional[QuizQuestion]:
    return _BY_ID.get(question_id)


def pick_questions(count: int = DEFAULT_QUESTION_COUNT, rng: Optional[random.Random] = None) -> List[QuizQuestion]:
    """Random selection of up to ``count`` distinct questions."""
    chooser = rng or random.Random()
    count = max(0, min(count, len(QUESTION_BANK)))
    return chooser.sample(QUESTION_BANK, count)


def score_answers(
    question_ids: Sequence[str],
    answers: Mapping[str, str],
    *,
    language: str = "en",
) -> QuizResult:
    """Score ``answers`` (question id -> chosen option value) for the asked questions.

    A correct choice adds 2 to the option's skill, any other choice adds 1.
    Unanswered or unknown questions still count toward ``total``.
    """
    scores: Counter[str] = Counter()
    correct = 0
    for question_id in question_ids:
        question = _BY_ID.get(question_id)
        if question is None:
            continue
        chosen = answers.get(question_id)
        option = question.option(chosen) if isinstance(chosen, str) else None
        if option is None:
            continue
        scores[option.skill] += 2 if option.correct else 1
        if option.correct:
            correct += 1

    total = len(question_ids)
    ranked = list(scores.items())
    strengths = [skill for skill, _ in sorted(ranked, key=lambda item: -item[1])[:STRENGTH_COUNT]]
    weaknesses = [skill for skill, _ in sorted(ranked, key=lambda item: item[1])[:WEAKNESS_COUNT]]
    score = round(correct / total * 100) if total else 0
    return QuizResult(
        total=total,
        correct=correct,
        score=score,
        strengths=strengths,
        weaknesses=weaknesses,
        scores=dict(scores),
        language=language,
    )


__all__ = [
    "DEFAULT_QUESTION_COUNT",
    "QUESTION_BANK",
    "QuizOption",
    "QuizQuestion",
    "QuizResult",
    "SKILLS",
    "get_question",
    "pick_questions",
    "score_answers",
]
