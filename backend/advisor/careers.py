"""Static career mapping, daily task templates and badges."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel

DEFAULT_STRENGTH = "tech"
DEFAULT_WEAKNESSES = ("analysis", "communication")
DEFAULT_STRENGTHS = ("tech", "creativity")


class CareerResource(BaseModel):
    title: str
    url: str


class CareerPath(BaseModel):
    title: str
    skills: List[str]
    resources: List[CareerResource]


def _career(title: str, skills: Sequence[str], resources: Sequence[tuple[str, str]]) -> CareerPath:
    return CareerPath(
        title=title,
        skills=list(skills),
        resources=[CareerResource(title=name, url=url) for name, url in resources],
    )


CAREER_MAP: Dict[str, List[CareerPath]] = {
    "tech": [
        _career(
            "Software Engineer",
            ["tech", "analysis", "communication"],
            [
                ("Intro to Algorithms", "https://cs50.harvard.edu/"),
                ("Frontend Handbook", "https://frontendmasters.com/books/front-end-handbook/2019/"),
            ],
        ),
        _career(
            "Data Analyst",
            ["analysis", "tech", "communication"],
            [
                ("SQL Tutorial", "https://www.sqltutorial.org/"),
                ("Data Visualization", "https://www.tableau.com/learn/training"),
            ],
        ),
    ],
    "creativity": [
        _career(
            "Product Designer",
            ["creativity", "communication", "analysis"],
            [
                ("Design Basics", "https://www.coursera.org/specializations/graphic-design"),
                ("Figma Learn", "https://help.figma.com/hc/en-us/articles/360040514733-Learn-design"),
            ],
        ),
    ],
    "leadership": [
        _career(
            "Team Lead",
            ["leadership", "communication"],
            [
                ("Situational Leadership", "https://www.coursera.org/learn/leadership-skills"),
                ("Crucial Conversations", "https://www.vitalsmarts.com/"),
            ],
        ),
    ],
}

TASK_LIBRARY: Dict[str, List[str]] = {
    "tech": ["Solve 2 easy DS/Algo problems", "Read 5 pages of CS fundamentals", "Practice 20 mins of coding"],
    "analysis": [
        "Write 3 SQL queries on dummy data",
        "Explain one chart insight in 3 lines",
        "Review a dataset for outliers",
    ],
    "communication": [
        "Summarize an article in 5 bullet points",
        "Record a 1-min clarity pitch",
        "Give specific feedback on a topic",
    ],
    "creativity": ["Sketch 3 alternative UI ideas", "Brainstorm 10 ideas quickly", "Remix a feature from a favorite app"],
    "leadership": ["Set one clear goal with metrics", "Coach a peer for 10 mins", "Delegate a small task with outcomes"],
}


class DailyTask(BaseModel):
    label: str
    skill: str
    done: bool = False


def _as_list(result: Optional[Mapping[str, Any]], key: str) -> Optional[List[str]]:
    if not result:
        return None
    value = result.get(key)
    return [str(item) for item in value] if isinstance(value, list) else None


def pick_careers(strength: Optional[str]) -> List[CareerPath]:
    return CAREER_MAP.get(strength or DEFAULT_STRENGTH) or CAREER_MAP[DEFAULT_STRENGTH]


def careers_for_result(result: Optional[Mapping[str, Any]]) -> List[CareerPath]:
    strengths = _as_list(result, "strengths") or []
    return pick_careers(strengths[0] if strengths else None)


def generate_daily_tasks(result: Optional[Mapping[str, Any]] = None) -> List[DailyTask]:
    """Two tasks for the weakest skills plus one for the top strength."""
    weaknesses = _as_list(result, "weaknesses")
    strengths = _as_list(result, "strengths")
    if weaknesses is None:
        weaknesses = list(DEFAULT_WEAKNESSES)
    if strengths is None:
        strengths = list(DEFAULT_STRENGTHS)

    tasks = [
        DailyTask(label=TASK_LIBRARY.get(skill, TASK_LIBRARY["analysis"])[0], skill=skill)
        for skill in weaknesses[:2]
    ]
    strength = strengths[0] if strengths else DEFAULT_STRENGTH
    tasks.append(DailyTask(label=TASK_LIBRARY.get(strength, TASK_LIBRARY["tech"])[1], skill=strength))
    return tasks


def compute_badges(result: Optional[Mapping[str, Any]], chat_count: int = 0) -> List[str]:
    badges: List[str] = []
    result = result or {}
    if (result.get("score") or 0) >= 60:
        badges.append("Skill Sprinter")
    if (result.get("correct") or 0) >= 8:
        badges.append("Top Scorer")
    if chat_count >= 3:
        badges.append("Curious Learner")
    return badges


__all__ = [
    "CAREER_MAP",
    "CareerPath",
    "CareerResource",
    "DailyTask",
    "TASK_LIBRARY",
    "careers_for_result",
    "compute_badges",
    "generate_daily_tasks",
    "pick_careers",
]
