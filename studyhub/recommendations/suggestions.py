"""
Prompt building and best-effort parsing for AI study suggestions.

The text generator is asked to emit blocks of the form::

    Title: [Resource Title]
    Description: [Why this is recommended]
    Type: [video/document/interactive]
    Difficulty: [beginner/intermediate/advanced]
    Estimated Time: [reading/viewing time]
    Reasoning: [Specific reason for recommendation]

Parsing is tolerant: any field that cannot be found falls back to a default.
"""
from __future__ import annotations

import re
import time

from .models import RankingContext, Recommendation, RecommendationKind

FIELD_DEFAULTS: dict[str, str] = {
    "Description": "AI-generated learning suggestion",
    "Type": "document",
    "Difficulty": "intermediate",
    "Estimated Time": "10-15 minutes",
    "Reasoning": "AI recommendation based on your learning profile",
}

# Only a line-leading marker starts a block; list bullets and bold markup are allowed
_TITLE_MARKER = re.compile(r"^[ \t*#\d.)-]*Title:", re.IGNORECASE | re.MULTILINE)
_STRIP_CHARS = "[]* \t"
_FIELD_LINE = re.compile(
    "^(?:" + "|".join(re.escape(name) for name in FIELD_DEFAULTS) + r")\s*:",
    re.IGNORECASE,
)

PROMPT_TEMPLATE = """\
As an AI tutor, suggest 3-5 personalized learning resources for a {department} student in semester {semester}.

Context:
- Recent activities: {activities}
- Time of day: {time_of_day}
- Current focus: {current_course}

Please suggest resources that are:
1. Relevant to their current semester and department
2. Matched to their recent learning patterns
3. Varied in type (videos, documents, interactive content)
4. Progressively challenging

Format each suggestion as:
Title: [Resource Title]
Description: [Why this is recommended]
Type: [video/document/interactive]
Difficulty: [beginner/intermediate/advanced]
Estimated Time: [reading/viewing time]
Reasoning: [Specific reason for recommendation]"""


def build_ai_prompt(context: RankingContext) -> str:
    return PROMPT_TEMPLATE.format(
        department=context.department,
        semester=context.semester,
        activities=", ".join(context.recent_activity_types) or "none",
        time_of_day=context.time_of_day.value,
        current_course=context.current_course or "General studies",
    )


def extract_field(text: str, field_name: str) -> str | None:
    """Return the value after ``<field_name>:`` on its line, or ``None``."""
    match = re.search(rf"\b{re.escape(field_name)}:\s*\[?([^\]\n]+)\]?", text, re.IGNORECASE)
    if not match:
        return None
    value = match.group(1).strip(_STRIP_CHARS)
    return value or None


def _field(section: str, name: str) -> str:
    return extract_field(section, name) or FIELD_DEFAULTS[name]


def parse_ai_recommendations(
    text: str,
    context: RankingContext,
    max_items: int = 5,
    confidence: float = 0.75,
) -> list[Recommendation]:
    """Split generated text on ``Title:`` markers into at most ``max_items`` candidates."""
    # Anything before the first marker is preamble
    sections = [s for s in _TITLE_MARKER.split(text)[1:] if s.strip()]
    stamp = int(time.time() * 1000)

    recommendations: list[Recommendation] = []
    for i, section in enumerate(sections[:max_items]):
        lines = [line.strip() for line in section.splitlines() if line.strip()]
        title = lines[0].strip(_STRIP_CHARS) if lines else ""
        if _FIELD_LINE.match(title):
            title = ""
        content_type = _field(section, "Type")

        recommendations.append(Recommendation(
            id=f"ai-{stamp}-{i}",
            title=title or f"AI Suggestion {i + 1}",
            description=_field(section, "Description"),
            kind=RecommendationKind.ai_suggested,
            confidence=confidence,
            reasoning=_field(section, "Reasoning"),
            estimated_time=_field(section, "Estimated Time"),
            difficulty=_field(section, "Difficulty").lower(),
            tags=[context.department.lower(), f"semester-{context.semester}", content_type.lower()],
            popularity=0,
            ai_generated=True,
        ))
    return recommendations
