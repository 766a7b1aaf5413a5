"""Data models for productivity insights.

The insights service is a black box returning loosely typed JSON. Everything
it returns passes through parse_insight_report(), which accepts only the
fixed schema:

    {
      "insights": [{"title": str, "description": str,
                    "category": "focus" | "momentum" | "quality"}, ...],
      "overallScore": number in [0, 100],
      "verdict": str
    }
"""

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import InsightsSchemaError

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class InsightCategory(Enum):
    """Area an insight is about."""

    FOCUS = "focus"
    MOMENTUM = "momentum"
    QUALITY = "quality"


@dataclass(frozen=True)
class Note:
    """A note given to the insights service as context."""

    title: str
    content: str
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        """Create from a stored note record."""
        return cls(
            title=str(data.get("title", "")),
            content=str(data.get("content", "")),
            tags=[str(t) for t in data.get("tags", []) or []],
        )


@dataclass(frozen=True)
class Insight:
    """One actionable observation."""

    title: str
    description: str
    category: InsightCategory


@dataclass(frozen=True)
class InsightReport:
    """Validated result of an insights request."""

    insights: list[Insight]
    overall_score: float
    verdict: str

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the wire schema."""
        return {
            "insights": [
                {
                    "title": i.title,
                    "description": i.description,
                    "category": i.category.value,
                }
                for i in self.insights
            ],
            "overallScore": self.overall_score,
            "verdict": self.verdict,
        }


def _require_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InsightsSchemaError(f"{where}.{key} must be a non-empty string")
    return value.strip()


def _parse_insight(item: Any, index: int) -> Insight:
    where = f"insights[{index}]"
    if not isinstance(item, dict):
        raise InsightsSchemaError(f"{where} must be an object")

    raw_category = _require_str(item, "category", where).lower()
    try:
        category = InsightCategory(raw_category)
    except ValueError as e:
        raise InsightsSchemaError(f"{where}.category {raw_category!r} is not one of "
                                  "focus, momentum, quality") from e

    return Insight(
        title=_require_str(item, "title", where),
        description=_require_str(item, "description", where),
        category=category,
    )


def parse_insight_report(payload: str | dict[str, Any]) -> InsightReport:
    """Validate an insights payload against the report schema.

    Args:
        payload: Raw JSON text (optionally in a ```json fence) or decoded dict.

    Returns:
        Validated InsightReport.

    Raises:
        InsightsSchemaError: If the payload is not valid JSON or does not
            match the schema.
    """
    if isinstance(payload, str):
        text = payload.strip()
        fenced = _FENCE.match(text)
        if fenced:
            text = fenced.group(1)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InsightsSchemaError(f"Response is not valid JSON: {e}") from e
    else:
        data = payload

    if not isinstance(data, dict):
        raise InsightsSchemaError("Report must be a JSON object")

    raw_insights = data.get("insights")
    if not isinstance(raw_insights, list):
        raise InsightsSchemaError("insights must be a list")

    score = data.get("overallScore")
    # bool is an int subclass; a True score is not a score
    if isinstance(score, bool) or not isinstance(score, int | float):
        raise InsightsSchemaError("overallScore must be a number")
    if not 0 <= score <= 100:
        raise InsightsSchemaError(f"overallScore {score} is outside 0-100")

    return InsightReport(
        insights=[_parse_insight(item, i) for i, item in enumerate(raw_insights)],
        overall_score=float(score),
        verdict=_require_str(data, "verdict", "report"),
    )


__all__ = [
    "Insight",
    "InsightCategory",
    "InsightReport",
    "Note",
    "parse_insight_report",
]
