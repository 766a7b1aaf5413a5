"""Insights module for ZenFlow.

Provides AI productivity insights over notes and the task quality log.
"""

from .client import (
    ClaudeInsightsConfig,
    ClaudeInsightsService,
    InsightsService,
    build_insights_prompt,
)
from .errors import (
    InsightsAPIError,
    InsightsAuthError,
    InsightsConnectivityError,
    InsightsError,
    InsightsSchemaError,
    InsightsTimeoutError,
)
from .models import Insight, InsightCategory, InsightReport, Note, parse_insight_report

__all__ = [
    "ClaudeInsightsConfig",
    "ClaudeInsightsService",
    "Insight",
    "InsightCategory",
    "InsightReport",
    "InsightsAPIError",
    "InsightsAuthError",
    "InsightsConnectivityError",
    "InsightsError",
    "InsightsSchemaError",
    "InsightsService",
    "InsightsTimeoutError",
    "Note",
    "build_insights_prompt",
    "parse_insight_report",
]
