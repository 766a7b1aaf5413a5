"""Claude-backed productivity insights.

Sends the user's notes and task quality log to Claude and validates the
returned JSON report before anything else sees it.
"""

import logging
import os
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import anthropic

from ..tasks.models import Task
from .errors import (
    InsightsAPIError,
    InsightsAuthError,
    InsightsConnectivityError,
    InsightsTimeoutError,
)
from .models import InsightReport, Note, parse_insight_report

if TYPE_CHECKING:
    from ..config import InsightsConfig

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are an Executive Productivity Auditor.

Reply with a single JSON object and nothing else, using exactly this shape:
{"insights": [{"title": string, "description": string, "category": "focus" | "momentum" | "quality"}],
 "overallScore": number from 0 to 100,
 "verdict": string of about 10 words}"""


def build_insights_prompt(notes: Sequence[Note], tasks: Sequence[Task]) -> str:
    """Build the audit prompt from notes and the task quality log."""
    notes_context = "\n".join(f"Note: {n.title} - {n.content}" for n in notes)
    tasks_context = "\n".join(
        f"Task: {t.text}, Completed: {str(t.completed).lower()}, Quality: {t.quality.value}"
        for t in tasks
    )

    return f"""Analyze this user's work fidelity.

NOTES (Context/Ideas):
{notes_context or "(none)"}

TASKS & QUALITY LOG (Results):
{tasks_context or "(none)"}

Your core objective is to determine if the user is completing work "Perfectly" or just "getting by".

Provide exactly 3 actionable insights:
1. Quality Audit: Analyze the "Perfect" vs "Needs Work" ratio.
2. Pattern Recognition: Link notes/ideas to task success.
3. Sustainability: Is the current pace sustainable?

Be direct, professional, and data-driven."""


class InsightsService(Protocol):
    """Interface for the productivity scoring service."""

    def generate(self, notes: Sequence[Note], tasks: Sequence[Task]) -> InsightReport:
        """Produce a validated insight report.

        Raises:
            InsightsError: If the service fails or returns an invalid report.
        """
        ...


@dataclass
class ClaudeInsightsConfig:
    """Configuration for the Claude insights client."""

    api_key: str
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1024
    temperature: float = 0.3
    timeout_seconds: float = 60.0

    @classmethod
    def from_env(cls, config: "InsightsConfig | None" = None) -> "ClaudeInsightsConfig":
        """Create config from environment variables and app config.

        Returns:
            ClaudeInsightsConfig with API key from environment.

        Raises:
            ValueError: If ANTHROPIC_API_KEY is not set.
        """
        api_key = os.environ.get("ANTHROPIC_API_KEY", "").strip()
        if not api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY environment variable is not set. "
                "Set it to use productivity insights."
            )
        if config is None:
            return cls(api_key=api_key)
        return cls(
            api_key=api_key,
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            timeout_seconds=config.timeout_seconds,
        )


class ClaudeInsightsService:
    """InsightsService implementation using the Claude API."""

    def __init__(self, config: ClaudeInsightsConfig, client: anthropic.Anthropic | None = None) -> None:
        """Initialize the service.

        Args:
            config: Configuration for the client.
            client: Pre-built Anthropic client (tests inject a mock).
        """
        self._config = config
        self._client = client or anthropic.Anthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
        )

    def generate(self, notes: Sequence[Note], tasks: Sequence[Task]) -> InsightReport:
        """Request and validate an insight report.

        Raises:
            InsightsTimeoutError: If the request times out.
            InsightsAPIError: If the API returns an error.
            InsightsAuthError: If authentication fails.
            InsightsConnectivityError: If network is unavailable.
            InsightsSchemaError: If the response is not a valid report.
        """
        start_time = time.time()

        try:
            response = self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": build_insights_prompt(notes, tasks)}],
            )
        except anthropic.AuthenticationError as e:
            raise InsightsAuthError(
                "Invalid API key. Please check your ANTHROPIC_API_KEY."
            ) from e
        except anthropic.APITimeoutError as e:
            # Timeout before connection error: the timeout is a subclass
            raise InsightsTimeoutError(
                f"Request timed out after {self._config.timeout_seconds} seconds."
            ) from e
        except anthropic.APIConnectionError as e:
            raise InsightsConnectivityError(f"Failed to connect to Claude API: {e}") from e
        except anthropic.APIStatusError as e:
            raise InsightsAPIError(f"API error: {e.message}", status_code=e.status_code) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        report = parse_insight_report(text)

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Insight report: score={report.overall_score:.0f}, "
            f"{len(report.insights)} insights, {latency_ms}ms"
        )
        return report


__all__ = [
    "SYSTEM_PROMPT",
    "ClaudeInsightsConfig",
    "ClaudeInsightsService",
    "InsightsService",
    "build_insights_prompt",
]
