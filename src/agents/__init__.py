"""AI Agents package."""

from src.agents.insight_agent import (
    GeminiInsightProvider,
    InsightGenerationError,
    InsightProvider,
    build_prompt,
    parse_insights,
)

__all__ = [
    "GeminiInsightProvider",
    "InsightGenerationError",
    "InsightProvider",
    "build_prompt",
    "parse_insights",
]
