"""
AI Insight Agent for Net Worth Tracker

DESIGN DECISION: Insight generation sits behind a one-method interface
(`InsightProvider`) with two outcomes: a list of insights, or an
InsightGenerationError. The Gemini implementation is one provider.

CRITICAL BOUNDARIES:
- CAN: Read the derived series and describe trends in it
- CANNOT: Change the series in any way
- No retry or backoff: a single failed call is reported to the caller

Insights are advisory only.
"""

import json
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import google.generativeai as genai
from pydantic import TypeAdapter, ValidationError

from src.config import GeminiSettings, get_settings
from src.events import EventLogger
from src.models.events import StoreEventBuilder
from src.models.snapshot import DerivedRecord, Insight
from src.services.storage import RemoteFailureError


class InsightGenerationError(RemoteFailureError):
    """The text-generation service failed or returned unusable output."""
    pass


_INSIGHTS_ADAPTER = TypeAdapter(list[Insight])


INSIGHT_PROMPT = """Analyze the following personal financial data and provide {count} distinct, actionable insights. For each insight, provide a title, a data-driven explanation, and a practical suggestion. The data represents monthly snapshots of assets and liabilities.

Data:
{data}

Focus on trends in net worth, asset allocation, liability changes, and overall financial health. Provide concrete advice.

Respond with ONLY a JSON array in this exact format:
[{{"title": "concise engaging title", "explanation": "what the numbers show, citing specific figures", "suggestion": "an actionable recommendation"}}]
"""


class InsightProvider(ABC):
    """Anything that can turn a derived series into insights."""

    @abstractmethod
    async def generate_insights(
        self,
        series: Sequence[DerivedRecord],
    ) -> list[Insight]:
        """
        Generate insights for a derived series.

        Raises:
            InsightGenerationError: On transport failure or unusable output
        """
        pass


def build_prompt(series: Sequence[DerivedRecord], count: int) -> str:
    """Embed the derived series as indented camelCase JSON."""
    data = [record.model_dump(by_alias=True) for record in series]
    return INSIGHT_PROMPT.format(count=count, data=json.dumps(data, indent=2))


def parse_insights(text: str) -> list[Insight]:
    """
    Parse the model's reply into insights.

    Raises:
        InsightGenerationError: If the reply is empty or not a valid list
    """
    text = (text or "").strip()
    if not text:
        raise InsightGenerationError("Gemini API returned an empty response.")

    # Find the JSON array in the response
    start = text.find("[")
    end = text.rfind("]") + 1
    if start < 0 or end <= start:
        raise InsightGenerationError("Gemini response did not contain a JSON array.")

    try:
        return _INSIGHTS_ADAPTER.validate_json(text[start:end])
    except ValidationError as e:
        raise InsightGenerationError(f"Malformed insights: {e}") from e


class GeminiInsightProvider(InsightProvider):
    """
    Insight provider backed by Google Gemini.

    Pass `model` to use a preconfigured (or fake) model object exposing
    `generate_content_async(prompt)`; otherwise one is built from settings.
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model=None,
        event_logger: Optional[EventLogger] = None,
    ):
        self._settings = settings or get_settings().gemini
        self._event_logger = event_logger
        self._model = model or self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        return genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
                "response_mime_type": "application/json",
            },
        )

    async def generate_insights(
        self,
        series: Sequence[DerivedRecord],
    ) -> list[Insight]:
        prompt = build_prompt(series, self._settings.insight_count)

        try:
            try:
                response = await self._model.generate_content_async(prompt)
                text = response.text
            except Exception as e:
                raise InsightGenerationError(f"Gemini request failed: {e}") from e
            insights = parse_insights(text)
        except InsightGenerationError as e:
            if self._event_logger:
                self._event_logger.log(StoreEventBuilder.insights_failed(
                    str(e), self._settings.model_name
                ))
            raise

        if self._event_logger:
            self._event_logger.log(StoreEventBuilder.insights_generated(
                len(insights), self._settings.model_name
            ))
        return insights
