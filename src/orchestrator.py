"""
Main Orchestrator for Net Worth Tracker

This module ties together all the components:
1. Baseline -> in-memory store -> gateway -> mutation client
2. Client's derived series -> insight provider

DESIGN DECISION: The store is an explicit object created here and handed
to everything that needs it. There is no module-level series.
"""

from typing import Optional

import structlog

from src.agents import GeminiInsightProvider, InsightProvider
from src.client import MutationClient
from src.config import get_settings
from src.events import EventLogger, configure_logging
from src.models.snapshot import Insight
from src.services.storage import InMemorySeriesStore, StoreGateway, load_baseline


class InsightFlow:
    """
    Generates advisory insights for the client's current series.

    Works without a provider (e.g. no Gemini key): `available` is then
    False and `generate()` returns no insights.
    """

    def __init__(
        self,
        client: MutationClient,
        provider: Optional[InsightProvider] = None,
    ):
        self._client = client
        self._provider = provider

    @property
    def available(self) -> bool:
        return self._provider is not None

    async def generate(self) -> list[Insight]:
        """
        Raises:
            InsightGenerationError: Propagated from the provider
        """
        derived = self._client.derived
        if not self._provider or not derived:
            return []
        return await self._provider.generate_insights(derived)


def create_app_components(
    use_insights: bool = True,
) -> tuple[InMemorySeriesStore, MutationClient, InsightFlow]:
    """
    Factory function to create all application components.

    Args:
        use_insights: Whether to build the Gemini insight provider.
                      Set to False to run without an API key.

    Returns:
        (store, client, insight_flow). The client has not fetched yet;
        call `await client.refresh()` before reading its series.
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)
    event_logger = EventLogger()

    store_settings = settings.store
    baseline = load_baseline(
        store_settings.baseline_path,
        write_default=store_settings.write_default_baseline,
        event_logger=event_logger,
    )
    store = InMemorySeriesStore(baseline, event_logger=event_logger)
    client = MutationClient(StoreGateway(store), event_logger=event_logger)

    provider = None
    if use_insights:
        try:
            provider = GeminiInsightProvider(event_logger=event_logger)
        except Exception as e:
            # Insights not configured - continue without them
            structlog.get_logger(__name__).warning(
                "insights_unavailable", error=str(e)
            )

    return store, client, InsightFlow(client, provider)
