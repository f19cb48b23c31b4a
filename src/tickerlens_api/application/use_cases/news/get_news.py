# src/tickerlens_api/application/use_cases/news/get_news.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Use case: Get recent headlines for a symbol.

The first news provider that returns anything wins. A failing or
unconfigured provider yields an empty feed, never an error.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from tickerlens_api.application.interfaces.providers import NewsSource
from tickerlens_api.domain.entities.filer_identity import normalize_symbol
from tickerlens_api.domain.entities.news import NewsFeed, NewsItem
from tickerlens_api.domain.services.fallback import first_success_async
from tickerlens_api.infrastructure.logging.logger import get_json_logger
from tickerlens_api.infrastructure.observability.metrics import record_fallback

logger = get_json_logger(__name__)

DEFAULT_NEWS_LIMIT: Final[int] = 4
MAX_NEWS_LIMIT: Final[int] = 10


def clamp_news_limit(raw: int | None) -> int:
    """Return ``raw`` clamped to ``[1, MAX_NEWS_LIMIT]`` (default 4)."""
    if raw is None:
        return DEFAULT_NEWS_LIMIT
    return max(1, min(MAX_NEWS_LIMIT, int(raw)))


class GetNewsUseCase:
    """Fetch the latest headlines for one symbol."""

    def __init__(self, *, sources: Sequence[NewsSource]) -> None:
        self._sources = tuple(sources)

    async def execute(self, symbol: str, *, limit: int | None = None) -> NewsFeed:
        """Execute the use case.

        Raises:
            InvalidInput: For a malformed symbol.
        """
        ticker = normalize_symbol(symbol)
        cap = clamp_news_limit(limit)

        async def _fetch(source: NewsSource) -> list[NewsItem]:
            return await source.fetch_news(ticker, limit=cap)

        def _on_failure(name: str, exc: Exception) -> None:
            record_fallback("news", name, "failed")
            logger.warning(
                "news.source_failed",
                extra={"provider": name, "reason": getattr(exc, "code", type(exc).__name__)},
            )

        outcome = await first_success_async(
            [(src.name, lambda src=src: _fetch(src)) for src in self._sources],
            on_failure=_on_failure,
        )
        if not outcome.found:
            record_fallback("news", "none", "exhausted")
            return NewsFeed(symbol=ticker, limit=cap)

        record_fallback("news", outcome.source or "none", "hit")
        items = tuple((outcome.value or [])[:cap])
        return NewsFeed(symbol=ticker, limit=cap, source=outcome.source, items=items)
