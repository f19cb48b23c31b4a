# src/tickerlens_api/domain/entities/news.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""News (Domain Entities).

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from tickerlens_api.domain.entities.base import BaseEntity

NEUTRAL_SENTIMENT: Final[str] = "Neutral"


@dataclass(frozen=True, slots=True)
class NewsItem(BaseEntity):
    """One headline about a symbol; every field but the title is optional."""

    title: str
    source: str | None = None
    published_at: str | None = None
    url: str | None = None
    sentiment: str = NEUTRAL_SENTIMENT


@dataclass(frozen=True, slots=True)
class NewsFeed(BaseEntity):
    """Latest headlines for one symbol, newest first, at most ``limit`` items."""

    symbol: str
    limit: int
    source: str | None = None
    items: tuple[NewsItem, ...] = ()

    def __post_init__(self) -> None:
        if len(self.items) > self.limit:
            raise ValueError("items exceed limit")
