# src/tickerlens_api/domain/enums/market_event.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""
Market event enumerations.

Purpose:
    Kinds of corporate events overlaid on a price chart.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum


class EventKind(str, Enum):
    """What happened on an event date."""

    FILING = "filing"
    DIVIDEND = "dividend"
    EARNING = "earning"
