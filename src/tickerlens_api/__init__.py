# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""TickerLens API.

Financial data aggregation service: resolves issuer identities, pulls
structured facts and market data from independent upstream providers, and
serves normalized snapshots, time series, filing indexes and price history.
"""

from __future__ import annotations

__version__ = "0.1.0"
