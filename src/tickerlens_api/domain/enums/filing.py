# src/tickerlens_api/domain/enums/filing.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""
Filing enumerations.

Purpose:
    Coarse classification of regulatory form types into annual, quarterly
    and other reports.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum


class FormCategory(str, Enum):
    """Reporting cadence implied by a form type."""

    ANNUAL = "annual"
    QUARTERLY = "quarterly"
    OTHER = "other"
