# src/tickerlens_api/domain/entities/filer_identity.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Filer Identity (Domain Entity).

Synopsis:
    Maps a ticker symbol to the fixed-width filer identifier a securities
    regulator assigns to the reporting entity. Also hosts the symbol and
    identifier normalization rules every layer relies on.

Layer:
    domain/entities
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from tickerlens_api.domain.entities.base import BaseEntity
from tickerlens_api.domain.exceptions.financials import InvalidInput

FILER_ID_WIDTH: Final[int] = 10

_SYMBOL_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Z0-9][A-Z0-9.\-]{0,11}$")


def normalize_symbol(raw: str | None) -> str:
    """Return the canonical (trimmed, upper-case) form of a ticker symbol.

    Args:
        raw: Caller-supplied symbol in any case.

    Returns:
        Upper-case ticker symbol.

    Raises:
        InvalidInput: If the symbol is missing or malformed.
    """
    symbol = (raw or "").strip().upper()
    if not symbol:
        raise InvalidInput("Query parameter 'symbol' is required.", details={"param": "symbol"})
    if not _SYMBOL_RE.match(symbol):
        raise InvalidInput(
            "Query parameter 'symbol' is malformed.",
            details={"param": "symbol", "value": raw},
        )
    return symbol


def normalize_filer_id(raw: str | int) -> str:
    """Normalize a filer identifier to a 10-digit, zero-padded string.

    Non-digit characters are stripped; remaining digits are left-padded with
    zeros up to :data:`FILER_ID_WIDTH` characters.

    Raises:
        InvalidInput: If no digits remain or the identifier is too long.
    """
    digits = "".join(ch for ch in str(raw) if ch.isdigit())
    if not digits or len(digits) > FILER_ID_WIDTH:
        raise InvalidInput("Filer identifier must contain 1 to 10 digits.", details={"cik": raw})
    return digits.zfill(FILER_ID_WIDTH)


@dataclass(frozen=True, slots=True)
class FilerIdentity(BaseEntity):
    """Resolved issuer identity.

    Attributes:
        symbol: Upper-case ticker symbol.
        filer_id: Zero-padded, fixed-width filer identifier.
        name: Registrant name as listed in the reference dataset, if any.
    """

    symbol: str
    filer_id: str
    name: str | None = None

    def __post_init__(self) -> None:
        if len(self.filer_id) != FILER_ID_WIDTH or not self.filer_id.isdigit():
            raise ValueError(f"filer_id must be {FILER_ID_WIDTH} digits")
        if not self.symbol or self.symbol != self.symbol.upper():
            raise ValueError("symbol must be non-empty upper-case")

    @property
    def filer_number(self) -> int:
        """Return the identifier without zero padding (archive paths use this form)."""
        return int(self.filer_id)
