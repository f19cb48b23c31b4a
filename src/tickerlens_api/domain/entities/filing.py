# src/tickerlens_api/domain/entities/filing.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Filing Index (Domain Entities).

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from tickerlens_api.domain.entities.base import BaseEntity
from tickerlens_api.domain.enums.filing import FormCategory


@dataclass(frozen=True, slots=True)
class FilingRecord(BaseEntity):
    """One regulatory filing header.

    Attributes:
        form: Form type as reported (e.g. ``"10-K"``).
        filed_at: Filing date.
        report_date: Period-of-report date, if any.
        accession_number: Accession identifier (dashed form), if any.
        primary_document: Primary document file name, if any.
        document_url: Link to the primary document, else to the filing index.
        category: Annual/quarterly/other classification of ``form``.
    """

    form: str
    filed_at: date
    report_date: date | None = None
    accession_number: str | None = None
    primary_document: str | None = None
    document_url: str | None = None
    category: FormCategory = FormCategory.OTHER

    def __post_init__(self) -> None:
        if not self.form:
            raise ValueError("form must be non-empty")


@dataclass(frozen=True, slots=True)
class FilingIndex(BaseEntity):
    """Filing list for one symbol.

    ``filer_id`` is ``None`` when the symbol could not be resolved; in that
    case ``filings`` is always empty.
    """

    symbol: str
    filer_id: str | None
    filings: tuple[FilingRecord, ...] = ()

    def __post_init__(self) -> None:
        if self.filer_id is None and self.filings:
            raise ValueError("filings require a resolved filer_id")
