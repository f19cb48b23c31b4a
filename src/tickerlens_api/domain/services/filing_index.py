# src/tickerlens_api/domain/services/filing_index.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Filing index building.

Purpose:
    Scan an issuer's filing history (parallel arrays indexed by position),
    keep the requested form types, cap the result, and synthesize document
    links.

Notes:
    * Form matching is case-insensitive; an empty requested set means "all".
    * Rows keep the provider's order (newest first for the regulator feed).
    * ``limit`` defaults to 20 and is clamped to ``[1, 100]``.
    * Optionally, quarterly filings collapse to the most recently filed one
      per reported calendar quarter (amendments and late re-filings).

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any, Final

from tickerlens_api.domain.entities.filing import FilingRecord
from tickerlens_api.domain.enums.filing import FormCategory

DEFAULT_FILINGS_LIMIT: Final[int] = 20
MAX_FILINGS_LIMIT: Final[int] = 100

_ANNUAL_FORMS: Final[frozenset[str]] = frozenset({"10-K", "10-KT", "20-F", "40-F"})
_QUARTERLY_FORMS: Final[frozenset[str]] = frozenset({"10-Q", "10-QT"})


def clamp_limit(raw: int | None) -> int:
    """Return ``raw`` clamped to ``[1, MAX_FILINGS_LIMIT]`` (default 20)."""
    if raw is None:
        return DEFAULT_FILINGS_LIMIT
    return max(1, min(MAX_FILINGS_LIMIT, int(raw)))


def parse_form_filter(raw: str | Iterable[str] | None) -> frozenset[str]:
    """Parse a CSV (or iterable) of form types into an upper-case set."""
    if raw is None:
        return frozenset()
    parts = raw.split(",") if isinstance(raw, str) else raw
    return frozenset(p.strip().upper() for p in parts if p and p.strip())


def classify_form(form: str) -> FormCategory:
    """Classify a form type as annual, quarterly or other (amendments included)."""
    base = form.strip().upper().removesuffix("/A")
    if base in _ANNUAL_FORMS:
        return FormCategory.ANNUAL
    if base in _QUARTERLY_FORMS:
        return FormCategory.QUARTERLY
    return FormCategory.OTHER


def build_document_url(
    archives_base: str,
    filer_number: int,
    accession_number: str | None,
    primary_document: str | None,
) -> str | None:
    """Return the primary document URL, else the filing index URL.

    Returns ``None`` when no accession identifier is available.
    """
    if not accession_number:
        return None
    folder = f"{archives_base.rstrip('/')}/{filer_number}/{accession_number.replace('-', '')}"
    if primary_document:
        return f"{folder}/{primary_document}"
    return f"{folder}/index.json"


def _column(recent: Mapping[str, Any], key: str) -> Sequence[Any]:
    value = recent.get(key)
    return value if isinstance(value, list) else []


def _cell(column: Sequence[Any], index: int) -> str | None:
    if index >= len(column):
        return None
    raw = column[index]
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _parse_date(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def quarter_key(record: FilingRecord) -> tuple[int, int]:
    """Return the ``(year, quarter)`` a filing reports on (report date, else filing date)."""
    anchor = record.report_date or record.filed_at
    return anchor.year, (anchor.month - 1) // 3 + 1


def latest_per_quarter(records: Sequence[FilingRecord]) -> list[FilingRecord]:
    """Keep one quarterly filing per reported quarter, the most recently filed.

    Non-quarterly filings pass through. Survivors keep their original order;
    on equal filing dates the first one encountered wins.
    """
    winners: dict[tuple[int, int], FilingRecord] = {}
    for record in records:
        if record.category is not FormCategory.QUARTERLY:
            continue
        key = quarter_key(record)
        current = winners.get(key)
        if current is None or record.filed_at > current.filed_at:
            winners[key] = record
    return [
        r
        for r in records
        if r.category is not FormCategory.QUARTERLY or winners[quarter_key(r)] is r
    ]


def build_filing_index(
    recent: Mapping[str, Any],
    *,
    filer_number: int,
    forms: frozenset[str],
    limit: int,
    archives_base: str,
    dedupe_quarters: bool = False,
) -> tuple[FilingRecord, ...]:
    """Build filing records from a ``filings.recent`` block.

    Args:
        recent: Parallel arrays keyed by ``form``, ``filingDate``,
            ``reportDate``, ``accessionNumber`` and ``primaryDocument``.
        filer_number: Filer identifier without zero padding.
        forms: Upper-case form types to keep; empty keeps everything.
        limit: Maximum number of records (already clamped).
        archives_base: Base URL of the filing archives.
        dedupe_quarters: Collapse quarterly filings to the latest per
            reported quarter before capping.

    Returns:
        Matching records in provider order, at most ``limit`` of them.
    """
    form_col = _column(recent, "form")
    filed_col = _column(recent, "filingDate")
    accession_col = _column(recent, "accessionNumber")
    report_col = _column(recent, "reportDate")
    primary_col = _column(recent, "primaryDocument")

    size = min(len(form_col), len(filed_col), len(accession_col))
    records: list[FilingRecord] = []
    for i in range(size):
        if not dedupe_quarters and len(records) >= limit:
            break
        form = _cell(form_col, i)
        filed_at = _parse_date(_cell(filed_col, i))
        if form is None or filed_at is None:
            continue
        if forms and form.upper() not in forms:
            continue
        accession = _cell(accession_col, i)
        primary = _cell(primary_col, i)
        records.append(
            FilingRecord(
                form=form,
                filed_at=filed_at,
                report_date=_parse_date(_cell(report_col, i)),
                accession_number=accession,
                primary_document=primary,
                document_url=build_document_url(archives_base, filer_number, accession, primary),
                category=classify_form(form),
            )
        )
    if dedupe_quarters:
        records = latest_per_quarter(records)
    return tuple(records[:limit])
