# tests/integration/routers/test_filings_router.py
from __future__ import annotations

from datetime import date

from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import StubUseCase
from tickerlens_api.dependencies.financials import get_filings_use_case
from tickerlens_api.domain.entities.filing import FilingIndex, FilingRecord
from tickerlens_api.domain.enums.filing import FormCategory


def test_filings_are_listed_with_query_passthrough(app: FastAPI, client: TestClient) -> None:
    stub = StubUseCase(
        FilingIndex(
            symbol="AAPL",
            filer_id="0000320193",
            filings=(
                FilingRecord(
                    form="10-K",
                    filed_at=date(2023, 11, 3),
                    accession_number="0000320193-23-000106",
                    document_url="https://www.sec.gov/Archives/edgar/data/320193/x/a.htm",
                    category=FormCategory.ANNUAL,
                ),
            ),
        )
    )
    app.dependency_overrides[get_filings_use_case] = lambda: stub

    resp = client.get("/v1/filings", params={"symbol": "AAPL", "forms": "10-K", "limit": 5})

    assert resp.status_code == 200
    filing = resp.json()["filings"][0]
    assert filing["filedAt"] == "2023-11-03"
    assert filing["reportDate"] is None
    assert filing["category"] == "annual"
    assert stub.calls == [
        (("AAPL",), {"forms": "10-K", "limit": 5, "latest_per_quarter": False})
    ]


def test_unresolved_symbol_is_a_200_with_null_filer(app: FastAPI, client: TestClient) -> None:
    app.dependency_overrides[get_filings_use_case] = lambda: StubUseCase(
        FilingIndex(symbol="ZZZZ", filer_id=None)
    )
    resp = client.get("/v1/filings?symbol=zzzz")

    assert resp.status_code == 200
    assert resp.json() == {"symbol": "ZZZZ", "filerId": None, "filings": []}


def test_missing_symbol_is_rejected(client: TestClient) -> None:
    resp = client.get("/v1/filings")
    assert resp.status_code == 400
    assert resp.json()["error"] == "INVALID_INPUT"


def test_latest_per_quarter_flag_is_forwarded(app: FastAPI, client: TestClient) -> None:
    stub = StubUseCase(FilingIndex(symbol="AAPL", filer_id="0000320193"))
    app.dependency_overrides[get_filings_use_case] = lambda: stub

    resp = client.get("/v1/filings", params={"symbol": "AAPL", "latestPerQuarter": "true"})

    assert resp.status_code == 200
    assert stub.calls[0][1]["latest_per_quarter"] is True
