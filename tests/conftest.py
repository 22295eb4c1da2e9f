"""Shared fixtures for the test suite."""

import os
import pytest
from unittest.mock import MagicMock

# Keep the API from importing from EDGAR when a test enters its lifespan
os.environ.setdefault("FUNDING_IMPORT_ON_STARTUP", "false")

from database import DatabaseManager
from models import Company, Income, Money


@pytest.fixture
def tmp_db(tmp_path):
    """Fresh DatabaseManager backed by a real SQLite DB in tmp_path."""
    db_path = str(tmp_path / "test.db")
    db = DatabaseManager(db_path=db_path)
    yield db
    db.close()


@pytest.fixture
def mock_response():
    """Factory for mock HTTP responses."""
    def _make(status_code=200, json_data=None):
        resp = MagicMock()
        resp.status_code = status_code
        resp.json.return_value = json_data or {}
        # truthy when status_code == 200
        resp.__bool__ = lambda self: self.status_code == 200
        return resp
    return _make


@pytest.fixture
def growing_incomes():
    """2018-2022 incomes rising from $1B to $5B."""
    return {
        2018: 1_000_000_000,
        2019: 2_000_000_000,
        2020: 3_000_000_000,
        2021: 4_000_000_000,
        2022: 5_000_000_000,
    }


@pytest.fixture
def make_company():
    """Factory fixture: Company with {year: amount} USD incomes."""
    def _make(name="Ocean Corp", incomes=None, cik=320193, company_id=0):
        company = Company(id=company_id, cik=cik, name=name)
        for year, amount in (incomes or {}).items():
            company.add_income(Income(company_id=company_id, year=year, amount=Money.from_amount(amount)))
        return company
    return _make


@pytest.fixture
def make_payload():
    """
    Factory for raw companyfacts JSON dicts.

    facts is a list of (form, frame, val) tuples; a None frame is left out,
    as EDGAR does for facts that don't line up with a calendar period.
    """
    def _make(facts=None, cik=320193, entity_name="Apple Inc."):
        usd = []
        for i, (form, frame, val) in enumerate(facts or []):
            fact = {
                "end": "2022-12-31",
                "val": val,
                "accn": f"0000320193-23-{i:06d}",
                "fy": 2022,
                "fp": "FY",
                "form": form,
                "filed": "2023-02-01",
            }
            if frame is not None:
                fact["frame"] = frame
            usd.append(fact)
        return {
            "cik": cik,
            "entityName": entity_name,
            "facts": {
                "dei": {
                    "EntityCommonStockSharesOutstanding": {"units": {"shares": []}}
                },
                "us-gaap": {
                    "NetIncomeLoss": {
                        "label": "Net Income (Loss) Attributable to Parent",
                        "description": "The portion of profit or loss for the period...",
                        "units": {"USD": usd},
                    }
                },
            },
        }
    return _make
