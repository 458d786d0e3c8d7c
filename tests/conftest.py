"""Pytest configuration for test isolation.

Each test gets its own DuckDB file under ``tmp_path`` so persisted days and
rules never leak between tests.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

import db
from models.calendar_models import AmountItem, DayEvents, RecurringRule


@pytest.fixture
def isolated_db(tmp_path, monkeypatch):
    """Point ``db.DB_FILE`` at a fresh per-test file and create the schema."""
    monkeypatch.setattr(db, "DB_FILE", str(tmp_path / "calendar.duckdb"))
    db.init_db()
    return db.DB_FILE


@pytest.fixture
def client(isolated_db):
    from fastapi.testclient import TestClient

    from main import app

    with TestClient(app) as test_client:
        yield test_client


def make_rule(**overrides) -> RecurringRule:
    fields = {
        "id": "rec_test",
        "type": "bill",
        "name": "Rent",
        "amount": Decimal("100"),
        "start_date": "2024-01-15",
        "cadence": "monthly",
        "months_count": None,
        "forever": True,
        "exceptions": [],
    }
    fields.update(overrides)
    return RecurringRule(**fields)


def make_day(**categories) -> DayEvents:
    """``make_day(bills=[("Power", "50")])`` -> DayEvents."""
    return DayEvents(**{
        name: [AmountItem(n, Decimal(a)) for n, a in items]
        for name, items in categories.items()
    })


FIXED_TODAY = date(2024, 3, 10)
