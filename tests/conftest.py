"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from fastapi.testclient import TestClient
from paycycle.api.main import create_app
from paycycle.domain.models import FixedDay, Money, Obligation, RelativeWindow, Transaction


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    app = create_app()
    return TestClient(app)


@pytest.fixture
def sample_obligations() -> list[Obligation]:
    """A card with a payment window, a loan and two fixed expenses"""
    return [
        Obligation(
            name="Visa Oro",
            kind="card",
            rule=RelativeWindow(anchor_day=5, window_days=22),  # due 27th
            amount=Money(Decimal("2500.00"), "DOP"),
        ),
        Obligation(
            name="Car loan",
            kind="loan",
            rule=FixedDay(15),
            amount=Money(Decimal("12500.00"), "DOP"),
        ),
        Obligation(
            name="Rent",
            kind="expense",
            rule=FixedDay(1),
            amount=Money(Decimal("30000.00"), "DOP"),
        ),
        Obligation(
            name="Streaming",
            kind="expense",
            rule=FixedDay(10),
            amount=Money(Decimal("15.99"), "USD"),
            is_paid=True,
        ),
    ]


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Payment history spanning three financial months (start day 15)"""
    return [
        # Period [2024-01-15, 2024-02-15)
        Transaction(datetime(2024, 1, 20, 9, 30), Decimal("1000.00"), "DOP", source="card"),
        Transaction(date(2024, 2, 14), Decimal("50.00"), "USD", source="loan"),
        # Period [2024-02-15, 2024-03-15)
        Transaction(date(2024, 2, 15), Decimal("2000.00"), "DOP", source="expense"),
        Transaction(datetime(2024, 3, 10, 23, 59), Decimal("10.00"), "USD", source="card"),
        Transaction(date(2024, 3, 1), Decimal("999.00"), "DOP", type="COMPRA", source="card"),
        # Period [2024-03-15, 2024-04-15)
        Transaction(date(2024, 3, 20), Decimal("500.00"), "DOP", source="loan"),
    ]
