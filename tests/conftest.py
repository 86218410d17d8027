"""Shared fixtures for Net Worth Tracker tests."""

import pytest

from src.models.snapshot import MonthlyRecord
from src.services.storage import InMemorySeriesStore, StoreGateway


@pytest.fixture
def two_months() -> list[MonthlyRecord]:
    return [
        MonthlyRecord(
            date="31/01/24",
            assets={"Stocks": 1000, "Savings": 500},
            liabilities={"Loan": 500},
        ),
        MonthlyRecord(
            date="29/02/24",
            assets={"Stocks": 1100, "Savings": 500},
            liabilities={"Loan": 500},
        ),
    ]


@pytest.fixture
def store(two_months) -> InMemorySeriesStore:
    return InMemorySeriesStore(two_months)


@pytest.fixture
def gateway(store) -> StoreGateway:
    return StoreGateway(store)
