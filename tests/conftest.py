"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from typing import Callable
from fastapi.testclient import TestClient
from cediwise_budget.api.main import create_app
from cediwise_budget.domain.models import BudgetCycle, BudgetTransaction, Bucket


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def sample_cycle() -> BudgetCycle:
    """50/30/20 cycle from the 25th of January to the 24th of February"""
    return BudgetCycle(
        id="cycle_1",
        user_id="user_1",
        start_date=date(2026, 1, 25),
        end_date=date(2026, 2, 24),
        payday_day=25,
        needs_pct=0.5,
        wants_pct=0.3,
        savings_pct=0.2,
    )


@pytest.fixture
def make_transaction() -> Callable[..., BudgetTransaction]:
    """Factory for transactions against cycle_1 unless told otherwise"""
    counter = {"n": 0}

    def _make(
        bucket: Bucket,
        amount: float,
        cycle_id: str = "cycle_1",
        category_id: str | None = None,
    ) -> BudgetTransaction:
        counter["n"] += 1
        return BudgetTransaction(
            id=f"tx_{counter['n']}",
            cycle_id=cycle_id,
            bucket=bucket,
            amount=amount,
            occurred_at=datetime(2026, 2, 1, 12, 0),
            category_id=category_id,
        )

    return _make


@pytest.fixture
def spend(make_transaction) -> Callable[[float, float, float], list[BudgetTransaction]]:
    """One transaction per bucket with the given needs/wants/savings totals"""

    def _spend(needs: float, wants: float, savings: float) -> list[BudgetTransaction]:
        return [
            make_transaction(Bucket.NEEDS, needs),
            make_transaction(Bucket.WANTS, wants),
            make_transaction(Bucket.SAVINGS, savings),
        ]

    return _spend
