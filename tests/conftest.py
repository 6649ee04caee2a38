"""Pytest fixtures for multiflow tests."""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from multiflow.application.services.repository import (  # noqa: E402
    InMemoryGradeProfileRepository,
    InMemoryOfferRepository,
)
from multiflow.domain.models.grade_profile import GradeProfile  # noqa: E402
from multiflow.domain.models.metrics import DealMetrics  # noqa: E402
from multiflow.domain.models.property import Property, RentUnit  # noqa: E402


class FixedClock:
    """Deterministic clock for repository timestamps."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def example_property():
    """Single-unit deal: $200k, $1,800/mo, 35% expenses, 25% down at 6.5% over 30 years."""
    return Property(
        id="prop-1",
        user_id="user-1",
        address="12 Elm St",
        purchase_price=200_000,
        rent_roll=[RentUnit(monthly_rent=1_800, unit_type="2BR")],
        operating_expense_rate=35.0,
        down_payment_percent=25.0,
        interest_rate=6.5,
        loan_term_years=30,
        annual_taxes=2_400,
        annual_insurance=1_200,
    )


@pytest.fixture
def fourplex_property():
    """Four units at $1,500/mo on the same financing as example_property."""
    return Property(
        id="prop-4",
        user_id="user-1",
        address="400 Oak Ave",
        purchase_price=200_000,
        rent_roll=[RentUnit(monthly_rent=1_500, unit_type=f"Unit {i}") for i in range(1, 5)],
        operating_expense_rate=35.0,
        down_payment_percent=25.0,
        interest_rate=6.5,
        loan_term_years=30,
    )


@pytest.fixture
def balanced_profile():
    """Profile with a $500/mo floor and a 10% borderline band."""
    return GradeProfile(name="Balanced", cash_flow_floor=500.0, cash_flow_borderline_pct=10.0, target_dcr=1.25)


@pytest.fixture
def make_metrics():
    """Factory for DealMetrics with only the fields under test overridden."""

    def _make(**overrides) -> DealMetrics:
        values = {
            "gross_annual_rent": 21_600.0,
            "total_operating_expense": 7_560.0,
            "net_operating_income": 14_040.0,
            "loan_amount": 150_000.0,
            "monthly_debt_service": 948.10,
            "annual_debt_service": 11_377.2,
            "annual_cash_flow": 2_662.8,
            "down_payment": 50_000.0,
            "closing_costs": 0.0,
            "total_cash_invested": 50_000.0,
            "cash_on_cash": 0.053,
            "cap_rate": 0.0702,
            "debt_coverage_ratio": 1.234,
        }
        values.update(overrides)
        return DealMetrics(**values)

    return _make


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def offer_repository(clock):
    return InMemoryOfferRepository(clock=clock)


@pytest.fixture
def profile_repository():
    return InMemoryGradeProfileRepository()
