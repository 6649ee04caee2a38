"""Unit tests for the metrics engine."""

import pytest
from pydantic import ValidationError

from multiflow.core.exceptions import InvalidParameterError
from multiflow.domain.calculator.metrics import (
    calculate_gross_annual_rent,
    calculate_operating_expense,
    compute_metrics,
    maximum_allowable_offer,
    mortgage_breakdown,
    mortgage_breakdown_for,
)
from multiflow.domain.models.property import ExpenseMode, OperatingExpenseItem, Property, RentUnit


class TestComputeMetrics:
    """Tests for compute_metrics."""

    def test_reference_deal(self, example_property):
        """$200k single unit at $1,800/mo, 25% down at 6.5% over 30 years."""
        m = compute_metrics(example_property)

        assert m.gross_annual_rent == pytest.approx(21_600)
        assert m.total_operating_expense == pytest.approx(7_560)
        assert m.net_operating_income == pytest.approx(14_040)
        assert m.loan_amount == pytest.approx(150_000)
        assert m.monthly_debt_service == pytest.approx(948.10, abs=0.01)
        assert m.annual_debt_service == pytest.approx(11_377.2, abs=0.1)
        assert m.annual_cash_flow == pytest.approx(2_662.8, abs=0.1)
        assert m.cap_rate == pytest.approx(0.0702)
        assert m.debt_coverage_ratio == pytest.approx(1.234, abs=0.001)
        assert m.total_cash_invested == pytest.approx(50_000)
        assert m.cash_on_cash == pytest.approx(2_662.8 / 50_000, abs=1e-5)

    def test_noi_identity(self, fourplex_property):
        """NOI is exactly gross rent minus operating expense."""
        m = compute_metrics(fourplex_property)
        assert m.net_operating_income == m.gross_annual_rent - m.total_operating_expense

    def test_idempotent(self, example_property):
        """Same property, same metrics."""
        assert compute_metrics(example_property) == compute_metrics(example_property)

    @pytest.mark.parametrize("price", [0, -50_000])
    def test_no_price_gives_none(self, price):
        prop = Property(purchase_price=price, rent_roll=[RentUnit(monthly_rent=1_000)])
        assert compute_metrics(prop) is None

    def test_empty_rent_roll_gives_none(self):
        assert compute_metrics(Property(purchase_price=200_000)) is None

    def test_cash_purchase_has_no_dcr(self, example_property):
        """No debt service: DCR is undefined, not zero."""
        prop = example_property.model_copy(update={"down_payment_percent": 100.0})
        m = compute_metrics(prop)

        assert m.annual_debt_service == 0.0
        assert m.debt_coverage_ratio is None
        assert not m.has_debt
        assert m.meets_dcr(5.0)
        assert m.annual_cash_flow == pytest.approx(m.net_operating_income)

    def test_nothing_invested_gives_zero_cash_on_cash(self, example_property):
        prop = example_property.model_copy(update={"down_payment_percent": 0.0})
        m = compute_metrics(prop)
        assert m.total_cash_invested == 0.0
        assert m.cash_on_cash == 0.0

    def test_closing_costs_and_reno_are_invested(self, example_property):
        prop = example_property.model_copy(update={"closing_cost_rate": 3.0, "reno_budget": 10_000})
        m = compute_metrics(prop)
        assert m.closing_costs == pytest.approx(6_000)
        assert m.total_cash_invested == pytest.approx(66_000)

    def test_monthly_cash_flow(self, example_property):
        m = compute_metrics(example_property)
        assert m.monthly_cash_flow == pytest.approx(m.annual_cash_flow / 12)


class TestOperatingExpense:
    """Tests for the flat and detailed expense models."""

    def test_flat(self, example_property):
        gross = calculate_gross_annual_rent(example_property)
        assert calculate_operating_expense(example_property, gross) == pytest.approx(7_560)

    def test_detailed_ignores_flat_rate(self, example_property):
        prop = example_property.model_copy(update={
            "expense_mode": ExpenseMode.DETAILED,
            "management_fee": 1_800,
            "maintenance_reserve": 1_000,
            "other_expenses": [OperatingExpenseItem(name="Water", annual_amount=600)],
        })
        gross = calculate_gross_annual_rent(prop)
        # 2,400 taxes + 1,200 insurance + 1,800 + 1,000 + 600
        assert calculate_operating_expense(prop, gross) == pytest.approx(7_000)


class TestPropertyValidation:
    """Boundary validation of property inputs."""

    def test_negative_rent_rejected(self):
        with pytest.raises(ValidationError):
            RentUnit(monthly_rent=-100)

    def test_down_payment_out_of_range(self):
        with pytest.raises(ValidationError):
            Property(purchase_price=200_000, down_payment_percent=120)

    def test_negative_taxes_rejected(self):
        with pytest.raises(ValidationError):
            Property(purchase_price=200_000, annual_taxes=-1)


class TestMortgageBreakdown:
    """Tests for mortgage_breakdown."""

    def test_reference_payment(self):
        b = mortgage_breakdown(200_000, 25.0, 6.5, 30, 2_400, 1_200)

        assert b.monthly_principal_and_interest == pytest.approx(948.10, abs=0.01)
        assert b.monthly_taxes == pytest.approx(200)
        assert b.monthly_insurance == pytest.approx(100)
        assert b.monthly_total == pytest.approx(1_248.10, abs=0.01)
        assert b.annual_total == pytest.approx(b.monthly_total * 12)
        assert b.annual_principal > 0

    def test_pure(self):
        """Same inputs, same breakdown."""
        args = (200_000, 25.0, 6.5, 30, 2_400, 1_200)
        assert mortgage_breakdown(*args) == mortgage_breakdown(*args)

    def test_zero_rate_financed_is_none(self):
        """A financed purchase cannot amortize at 0%."""
        assert mortgage_breakdown(200_000, 25.0, 0.0, 30, 2_400, 1_200) is None

    def test_cash_purchase_taxes_and_insurance_only(self):
        b = mortgage_breakdown(200_000, 100.0, 0.0, 30, 2_400, 1_200)
        assert b.monthly_principal == 0.0
        assert b.monthly_interest == 0.0
        assert b.monthly_total == pytest.approx(300)

    @pytest.mark.parametrize("price,term", [(0, 30), (200_000, 0)])
    def test_missing_price_or_term(self, price, term):
        assert mortgage_breakdown(price, 25.0, 6.5, term, 0, 0) is None

    def test_invalid_down_payment(self):
        with pytest.raises(InvalidParameterError):
            mortgage_breakdown(200_000, 120.0, 6.5, 30, 0, 0)

    def test_negative_taxes(self):
        with pytest.raises(InvalidParameterError, match="annual_taxes"):
            mortgage_breakdown(200_000, 25.0, 6.5, 30, -1, 0)

    def test_for_property(self, example_property):
        assert mortgage_breakdown_for(example_property) == mortgage_breakdown(200_000, 25.0, 6.5, 30, 2_400, 1_200)


class TestMaximumAllowableOffer:
    """Tests for maximum_allowable_offer."""

    def test_current_dcr_gives_current_price(self, example_property):
        """Targeting the deal's own DCR returns its purchase price."""
        dcr = compute_metrics(example_property).debt_coverage_ratio
        assert maximum_allowable_offer(example_property, dcr) == pytest.approx(200_000, rel=1e-6)

    def test_stricter_target_lowers_ceiling(self, example_property):
        assert maximum_allowable_offer(example_property, 1.5) < maximum_allowable_offer(example_property, 1.2)

    def test_cash_purchase_has_no_ceiling(self, example_property):
        prop = example_property.model_copy(update={"down_payment_percent": 100.0})
        assert maximum_allowable_offer(prop, 1.25) is None

    def test_invalid_target(self, example_property):
        assert maximum_allowable_offer(example_property, 0) is None

    def test_no_metrics(self):
        assert maximum_allowable_offer(Property(purchase_price=200_000), 1.25) is None
