"""Unit tests for multiflow.core.financial module."""

import pytest
from multiflow.core.financial import (
    annual_payment_per_loan_dollar,
    calculate_first_year_amortization,
    calculate_loan_amount,
    calculate_monthly_payment,
)


class TestCalculateLoanAmount:
    """Tests for calculate_loan_amount function."""

    def test_standard_down_payment(self):
        """25% down on $200k leaves $150k financed."""
        assert calculate_loan_amount(200_000, 25.0) == pytest.approx(150_000)

    def test_cash_purchase(self):
        """100% down finances nothing."""
        assert calculate_loan_amount(200_000, 100.0) == 0.0

    def test_floored_at_zero(self):
        """Down payment above the price never yields a negative loan."""
        assert calculate_loan_amount(200_000, 120.0) == 0.0


class TestCalculateMonthlyPayment:
    """Tests for calculate_monthly_payment function."""

    def test_standard_loan(self):
        """$150k over 30 years at 6.5% is about $948.10/month."""
        pmt = calculate_monthly_payment(150_000, 6.5, 360)
        assert pmt == pytest.approx(948.10, abs=0.01)

    def test_zero_principal(self):
        """Zero principal should return zero payment."""
        assert calculate_monthly_payment(0, 6.5, 360) == 0.0

    def test_zero_months(self):
        """Zero term should return zero payment."""
        assert calculate_monthly_payment(150_000, 6.5, 0) == 0.0

    def test_zero_rate(self):
        """Zero interest rate should return principal/months."""
        assert calculate_monthly_payment(120_000, 0.0, 120) == 1000.0

    def test_short_term(self):
        """Shorter term should have higher payments."""
        assert calculate_monthly_payment(150_000, 6.5, 180) > calculate_monthly_payment(150_000, 6.5, 360)


class TestFirstYearAmortization:
    """Tests for calculate_first_year_amortization function."""

    def test_split_sums_to_payments(self):
        """Principal plus interest equals twelve payments."""
        principal, interest = calculate_first_year_amortization(150_000, 6.5, 360)
        pmt = calculate_monthly_payment(150_000, 6.5, 360)
        assert principal + interest == pytest.approx(pmt * 12)

    def test_interest_dominates_early(self):
        """First-year interest is far larger than principal on a 30-year loan."""
        principal, interest = calculate_first_year_amortization(150_000, 6.5, 360)
        assert 0 < principal < interest
        # First month: 812.50 interest, 135.60 principal
        assert interest < 812.50 * 12

    def test_zero_rate(self):
        """Without interest every dollar paid is principal."""
        principal, interest = calculate_first_year_amortization(120_000, 0.0, 120)
        assert principal == pytest.approx(12_000)
        assert interest == 0.0

    def test_zero_principal(self):
        """No loan, no amortization."""
        assert calculate_first_year_amortization(0, 6.5, 360) == (0.0, 0.0)


class TestAnnualPaymentPerLoanDollar:
    """Tests for annual_payment_per_loan_dollar function."""

    def test_matches_payment(self):
        """Loan constant times the loan equals annual debt service."""
        constant = annual_payment_per_loan_dollar(6.5, 30)
        assert constant * 150_000 == pytest.approx(calculate_monthly_payment(150_000, 6.5, 360) * 12)

    def test_zero_rate(self):
        """Zero rate repays 1/term each year."""
        assert annual_payment_per_loan_dollar(0.0, 25) == pytest.approx(0.04)

    def test_zero_term(self):
        """Zero term has no defined constant."""
        assert annual_payment_per_loan_dollar(6.5, 0) == 0.0
