"""Financial calculation functions.

Core loan and amortization calculations for rental property underwriting.
"""

from __future__ import annotations

import numpy_financial as npf


def calculate_loan_amount(purchase_price: float, down_payment_pct: float) -> float:
    """Financed amount after the down payment, floored at zero."""
    return max(purchase_price * (1.0 - down_payment_pct / 100.0), 0.0)


def calculate_monthly_payment(
    principal: float,
    annual_rate_pct: float,
    duration_months: int,
) -> float:
    """Calculate monthly loan payment (principal + interest only).

    Args:
        principal: Loan amount in $
        annual_rate_pct: Annual interest rate as percentage (e.g., 6.5 for 6.5%)
        duration_months: Loan term in months

    Returns:
        Monthly payment amount in $
    """
    if principal <= 0 or duration_months <= 0:
        return 0.0

    monthly_rate = (annual_rate_pct / 100.0) / 12.0

    if monthly_rate <= 0:
        return principal / duration_months

    return float(-npf.pmt(monthly_rate, duration_months, principal))


def calculate_first_year_amortization(
    principal: float,
    annual_rate_pct: float,
    duration_months: int,
) -> tuple[float, float]:
    """Split the first twelve payments into principal and interest.

    Args:
        principal: Loan amount in $
        annual_rate_pct: Annual interest rate %
        duration_months: Loan term in months

    Returns:
        Tuple of (annual principal paydown, annual interest)
    """
    if principal <= 0 or duration_months <= 0:
        return 0.0, 0.0

    monthly_rate = max((annual_rate_pct / 100.0) / 12.0, 0.0)
    payment = calculate_monthly_payment(principal, annual_rate_pct, duration_months)

    balance = principal
    total_principal = 0.0
    total_interest = 0.0

    for _ in range(min(12, duration_months)):
        interest = balance * monthly_rate
        principal_payment = max(payment - interest, 0.0)
        total_interest += interest
        total_principal += principal_payment
        balance = max(balance - principal_payment, 0.0)

    return total_principal, total_interest


def annual_payment_per_loan_dollar(annual_rate_pct: float, duration_years: float) -> float:
    """Annual debt service for each $1 borrowed (the loan constant).

    Returns 0.0 when the term is not positive.
    """
    n = duration_years * 12.0
    if n <= 0:
        return 0.0

    r = (annual_rate_pct / 100.0) / 12.0
    if r <= 0:
        return 1.0 / duration_years

    return (r / (1.0 - (1.0 + r) ** (-n))) * 12.0
