"""Metrics engine.

Pure functions turning a Property into year-one underwriting metrics and a
mortgage payment breakdown.
"""

from __future__ import annotations

from multiflow.core.exceptions import InvalidParameterError
from multiflow.core.financial import (
    annual_payment_per_loan_dollar,
    calculate_first_year_amortization,
    calculate_loan_amount,
    calculate_monthly_payment,
)
from multiflow.core.logging import get_logger
from multiflow.domain.models.metrics import DealMetrics, MortgageBreakdown
from multiflow.domain.models.property import ExpenseMode, Property

log = get_logger(__name__)


def calculate_gross_annual_rent(prop: Property) -> float:
    return prop.monthly_rent_total * 12.0


def calculate_operating_expense(prop: Property, gross_annual_rent: float) -> float:
    """Total annual operating expense under the property's expense model."""
    if prop.expense_mode is ExpenseMode.FLAT:
        return gross_annual_rent * (prop.operating_expense_rate / 100.0)

    return (
        prop.annual_taxes
        + prop.annual_insurance
        + prop.management_fee
        + prop.maintenance_reserve
        + sum(item.annual_amount for item in prop.other_expenses)
    )


def compute_metrics(prop: Property) -> DealMetrics | None:
    """Compute year-one deal metrics.

    Returns None when the purchase price is not positive or the rent roll
    is empty. That is a valid "not enough data" outcome, not an error.
    """
    if prop.purchase_price <= 0 or not prop.rent_roll:
        return None

    gross_annual_rent = calculate_gross_annual_rent(prop)
    operating_expense = calculate_operating_expense(prop, gross_annual_rent)
    noi = gross_annual_rent - operating_expense

    loan_amount = calculate_loan_amount(prop.purchase_price, prop.down_payment_percent)
    monthly_debt_service = calculate_monthly_payment(
        loan_amount, prop.interest_rate, prop.loan_term_years * 12
    )
    annual_debt_service = monthly_debt_service * 12.0
    annual_cash_flow = noi - annual_debt_service

    down_payment = prop.purchase_price * (prop.down_payment_percent / 100.0)
    closing_costs = prop.purchase_price * (prop.closing_cost_rate / 100.0)
    total_cash_invested = down_payment + closing_costs + prop.reno_budget

    # Nothing invested: report 0 rather than dividing by zero
    cash_on_cash = annual_cash_flow / total_cash_invested if total_cash_invested > 0 else 0.0
    cap_rate = noi / prop.purchase_price
    dcr = noi / annual_debt_service if annual_debt_service > 0 else None

    metrics = DealMetrics(
        gross_annual_rent=gross_annual_rent,
        total_operating_expense=operating_expense,
        net_operating_income=noi,
        loan_amount=loan_amount,
        monthly_debt_service=monthly_debt_service,
        annual_debt_service=annual_debt_service,
        annual_cash_flow=annual_cash_flow,
        down_payment=down_payment,
        closing_costs=closing_costs,
        total_cash_invested=total_cash_invested,
        cash_on_cash=cash_on_cash,
        cap_rate=cap_rate,
        debt_coverage_ratio=dcr,
    )
    log.debug("metrics_computed", property_id=prop.id, noi=noi, dcr=dcr)
    return metrics


def mortgage_breakdown(
    purchase_price: float,
    down_payment_percent: float,
    interest_rate: float,
    term_years: float,
    annual_taxes: float,
    annual_insurance: float,
) -> MortgageBreakdown | None:
    """Year-one housing payment split into principal, interest, taxes and insurance.

    Args:
        purchase_price: Purchase price in $
        down_payment_percent: Down payment as % of price (0-100)
        interest_rate: Annual interest rate %
        term_years: Loan term in years
        annual_taxes: Annual property taxes in $
        annual_insurance: Annual insurance in $

    Returns:
        MortgageBreakdown, or None when the loan cannot be amortized (no
        price, no term, or a non-positive rate on a financed purchase).
        A 100% down payment yields taxes and insurance only.

    Raises:
        InvalidParameterError: For negative taxes/insurance or a down
            payment outside 0-100.
    """
    if not 0.0 <= down_payment_percent <= 100.0:
        raise InvalidParameterError("down_payment_percent", down_payment_percent, "must be between 0 and 100")
    if annual_taxes < 0:
        raise InvalidParameterError("annual_taxes", annual_taxes, "must not be negative")
    if annual_insurance < 0:
        raise InvalidParameterError("annual_insurance", annual_insurance, "must not be negative")

    if purchase_price <= 0 or term_years <= 0:
        return None

    cash_purchase = down_payment_percent >= 100.0
    if interest_rate <= 0 and not cash_purchase:
        return None

    months = int(round(term_years * 12))
    loan_amount = 0.0 if cash_purchase else calculate_loan_amount(purchase_price, down_payment_percent)
    monthly_pi = calculate_monthly_payment(loan_amount, interest_rate, months)
    annual_principal, annual_interest = calculate_first_year_amortization(
        loan_amount, interest_rate, months
    )

    monthly_taxes = annual_taxes / 12.0
    monthly_insurance = annual_insurance / 12.0

    return MortgageBreakdown(
        monthly_principal=annual_principal / 12.0,
        monthly_interest=annual_interest / 12.0,
        monthly_taxes=monthly_taxes,
        monthly_insurance=monthly_insurance,
        monthly_total=monthly_pi + monthly_taxes + monthly_insurance,
        annual_principal=annual_principal,
        annual_interest=annual_interest,
        annual_taxes=annual_taxes,
        annual_insurance=annual_insurance,
        annual_total=monthly_pi * 12.0 + annual_taxes + annual_insurance,
    )


def mortgage_breakdown_for(prop: Property) -> MortgageBreakdown | None:
    """mortgage_breakdown() using the property's own financing terms."""
    return mortgage_breakdown(
        purchase_price=prop.purchase_price,
        down_payment_percent=prop.down_payment_percent,
        interest_rate=prop.interest_rate,
        term_years=prop.loan_term_years,
        annual_taxes=prop.annual_taxes,
        annual_insurance=prop.annual_insurance,
    )


def maximum_allowable_offer(prop: Property, target_dcr: float) -> float | None:
    """Highest purchase price that still reaches target_dcr.

    NOI does not depend on the price, so the ceiling is the loan whose
    debt service equals NOI / target_dcr, grossed up by the loan-to-value.
    """
    if target_dcr <= 0:
        return None

    metrics = compute_metrics(prop)
    if metrics is None:
        return None

    payment_per_dollar = annual_payment_per_loan_dollar(prop.interest_rate, prop.loan_term_years)
    if payment_per_dollar <= 0:
        return None

    ltv = 1.0 - prop.down_payment_percent / 100.0
    if ltv <= 0:
        return None

    max_loan = (metrics.net_operating_income / target_dcr) / payment_per_dollar
    return max(max_loan / ltv, 0.0)
