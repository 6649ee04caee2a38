"""Pillar evaluator.

Four independent checks derived from DealMetrics and the Property. Missing
inputs produce NEEDS_INPUT, never NOT_MET.
"""

from __future__ import annotations

from multiflow.core.financial import calculate_loan_amount
from multiflow.core.formatting import format_currency, format_signed_currency
from multiflow.core.settings import get_settings
from multiflow.domain.calculator.metrics import mortgage_breakdown_for
from multiflow.domain.models.grade_profile import GradeProfile
from multiflow.domain.models.metrics import DealMetrics, MortgageBreakdown
from multiflow.domain.models.pillars import Pillar, PillarEvaluation, PillarResult, PillarStatus
from multiflow.domain.models.property import Property
from multiflow.domain.models.signals import ValuationSignal


def evaluate_cash_flow(metrics: DealMetrics | None, profile: GradeProfile) -> PillarResult:
    """Monthly cash flow against the profile floor, with a borderline band below it."""
    if metrics is None:
        return PillarResult(
            pillar=Pillar.CASH_FLOW,
            status=PillarStatus.NEEDS_INPUT,
            detail="Add a purchase price and at least one rent unit to evaluate.",
        )

    monthly = metrics.monthly_cash_flow
    floor = profile.cash_flow_floor
    buffer = profile.cash_flow_buffer

    if monthly >= floor:
        status = PillarStatus.MET
    elif buffer > 0 and monthly >= floor - buffer:
        status = PillarStatus.BORDERLINE
    else:
        status = PillarStatus.NOT_MET

    return PillarResult(
        pillar=Pillar.CASH_FLOW,
        status=status,
        detail=f"Delta vs threshold: {format_signed_currency(monthly - floor)}/mo",
        value=metrics.annual_cash_flow,
        monthly_value=monthly,
        annual_value=metrics.annual_cash_flow,
        threshold_value=floor,
    )


def evaluate_mortgage_paydown(prop: Property, breakdown: MortgageBreakdown | None) -> PillarResult:
    loan_amount = calculate_loan_amount(prop.purchase_price, prop.down_payment_percent)

    if prop.is_cash_purchase or loan_amount <= 0:
        return PillarResult(
            pillar=Pillar.MORTGAGE_PAYDOWN,
            status=PillarStatus.NOT_MET,
            detail="No mortgage: nothing is paid down.",
            value=0.0,
        )
    if breakdown is None:
        return PillarResult(
            pillar=Pillar.MORTGAGE_PAYDOWN,
            status=PillarStatus.NOT_MET,
            detail="Mortgage cannot be amortized with the current rate and term.",
        )

    paydown = breakdown.annual_principal
    return PillarResult(
        pillar=Pillar.MORTGAGE_PAYDOWN,
        status=PillarStatus.MET if paydown > 0 else PillarStatus.NOT_MET,
        detail=f"Year 1 principal paydown: {format_currency(paydown)}",
        value=paydown,
        monthly_value=breakdown.monthly_principal,
        annual_value=paydown,
    )


def evaluate_equity(
    prop: Property,
    profile: GradeProfile,
    valuation: ValuationSignal | None,
    annual_paydown: float,
) -> PillarResult:
    """Built-in equity from an external market value estimate."""
    if valuation is None or not valuation.is_usable or prop.purchase_price <= 0:
        return PillarResult(
            pillar=Pillar.EQUITY,
            status=PillarStatus.NEEDS_INPUT,
            detail="Add a market value estimate to evaluate equity.",
        )

    built_in = valuation.estimated_value - prop.purchase_price
    equity_pct = built_in / prop.purchase_price * 100.0
    threshold = prop.purchase_price * profile.min_equity_percent / 100.0
    met = built_in > 0 and equity_pct >= profile.min_equity_percent

    appreciation = max(prop.purchase_price * ((prop.appreciation_rate or 0.0) / 100.0), 0.0)
    equity_gain = appreciation + annual_paydown

    detail = (
        f"Built-in equity: {format_currency(built_in)} ({equity_pct:.1f}% of price). "
        f"Year 1 equity gain: {format_currency(equity_gain)} "
        f"(Appreciation: {format_currency(appreciation)} + Paydown: {format_currency(annual_paydown)})"
    )
    return PillarResult(
        pillar=Pillar.EQUITY,
        status=PillarStatus.MET if met else PillarStatus.NOT_MET,
        detail=detail,
        value=built_in,
        annual_value=equity_gain,
        threshold_value=threshold,
    )


def evaluate_tax_incentives(
    prop: Property,
    profile: GradeProfile,
    depreciation_years: float | None = None,
) -> PillarResult:
    """Depreciation tax shield from the marginal rate and land value split."""
    if prop.marginal_tax_rate is None or prop.land_value_percent is None:
        return PillarResult(
            pillar=Pillar.TAX_INCENTIVES,
            status=PillarStatus.NEEDS_INPUT,
            detail="Add marginal tax rate and land value % to evaluate.",
        )

    years = depreciation_years or get_settings().depreciation_years
    basis = max(prop.purchase_price * (1.0 - prop.land_value_percent / 100.0), 0.0)
    annual_depreciation = basis / years
    benefit = annual_depreciation * (prop.marginal_tax_rate / 100.0)

    return PillarResult(
        pillar=Pillar.TAX_INCENTIVES,
        status=PillarStatus.MET if benefit > profile.min_tax_benefit else PillarStatus.NOT_MET,
        detail=f"Estimated annual tax benefit: {format_currency(benefit)}",
        value=benefit,
        monthly_value=benefit / 12.0,
        annual_value=benefit,
        threshold_value=profile.min_tax_benefit,
    )


def evaluate_pillars(
    metrics: DealMetrics | None,
    prop: Property,
    profile: GradeProfile,
    valuation: ValuationSignal | None = None,
) -> PillarEvaluation:
    """Run all four pillar checks in their fixed order.

    Args:
        metrics: Output of compute_metrics (None when inputs are missing)
        prop: The property being evaluated
        profile: Active grade profile
        valuation: Optional market value estimate for the equity pillar

    Returns:
        PillarEvaluation ordered cash flow, paydown, equity, tax.
    """
    breakdown = mortgage_breakdown_for(prop)
    paydown = evaluate_mortgage_paydown(prop, breakdown)
    annual_paydown = paydown.value if paydown.status is PillarStatus.MET and paydown.value else 0.0

    return PillarEvaluation(results=(
        evaluate_cash_flow(metrics, profile),
        paydown,
        evaluate_equity(prop, profile, valuation, annual_paydown),
        evaluate_tax_incentives(prop, profile),
    ))
