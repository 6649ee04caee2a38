"""Scenario labs.

What-if overlays on a baseline property: mortgage terms, and cash-to-close
structure. Each run recomputes metrics and grade for a copy of the
property and diffs it against the baseline. Nothing here mutates or
persists the baseline; "apply" returns the updated property for the
caller to save.
"""

from __future__ import annotations

from typing import Any

import pandas as pd
from pydantic import BaseModel, Field, computed_field

from multiflow.application.services.evaluation import PropertyEvaluation, evaluate_property
from multiflow.core.settings import get_settings
from multiflow.domain.calculator.grading import grade_tier_delta
from multiflow.domain.calculator.metrics import mortgage_breakdown
from multiflow.domain.models.grade_profile import GradeProfile
from multiflow.domain.models.metrics import DealMetrics, MortgageBreakdown
from multiflow.domain.models.property import Property
from multiflow.domain.models.signals import ValuationSignal

# Down payment presets offered by the mortgage lab
MORTGAGE_PRESETS = {
    "Low DP": 15.0,
    "Conservative": 25.0,
    "Aggressive": 35.0,
}

COMPARED_METRICS = (
    "gross_annual_rent",
    "total_operating_expense",
    "net_operating_income",
    "annual_debt_service",
    "annual_cash_flow",
    "monthly_cash_flow",
    "total_cash_invested",
    "cash_on_cash",
    "cap_rate",
    "debt_coverage_ratio",
)


class MortgageScenario(BaseModel):
    """Mortgage terms overlay."""

    down_payment_percent: float = Field(..., ge=0, le=100)
    interest_rate: float = Field(..., ge=0)
    term_years: int = Field(..., gt=0)
    annual_taxes: float = Field(default=0.0, ge=0)
    annual_insurance: float = Field(default=0.0, ge=0)

    model_config = {
        "frozen": True,
    }

    @classmethod
    def from_property(cls, prop: Property) -> MortgageScenario:
        return cls(
            down_payment_percent=prop.down_payment_percent,
            interest_rate=prop.interest_rate,
            term_years=prop.loan_term_years,
            annual_taxes=prop.annual_taxes,
            annual_insurance=prop.annual_insurance,
        )

    def with_preset(self, name: str) -> MortgageScenario:
        """Same terms with one of the named down payment presets."""
        return self.model_copy(update={"down_payment_percent": MORTGAGE_PRESETS[name]})

    def property_update(self) -> dict[str, Any]:
        return {
            "down_payment_percent": self.down_payment_percent,
            "interest_rate": self.interest_rate,
            "loan_term_years": self.term_years,
            "annual_taxes": self.annual_taxes,
            "annual_insurance": self.annual_insurance,
        }


class CashToCloseScenario(BaseModel):
    """Cash-to-close overlay."""

    down_payment_percent: float = Field(..., ge=0, le=100)
    closing_cost_rate: float = Field(..., ge=0, le=100)
    reno_reserve: float = Field(default=0.0, ge=0)

    model_config = {
        "frozen": True,
    }

    @classmethod
    def from_property(cls, prop: Property) -> CashToCloseScenario:
        return cls(
            down_payment_percent=prop.down_payment_percent,
            closing_cost_rate=prop.closing_cost_rate,
            reno_reserve=prop.reno_budget,
        )

    def property_update(self) -> dict[str, Any]:
        return {
            "down_payment_percent": self.down_payment_percent,
            "closing_cost_rate": self.closing_cost_rate,
            "reno_budget": self.reno_reserve,
        }


class CashToClose(BaseModel):
    """Cash needed at closing, by component."""

    down_payment: float
    closing_costs: float
    reno_reserve: float

    @computed_field
    @property
    def total(self) -> float:
        return self.down_payment + self.closing_costs + self.reno_reserve

    @classmethod
    def for_overlay(cls, purchase_price: float, overlay: CashToCloseScenario) -> CashToClose:
        return cls(
            down_payment=max(purchase_price * overlay.down_payment_percent / 100.0, 0.0),
            closing_costs=max(purchase_price * overlay.closing_cost_rate / 100.0, 0.0),
            reno_reserve=max(overlay.reno_reserve, 0.0),
        )


class ScenarioComparison(BaseModel):
    """Baseline vs scenario evaluation with per-metric deltas."""

    baseline: PropertyEvaluation
    scenario: PropertyEvaluation
    metric_deltas: dict[str, float | None]
    grade_tier_delta: int

    @property
    def grade_change_label(self) -> str:
        if self.grade_tier_delta == 0:
            return "No grade change"
        if self.grade_tier_delta > 0:
            return f"+{self.grade_tier_delta} tier"
        return f"{self.grade_tier_delta} tier"

    def to_frame(self) -> pd.DataFrame:
        """Side-by-side table of compared metrics for display or export."""
        rows = []
        for name in COMPARED_METRICS:
            rows.append({
                "metric": name,
                "baseline": _metric(self.baseline.metrics, name),
                "scenario": _metric(self.scenario.metrics, name),
                "delta": self.metric_deltas.get(name),
            })
        return pd.DataFrame(rows).set_index("metric")


class MortgageScenarioResult(ScenarioComparison):
    overlay: MortgageScenario
    baseline_breakdown: MortgageBreakdown | None
    scenario_breakdown: MortgageBreakdown | None

    @property
    def monthly_total_delta(self) -> float | None:
        if self.baseline_breakdown is None or self.scenario_breakdown is None:
            return None
        return self.scenario_breakdown.monthly_total - self.baseline_breakdown.monthly_total


class CashToCloseScenarioResult(ScenarioComparison):
    overlay: CashToCloseScenario
    baseline_cash: CashToClose
    scenario_cash: CashToClose

    @property
    def cash_needed_delta(self) -> float:
        return self.scenario_cash.total - self.baseline_cash.total


class SensitivityResult(BaseModel):
    """Monthly payment change under simple stresses. None when not computable."""

    rate_stress_points: float
    tax_stress_pct: float
    rate_delta_monthly: float | None
    tax_delta_monthly: float | None


def _metric(metrics: DealMetrics | None, name: str) -> float | None:
    if metrics is None:
        return None
    return getattr(metrics, name)


def metric_deltas(
    baseline: DealMetrics | None,
    scenario: DealMetrics | None,
) -> dict[str, float | None]:
    """Scenario minus baseline for each compared metric.

    A delta is None when either side lacks the value (no metrics, or a
    debt-free DCR).
    """
    deltas: dict[str, float | None] = {}
    for name in COMPARED_METRICS:
        before = _metric(baseline, name)
        after = _metric(scenario, name)
        deltas[name] = None if before is None or after is None else after - before
    return deltas


def _overlay_property(baseline: Property, update: dict[str, Any]) -> Property:
    return Property.model_validate({**baseline.model_dump(), **update})


def _compare(
    baseline_eval: PropertyEvaluation,
    scenario_eval: PropertyEvaluation,
) -> dict[str, Any]:
    return {
        "baseline": baseline_eval,
        "scenario": scenario_eval,
        "metric_deltas": metric_deltas(baseline_eval.metrics, scenario_eval.metrics),
        "grade_tier_delta": grade_tier_delta(baseline_eval.grade, scenario_eval.grade),
    }


def mortgage_scenario(
    baseline: Property,
    overlay: MortgageScenario,
    profile: GradeProfile,
    valuation: ValuationSignal | None = None,
) -> MortgageScenarioResult:
    """Evaluate the baseline property under different mortgage terms.

    Taxes and insurance in the overlay feed the payment breakdown; they
    change NOI only when the property uses the detailed expense model.
    """
    scenario_prop = _overlay_property(baseline, overlay.property_update())
    baseline_eval = evaluate_property(baseline, profile, valuation)
    scenario_eval = evaluate_property(scenario_prop, profile, valuation)

    return MortgageScenarioResult(
        overlay=overlay,
        baseline_breakdown=baseline_eval.mortgage,
        scenario_breakdown=mortgage_breakdown(
            purchase_price=baseline.purchase_price,
            down_payment_percent=overlay.down_payment_percent,
            interest_rate=overlay.interest_rate,
            term_years=overlay.term_years,
            annual_taxes=overlay.annual_taxes,
            annual_insurance=overlay.annual_insurance,
        ),
        **_compare(baseline_eval, scenario_eval),
    )


def apply_mortgage_scenario(baseline: Property, overlay: MortgageScenario) -> Property:
    """New property carrying the overlay's terms, for the caller to persist."""
    return _overlay_property(baseline, overlay.property_update())


def mortgage_sensitivity(
    purchase_price: float,
    overlay: MortgageScenario,
    rate_stress_points: float | None = None,
    tax_stress_pct: float | None = None,
) -> SensitivityResult:
    """Monthly total change from a rate bump and from a tax increase."""
    settings = get_settings()
    if rate_stress_points is None:
        rate_stress_points = settings.rate_stress_points
    if tax_stress_pct is None:
        tax_stress_pct = settings.tax_stress_pct

    def breakdown(rate: float, taxes: float) -> MortgageBreakdown | None:
        return mortgage_breakdown(
            purchase_price=purchase_price,
            down_payment_percent=overlay.down_payment_percent,
            interest_rate=rate,
            term_years=overlay.term_years,
            annual_taxes=taxes,
            annual_insurance=overlay.annual_insurance,
        )

    base = breakdown(overlay.interest_rate, overlay.annual_taxes)
    rate_stressed = breakdown(overlay.interest_rate + rate_stress_points, overlay.annual_taxes)
    tax_stressed = breakdown(overlay.interest_rate, overlay.annual_taxes * (1.0 + tax_stress_pct / 100.0))

    return SensitivityResult(
        rate_stress_points=rate_stress_points,
        tax_stress_pct=tax_stress_pct,
        rate_delta_monthly=None if base is None or rate_stressed is None
        else rate_stressed.monthly_total - base.monthly_total,
        tax_delta_monthly=None if base is None or tax_stressed is None
        else tax_stressed.monthly_total - base.monthly_total,
    )


def cash_to_close_scenario(
    baseline: Property,
    overlay: CashToCloseScenario,
    profile: GradeProfile,
    valuation: ValuationSignal | None = None,
) -> CashToCloseScenarioResult:
    """Evaluate the baseline property under a different cash-to-close structure."""
    scenario_prop = _overlay_property(baseline, overlay.property_update())
    baseline_eval = evaluate_property(baseline, profile, valuation)
    scenario_eval = evaluate_property(scenario_prop, profile, valuation)

    return CashToCloseScenarioResult(
        overlay=overlay,
        baseline_cash=CashToClose.for_overlay(baseline.purchase_price, CashToCloseScenario.from_property(baseline)),
        scenario_cash=CashToClose.for_overlay(baseline.purchase_price, overlay),
        **_compare(baseline_eval, scenario_eval),
    )


def apply_cash_to_close_scenario(baseline: Property, overlay: CashToCloseScenario) -> Property:
    """New property carrying the overlay's cash structure, for the caller to persist."""
    return _overlay_property(baseline, overlay.property_update())
