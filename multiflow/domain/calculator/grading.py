"""Grading engine.

Maps metrics and pillar results to a letter grade, and computes the
blended 0-100 deal score shown next to it.
"""

from __future__ import annotations

import numpy as np

from multiflow.domain.models.grade_profile import GradeProfile
from multiflow.domain.models.metrics import DealMetrics, Grade
from multiflow.domain.models.pillars import PillarEvaluation, PillarStatus
from multiflow.domain.models.property import Property

# Met pillars required per tier
A_MIN_MET = 3
B_MIN_MET = 2
B_MIN_DCR = 1.0


def grade_deal(
    metrics: DealMetrics | None,
    evaluation: PillarEvaluation,
    profile: GradeProfile,
) -> Grade:
    """Assign a letter grade. First matching tier wins, highest first.

    Tiers count met pillars. NEEDS_INPUT pillars are never met, and never
    count as failed either. A deal without debt satisfies every DCR floor.
    """
    if metrics is None:
        return Grade.D_OR_F

    cash_flow = evaluation.cash_flow.status
    met_count = len(evaluation.met_pillars)

    if (
        metrics.meets_dcr(profile.target_dcr)
        and met_count >= A_MIN_MET
        and cash_flow is PillarStatus.MET
    ):
        return Grade.A

    if (
        metrics.meets_dcr(B_MIN_DCR)
        and met_count >= B_MIN_MET
        and cash_flow is not PillarStatus.NOT_MET
    ):
        return Grade.B

    if cash_flow in (PillarStatus.MET, PillarStatus.BORDERLINE):
        return Grade.C

    return Grade.D_OR_F


def grade_tier_delta(baseline: Grade, scenario: Grade) -> int:
    """Signed tier change, e.g. B -> A is +1."""
    return scenario.tier - baseline.tier


def _piecewise(value: float, xs: list[float], ys: list[float]) -> float:
    return float(np.interp(value, xs, ys))


def deal_score(
    metrics: DealMetrics | None,
    prop: Property,
    profile: GradeProfile,
    annual_principal_paydown: float = 0.0,
) -> float | None:
    """Blended 0-100 score weighted by the profile.

    Each metric is mapped onto 0-100 with a clamped piecewise-linear
    curve, then combined with the profile's normalised weights.

    Returns:
        Score rounded to one decimal, or None without metrics.
    """
    if metrics is None:
        return None

    coc_score = _piecewise(metrics.cash_on_cash, [0.00, 0.08, 0.12, 0.15], [0, 60, 85, 100])

    if metrics.debt_coverage_ratio is None:
        dcr_score = 100.0
    else:
        dcr_score = _piecewise(metrics.debt_coverage_ratio, [1.00, 1.20, 1.35, 1.50], [0, 60, 85, 100])

    lo, hi = profile.cap_rate_floor, max(profile.cap_rate_target, profile.cap_rate_floor + 1e-6)
    span = hi - lo
    cap_score = _piecewise(
        metrics.cap_rate,
        [lo, lo + span * 3 / 7, lo + span * 5 / 7, hi],
        [0, 60, 85, 100],
    )

    break_even = max(profile.cash_flow_floor * 12.0, 1.0)
    cash_flow_score = _piecewise(
        metrics.annual_cash_flow,
        [0.0, break_even, break_even + 5_000, break_even + 10_000],
        [0, 50, 80, 100],
    )

    appreciation = max(prop.purchase_price * ((prop.appreciation_rate or 0.0) / 100.0), 0.0)
    equity_ratio = (annual_principal_paydown + appreciation) / max(prop.purchase_price, 1.0)
    equity_score = _piecewise(equity_ratio, [0.00, 0.02, 0.04, 0.06], [0, 60, 85, 100])

    w = profile.normalized_weights()
    total = (
        coc_score * w.cash_on_cash
        + dcr_score * w.dcr
        + cap_score * w.cap_rate
        + cash_flow_score * w.cash_flow
        + equity_score * w.equity
    )
    return round(total, 1)
