"""Property evaluation pipeline.

Property -> DealMetrics -> PillarEvaluation -> Grade, with the blended
score and mortgage breakdown attached for display.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from multiflow.core.logging import get_logger
from multiflow.domain.calculator.grading import deal_score, grade_deal
from multiflow.domain.calculator.metrics import (
    compute_metrics,
    maximum_allowable_offer,
    mortgage_breakdown_for,
)
from multiflow.domain.calculator.pillars import evaluate_pillars
from multiflow.domain.models.grade_profile import GradeProfile
from multiflow.domain.models.metrics import DealMetrics, Grade, MortgageBreakdown
from multiflow.domain.models.pillars import Pillar, PillarEvaluation, PillarStatus
from multiflow.domain.models.property import Property
from multiflow.domain.models.signals import ValuationSignal

if TYPE_CHECKING:
    from multiflow.application.services.grade_profiles import GradeProfileStore

log = get_logger(__name__)


class PropertyEvaluation(BaseModel):
    """Everything the UI and export layers show for one property."""

    property_id: str | None = None
    profile_name: str
    metrics: DealMetrics | None
    mortgage: MortgageBreakdown | None
    pillars: PillarEvaluation
    grade: Grade
    score: float | None
    maximum_allowable_offer: float | None = None

    model_config = {
        "frozen": True,
    }


def evaluate_property(
    prop: Property,
    profile: GradeProfile,
    valuation: ValuationSignal | None = None,
) -> PropertyEvaluation:
    """Run the full pipeline for a property under an explicit profile."""
    metrics = compute_metrics(prop)
    breakdown = mortgage_breakdown_for(prop)
    pillars = evaluate_pillars(metrics, prop, profile, valuation)
    grade = grade_deal(metrics, pillars, profile)

    paydown = pillars.get(Pillar.MORTGAGE_PAYDOWN)
    annual_paydown = paydown.value if paydown.status is PillarStatus.MET and paydown.value else 0.0

    return PropertyEvaluation(
        property_id=prop.id,
        profile_name=profile.name,
        metrics=metrics,
        mortgage=breakdown,
        pillars=pillars,
        grade=grade,
        score=deal_score(metrics, prop, profile, annual_paydown),
        maximum_allowable_offer=maximum_allowable_offer(prop, profile.target_dcr),
    )


class DealEvaluator:
    """Evaluates properties against the owner's active grade profile.

    The profile store is injected; without one the built-in profile is used.
    """

    def __init__(self, profile_store: GradeProfileStore | None = None):
        self.profile_store = profile_store

    def active_profile(self, prop: Property) -> GradeProfile:
        if self.profile_store is None or prop.user_id is None:
            return GradeProfile.builtin()
        return self.profile_store.active_profile(prop.user_id, prop.grade_profile_id)

    def evaluate(
        self,
        prop: Property,
        valuation: ValuationSignal | None = None,
    ) -> PropertyEvaluation:
        profile = self.active_profile(prop)
        result = evaluate_property(prop, profile, valuation)
        log.info(
            "property_evaluated",
            property_id=prop.id,
            profile=profile.name,
            grade=result.grade.value,
            has_metrics=result.metrics is not None,
        )
        return result
