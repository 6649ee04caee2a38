"""Pure underwriting and negotiation calculators."""

from .deadlines import deadline_items, next_deadline, revision_deadlines
from .grading import deal_score, grade_deal, grade_tier_delta
from .metrics import (
    compute_metrics,
    maximum_allowable_offer,
    mortgage_breakdown,
    mortgage_breakdown_for,
)
from .pillars import evaluate_pillars

__all__ = [
    "compute_metrics",
    "deadline_items",
    "deal_score",
    "evaluate_pillars",
    "grade_deal",
    "grade_tier_delta",
    "maximum_allowable_offer",
    "mortgage_breakdown",
    "mortgage_breakdown_for",
    "next_deadline",
    "revision_deadlines",
]
