"""Application services."""

from .evaluation import DealEvaluator, PropertyEvaluation, evaluate_property
from .exporter import EvaluationExporter
from .grade_profiles import GradeProfileStore
from .offer_tracker import OfferTracker
from .repository import (
    GradeProfileRepository,
    InMemoryGradeProfileRepository,
    InMemoryOfferRepository,
    OfferRepository,
)
from .scenario_lab import (
    MORTGAGE_PRESETS,
    CashToCloseScenario,
    CashToCloseScenarioResult,
    MortgageScenario,
    MortgageScenarioResult,
    apply_cash_to_close_scenario,
    apply_mortgage_scenario,
    cash_to_close_scenario,
    mortgage_scenario,
    mortgage_sensitivity,
)

__all__ = [
    "DealEvaluator",
    "PropertyEvaluation",
    "evaluate_property",
    "EvaluationExporter",
    "GradeProfileStore",
    "OfferTracker",
    "OfferRepository",
    "GradeProfileRepository",
    "InMemoryOfferRepository",
    "InMemoryGradeProfileRepository",
    "MORTGAGE_PRESETS",
    "MortgageScenario",
    "MortgageScenarioResult",
    "CashToCloseScenario",
    "CashToCloseScenarioResult",
    "mortgage_scenario",
    "apply_mortgage_scenario",
    "mortgage_sensitivity",
    "cash_to_close_scenario",
    "apply_cash_to_close_scenario",
]
