"""Data models for multiflow."""

from .grade_profile import GradeProfile, ScoreWeights, resolve_profile
from .metrics import GRADE_TIERS, DealMetrics, Grade, MortgageBreakdown
from .offer import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    ActivityType,
    DeadlineItem,
    DeadlineKind,
    OfferActivityEvent,
    OfferClientDecision,
    OfferComment,
    OfferDetail,
    OfferRevision,
    OfferRevisionDraft,
    OfferStatus,
    PropertyOffer,
    can_transition,
)
from .pillars import PILLAR_ORDER, Pillar, PillarEvaluation, PillarResult, PillarStatus
from .property import ExpenseMode, OperatingExpenseItem, Property, RentUnit
from .signals import Entitlement, EntitlementTier, ValuationSignal

__all__ = [
    "ALLOWED_TRANSITIONS",
    "ActivityType",
    "DealMetrics",
    "DeadlineItem",
    "DeadlineKind",
    "Entitlement",
    "EntitlementTier",
    "ExpenseMode",
    "GRADE_TIERS",
    "Grade",
    "GradeProfile",
    "MortgageBreakdown",
    "OfferActivityEvent",
    "OfferClientDecision",
    "OfferComment",
    "OfferDetail",
    "OfferRevision",
    "OfferRevisionDraft",
    "OfferStatus",
    "OperatingExpenseItem",
    "PILLAR_ORDER",
    "Pillar",
    "PillarEvaluation",
    "PillarResult",
    "PillarStatus",
    "Property",
    "PropertyOffer",
    "RentUnit",
    "ScoreWeights",
    "TERMINAL_STATUSES",
    "ValuationSignal",
    "can_transition",
    "resolve_profile",
]
