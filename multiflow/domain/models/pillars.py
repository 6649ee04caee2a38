"""Pillar evaluation models.

Each pillar is an independent investment-quality check. ``NEEDS_INPUT``
means the evaluator lacked data; it is not a failed check.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field, field_validator


class Pillar(str, Enum):
    CASH_FLOW = "cash_flow"
    MORTGAGE_PAYDOWN = "mortgage_paydown"
    EQUITY = "equity"
    TAX_INCENTIVES = "tax_incentives"

    @property
    def display_name(self) -> str:
        return _PILLAR_TITLES[self]


_PILLAR_TITLES = {
    Pillar.CASH_FLOW: "Cash Flow",
    Pillar.MORTGAGE_PAYDOWN: "Mortgage Paydown",
    Pillar.EQUITY: "Equity",
    Pillar.TAX_INCENTIVES: "Tax Incentives",
}

PILLAR_ORDER = (
    Pillar.CASH_FLOW,
    Pillar.MORTGAGE_PAYDOWN,
    Pillar.EQUITY,
    Pillar.TAX_INCENTIVES,
)


class PillarStatus(str, Enum):
    MET = "met"
    NOT_MET = "not_met"
    BORDERLINE = "borderline"
    NEEDS_INPUT = "needs_input"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    PillarStatus.MET: "Met",
    PillarStatus.NOT_MET: "Not Met",
    PillarStatus.BORDERLINE: "Borderline",
    PillarStatus.NEEDS_INPUT: "Needs Inputs",
}


class PillarResult(BaseModel):
    """Outcome of a single pillar check with optional proof values."""

    pillar: Pillar
    status: PillarStatus
    detail: str
    value: float | None = None
    monthly_value: float | None = None
    annual_value: float | None = None
    threshold_value: float | None = None

    model_config = {
        "frozen": True,
    }

    @property
    def is_evaluated(self) -> bool:
        return self.status is not PillarStatus.NEEDS_INPUT


class PillarEvaluation(BaseModel):
    """The four pillar results in fixed order."""

    results: tuple[PillarResult, ...] = Field(..., min_length=4, max_length=4)

    model_config = {
        "frozen": True,
    }

    @field_validator("results")
    @classmethod
    def validate_order(cls, v: tuple[PillarResult, ...]) -> tuple[PillarResult, ...]:
        """Results must follow cash flow, paydown, equity, tax order."""
        if tuple(r.pillar for r in v) != PILLAR_ORDER:
            raise ValueError("pillar results must be ordered cash_flow, mortgage_paydown, equity, tax_incentives")
        return v

    def get(self, pillar: Pillar) -> PillarResult:
        return self.results[PILLAR_ORDER.index(pillar)]

    @property
    def cash_flow(self) -> PillarResult:
        return self.get(Pillar.CASH_FLOW)

    @computed_field
    @property
    def met_pillars(self) -> list[Pillar]:
        return [r.pillar for r in self.results if r.status is PillarStatus.MET]

    @property
    def evaluated(self) -> list[PillarResult]:
        """Results that are not waiting on input."""
        return [r for r in self.results if r.is_evaluated]

    @property
    def met_ratio(self) -> float:
        """Share of evaluated pillars that are met; 0.0 if none were evaluated."""
        pool = self.evaluated
        if not pool:
            return 0.0
        return len([r for r in pool if r.status is PillarStatus.MET]) / len(pool)
