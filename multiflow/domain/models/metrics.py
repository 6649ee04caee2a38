"""Derived underwriting values.

DealMetrics and MortgageBreakdown are recomputed on demand and never
persisted on their own.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field


class Grade(str, Enum):
    """Letter grade, D and F collapsed into one tier."""

    A = "A"
    B = "B"
    C = "C"
    D_OR_F = "D/F"

    @property
    def tier(self) -> int:
        """Rank used for scenario deltas (A=3 ... D/F=0)."""
        return GRADE_TIERS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Grade):
            return NotImplemented
        return self.tier < other.tier

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Grade):
            return NotImplemented
        return self.tier <= other.tier

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Grade):
            return NotImplemented
        return self.tier > other.tier

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Grade):
            return NotImplemented
        return self.tier >= other.tier


GRADE_TIERS = {
    Grade.A: 3,
    Grade.B: 2,
    Grade.C: 1,
    Grade.D_OR_F: 0,
}


class DealMetrics(BaseModel):
    """Year-one underwriting metrics for a property."""

    gross_annual_rent: float
    total_operating_expense: float
    net_operating_income: float
    loan_amount: float
    monthly_debt_service: float
    annual_debt_service: float
    annual_cash_flow: float
    down_payment: float
    closing_costs: float
    total_cash_invested: float
    cash_on_cash: float = Field(..., description="Annual cash flow / total cash invested")
    cap_rate: float = Field(..., description="NOI / purchase price")
    debt_coverage_ratio: float | None = Field(
        ..., description="NOI / annual debt service; None when there is no debt"
    )

    model_config = {
        "frozen": True,
    }

    @computed_field
    @property
    def monthly_cash_flow(self) -> float:
        return self.annual_cash_flow / 12.0

    @property
    def has_debt(self) -> bool:
        return self.debt_coverage_ratio is not None

    def meets_dcr(self, floor: float) -> bool:
        """Check the DCR against a floor. Debt-free deals satisfy any floor."""
        if self.debt_coverage_ratio is None:
            return True
        return self.debt_coverage_ratio >= floor


class MortgageBreakdown(BaseModel):
    """Monthly and annual housing payment components for year one."""

    monthly_principal: float
    monthly_interest: float
    monthly_taxes: float
    monthly_insurance: float
    monthly_total: float
    annual_principal: float
    annual_interest: float
    annual_taxes: float
    annual_insurance: float
    annual_total: float

    model_config = {
        "frozen": True,
    }

    @property
    def monthly_principal_and_interest(self) -> float:
        return self.monthly_principal + self.monthly_interest
