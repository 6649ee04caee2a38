"""Property data model.

A property is the persisted input of the underwriting engines: purchase
terms, rent roll, operating expense model and financing terms.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field

from multiflow.core.settings import get_settings


class ExpenseMode(str, Enum):
    """How operating expenses are modelled."""

    FLAT = "flat"
    DETAILED = "detailed"


class RentUnit(BaseModel):
    """One unit of the rent roll."""

    monthly_rent: float = Field(..., ge=0, description="Monthly rent in $")
    unit_type: str = Field(default="Unit", description="Free-form label, e.g. 2BR")
    bedrooms: float | None = Field(None, ge=0)
    bathrooms: float | None = Field(None, ge=0)
    square_feet: float | None = Field(None, gt=0)


class OperatingExpenseItem(BaseModel):
    """Additional named annual expense used in detailed mode."""

    name: str
    annual_amount: float = Field(..., ge=0)


class Property(BaseModel):
    """Rental property under analysis."""

    id: str | None = None
    user_id: str | None = None
    address: str = Field(default="", description="Street address")

    # Purchase
    purchase_price: float = Field(..., description="Purchase price in $")
    rent_roll: list[RentUnit] = Field(default_factory=list)

    # Operating expenses
    expense_mode: ExpenseMode = Field(default=ExpenseMode.FLAT)
    operating_expense_rate: float = Field(
        default_factory=lambda: get_settings().default_operating_expense_rate_pct,
        ge=0,
        le=100,
        description="% of gross rent",
    )
    annual_taxes: float = Field(default=0.0, ge=0)
    annual_insurance: float = Field(default=0.0, ge=0)
    management_fee: float = Field(default=0.0, ge=0, description="Annual management fee in $")
    maintenance_reserve: float = Field(default=0.0, ge=0, description="Annual maintenance reserve in $")
    other_expenses: list[OperatingExpenseItem] = Field(default_factory=list)

    # Financing
    down_payment_percent: float = Field(default=25.0, ge=0, le=100)
    interest_rate: float = Field(default=7.0, ge=0, description="Annual interest rate %")
    loan_term_years: int = Field(default_factory=lambda: get_settings().default_loan_term_years, gt=0)
    closing_cost_rate: float = Field(default=0.0, ge=0, le=100, description="Closing costs as % of price")
    reno_budget: float = Field(default=0.0, ge=0)

    # Inputs for equity and tax pillars
    appreciation_rate: float | None = Field(None, description="Expected annual appreciation %")
    marginal_tax_rate: float | None = Field(None, ge=0, le=100)
    land_value_percent: float | None = Field(None, ge=0, le=100)

    grade_profile_id: str | None = None
    suggested_offer_price: float | None = Field(None, ge=0)

    model_config = {
        "frozen": True,
    }

    @computed_field
    @property
    def monthly_rent_total(self) -> float:
        """Sum of monthly rent across the rent roll."""
        return sum(unit.monthly_rent for unit in self.rent_roll)

    @property
    def is_cash_purchase(self) -> bool:
        return self.down_payment_percent >= 100.0
