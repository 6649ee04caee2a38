"""Grade profile model.

A grade profile carries the thresholds used by the pillar evaluator and
grading engine, plus the weights of the blended deal score.
"""

from __future__ import annotations

from typing import Iterable, NamedTuple

from pydantic import BaseModel, Field

from multiflow.core.settings import get_settings

BUILTIN_PROFILE_NAME = "Balanced"


class ScoreWeights(NamedTuple):
    cash_on_cash: float
    dcr: float
    cap_rate: float
    cash_flow: float
    equity: float


class GradeProfile(BaseModel):
    """Named set of grading thresholds and score weights."""

    id: str | None = None
    user_id: str | None = None
    name: str = Field(..., min_length=1)
    is_default: bool = False

    # Pillar / rubric thresholds
    cash_flow_floor: float = Field(default=500.0, ge=0, description="Monthly cash flow floor in $")
    cash_flow_borderline_pct: float = Field(default=10.0, ge=0, le=100, description="Band below the floor, % of floor")
    target_dcr: float = Field(default=1.25, gt=0)
    min_equity_percent: float = Field(default=0.0, description="Built-in equity as % of price")
    min_tax_benefit: float = Field(default=0.0, ge=0, description="Annual tax benefit in $")

    # Cap rate band used by the blended score
    cap_rate_floor: float = Field(default=0.03, ge=0)
    cap_rate_target: float = Field(default=0.10, gt=0)

    # Blended score weights (any positive scale, normalised on use)
    weight_cash_on_cash: float = Field(default=30.0, ge=0)
    weight_dcr: float = Field(default=25.0, ge=0)
    weight_cap_rate: float = Field(default=20.0, ge=0)
    weight_cash_flow: float = Field(default=15.0, ge=0)
    weight_equity_gain: float = Field(default=10.0, ge=0)

    color_hex: str = "#FFDD00FF"

    @property
    def cash_flow_buffer(self) -> float:
        """Width of the borderline band below the cash flow floor."""
        return self.cash_flow_floor * self.cash_flow_borderline_pct / 100.0

    def normalized_weights(self) -> ScoreWeights:
        """Weights rescaled to sum to 1.0."""
        raw = ScoreWeights(
            self.weight_cash_on_cash,
            self.weight_dcr,
            self.weight_cap_rate,
            self.weight_cash_flow,
            self.weight_equity_gain,
        )
        total = sum(raw)
        denom = total if total > 0 else 1.0
        return ScoreWeights(*(w / denom for w in raw))

    @classmethod
    def builtin(cls) -> GradeProfile:
        """Fallback profile used when the user has no default."""
        return cls(
            name=BUILTIN_PROFILE_NAME,
            cash_flow_floor=get_settings().default_cash_flow_floor,
        )


def resolve_profile(
    profiles: Iterable[GradeProfile],
    override_id: str | None = None,
) -> GradeProfile:
    """Pick the active profile for a property.

    Order: the property's override, then the default-flagged profile, then
    the built-in fallback. An override that no longer exists falls through.
    """
    profiles = list(profiles)
    if override_id:
        for p in profiles:
            if p.id == override_id:
                return p
    for p in profiles:
        if p.is_default:
            return p
    return GradeProfile.builtin()
