"""Values supplied by external collaborators.

The engines never fetch these themselves; callers pass them in.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from multiflow.core.settings import get_settings


class ValuationSignal(BaseModel):
    """Comparable-value estimate from a market data provider."""

    estimated_value: float | None = Field(None, description="Estimated market value in $")
    source: str = Field(default="unknown")

    @property
    def is_usable(self) -> bool:
        return self.estimated_value is not None and self.estimated_value > 0


class EntitlementTier(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


class Entitlement(BaseModel):
    """Subscription state gating offer quotas."""

    tier: EntitlementTier = EntitlementTier.FREE
    offer_limit: int = Field(..., ge=0)

    @property
    def is_premium(self) -> bool:
        return self.tier is EntitlementTier.PREMIUM

    @classmethod
    def for_tier(cls, tier: EntitlementTier) -> Entitlement:
        settings = get_settings()
        limit = settings.premium_offer_limit if tier is EntitlementTier.PREMIUM else settings.free_offer_limit
        return cls(tier=tier, offer_limit=limit)

    @classmethod
    def free(cls) -> Entitlement:
        return cls.for_tier(EntitlementTier.FREE)

    @classmethod
    def premium(cls) -> Entitlement:
        return cls.for_tier(EntitlementTier.PREMIUM)
