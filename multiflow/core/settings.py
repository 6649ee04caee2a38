"""Application settings with environment variable support.

Uses pydantic-settings for typed configuration validation.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")
    log_dir: Optional[str] = Field(default=None, description="Directory for rotating log files")

    # Underwriting defaults
    default_loan_term_years: int = Field(default=30, gt=0, le=50)
    default_operating_expense_rate_pct: float = Field(default=35.0, ge=0, le=100)
    default_cash_flow_floor: float = Field(default=500.0, ge=0, description="Monthly cash flow floor in $")
    depreciation_years: float = Field(default=27.5, gt=0, description="Residential depreciation schedule")

    # Entitlements
    free_offer_limit: int = Field(default=1, ge=0)
    premium_offer_limit: int = Field(default=999, ge=1)

    # Sensitivity stresses
    rate_stress_points: float = Field(default=0.5, description="Interest rate bump in points")
    tax_stress_pct: float = Field(default=5.0, description="Property tax bump in %")

    model_config = {
        "env_prefix": "MULTIFLOW_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
