"""Household financial profile and loan terms.

Both are owned by the session: the ranker snapshots them into ``ViewInputs``
before every pass.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field, field_validator

from homefit.core.constants import COMFORT_PRESETS, DEFAULT_COMFORT_LEVEL, ComfortPreset

ComfortLevel = Literal["conservative", "standard", "aggressive"]


class FinancialProfile(BaseModel):
    """Household income, obligations and savings."""

    gross_annual_income: float = Field(default=0.0, ge=0, description="Gross income per year in $")
    monthly_debts: float = Field(default=0.0, ge=0, description="Car, student, card minimums in $")
    monthly_other_expenses: float = Field(default=0.0, ge=0, description="Non-debt spending in $")
    current_rent: float = Field(default=0.0, ge=0, description="Rent paid today in $")
    savings_available: float = Field(default=0.0, ge=0, description="Cash for down payment + closing")
    monthly_savings_rate: float = Field(default=0.0, ge=0, description="New savings per month in $")
    effective_tax_rate: float = Field(default=0.30, ge=0, lt=1, description="Share of gross lost to tax")
    comfort_level: ComfortLevel = Field(default="standard")

    model_config = {"frozen": True}

    @field_validator("comfort_level", mode="before")
    @classmethod
    def resolve_comfort_level(cls, v: object) -> str:
        """Unknown comfort levels fall back to the standard preset."""
        if isinstance(v, str) and v.strip().lower() in COMFORT_PRESETS:
            return v.strip().lower()
        return DEFAULT_COMFORT_LEVEL

    @computed_field
    @property
    def gross_monthly_income(self) -> float:
        return self.gross_annual_income / 12.0

    @computed_field
    @property
    def has_financials(self) -> bool:
        """Whether enough is known to judge affordability."""
        return self.gross_annual_income > 0 and self.savings_available > 0

    @property
    def comfort(self) -> ComfortPreset:
        return COMFORT_PRESETS[self.comfort_level]


class LoanTerms(BaseModel):
    """Financing applied uniformly to every property in a view."""

    interest_rate: float = Field(default=0.0675, ge=0, lt=1, description="Annual rate as a fraction")
    term_years: int = Field(default=30, gt=0, le=50)
    down_payment_pct: float = Field(default=20.0, ge=0, le=100, description="Percent of price")
    property_tax_rate: float = Field(default=0.0125, ge=0, lt=1, description="Annual, fraction of price")
    closing_cost_rate: float = Field(default=0.03, ge=0, lt=1, description="Fraction of price")
    is_high_cost_area: bool = Field(default=True, description="Selects the conforming loan ceiling")

    model_config = {"frozen": True}

    @property
    def down_payment_fraction(self) -> float:
        return self.down_payment_pct / 100.0
