"""Market defaults and comfort-level presets.

Values reflect California purchase conditions for 2026. Components receive a
``MarketDefaults`` instance explicitly instead of reading module state, so
tests and alternate markets can inject their own.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class MarketDefaults(BaseModel):
    """Regional lending and operating assumptions."""

    property_tax_rate: float = Field(default=0.0125, description="Effective property tax rate")
    conforming_loan_limit: float = Field(default=832_750.0, description="FHFA baseline limit")
    conforming_loan_limit_high_cost: float = Field(
        default=1_249_125.0, description="FHFA limit for high-cost counties"
    )
    closing_cost_rate: float = Field(default=0.03)
    pmi_rate: float = Field(default=0.007, description="Annual mortgage insurance rate")
    homeowners_insurance_rate: float = Field(default=0.0035, description="Annual, of home value")
    default_interest_rate: float = Field(default=0.0675)
    default_loan_term_years: int = Field(default=30)
    front_end_dti_target: float = Field(default=0.28)
    back_end_dti_target: float = Field(default=0.36)
    back_end_dti_max: float = Field(default=0.43, description="Absolute max most lenders accept")
    vacancy_rate: float = Field(default=0.05)
    maintenance_rate: float = Field(default=0.01)
    management_fee: float = Field(default=0.0)
    annual_insurance: float = Field(default=1500.0)
    appreciation_rate: float = Field(default=0.03)
    max_ltv_without_pmi: float = Field(default=0.8)

    model_config = {"frozen": True}

    def conforming_limit(self, is_high_cost_area: bool) -> float:
        """Conforming loan ceiling for the area type."""
        if is_high_cost_area:
            return self.conforming_loan_limit_high_cost
        return self.conforming_loan_limit


class ComfortPreset(BaseModel):
    """Debt-to-income targets and income cushion for one comfort level."""

    label: str
    front_end_dti: float = Field(..., gt=0, lt=1)
    back_end_dti: float = Field(..., gt=0, lt=1)
    buffer_rate: float = Field(..., gt=0, lt=1)

    model_config = {"frozen": True}


DEFAULT_MARKET = MarketDefaults()

DEFAULT_COMFORT_LEVEL = "standard"

COMFORT_PRESETS: dict[str, ComfortPreset] = {
    "conservative": ComfortPreset(
        label="Conservative", front_end_dti=0.25, back_end_dti=0.33, buffer_rate=0.15
    ),
    "standard": ComfortPreset(
        label="Standard", front_end_dti=0.28, back_end_dti=0.36, buffer_rate=0.10
    ),
    "aggressive": ComfortPreset(
        label="Aggressive", front_end_dti=0.31, back_end_dti=0.43, buffer_rate=0.05
    ),
}

# DTI status bands (front-end, back-end)
DTI_EXCELLENT = (0.28, 0.36)
DTI_ACCEPTABLE = (0.31, 0.43)
