"""Affordability result models.

Outputs of the affordability checker (one property against one household)
and of the max-price solver (one household against the market).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from homefit.models.metrics import PITIBreakdown

LimitingConstraint = Literal["cash", "income"]
DTIStatus = Literal["excellent", "acceptable", "risky"]


class AffordabilityResult(BaseModel):
    """Pass/fail of one property against cash and DTI limits.

    ``affordable`` is ``None`` when the profile has no usable income or
    savings; in that case the remaining fields keep their defaults.
    """

    affordable: bool | None = None
    can_afford_cash: bool | None = None
    can_afford_dti: bool | None = None
    total_cash_needed: float = 0.0
    cash_shortfall: float = 0.0
    back_end_dti: float = 0.0
    total_monthly_housing: float = 0.0
    is_jumbo: bool = False
    reasons: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class AffordabilityLimit(BaseModel):
    """Maximum affordable price and which constraint binds it."""

    max_price: float
    cash_constraint_price: float
    income_constraint_price: float
    limiting_constraint: LimitingConstraint
    monthly_housing_ceiling: float = Field(..., description="Income-derived cap on housing, may be <= 0")

    model_config = {"frozen": True}


class MonthlyHousingAtPrice(BaseModel):
    """PITI plus mortgage insurance at a solved price."""

    principal_interest: float
    taxes: float
    insurance: float
    mortgage_insurance: float
    total: float

    model_config = {"frozen": True}


class BuyingPower(BaseModel):
    """Household-level purchasing summary."""

    limit: AffordabilityLimit
    monthly_housing_budget: float
    housing_at_max_price: MonthlyHousingAtPrice | None = None
    monthly_cushion: float
    cash_needed_at_max_price: float
    months_to_afford: float = Field(..., description="0 when saved, inf when not saving")
    savings_progress: float = Field(..., ge=0, le=100)

    model_config = {"frozen": True}

    @property
    def max_price(self) -> float:
        return self.limit.max_price


class TargetPriceAssessment(BaseModel):
    """Full cost picture for one candidate purchase price."""

    price: float
    down_payment: float
    loan_amount: float
    ltv: float
    needs_mortgage_insurance: bool
    conforming_limit: float
    is_jumbo: bool
    piti: PITIBreakdown
    mortgage_insurance: float
    total_monthly_housing: float
    front_end_dti: float
    back_end_dti: float
    dti_status: DTIStatus
    closing_costs: float
    total_cash_needed: float
    savings_shortfall: float
    monthly_cash_flow: float = Field(..., description="After-tax income left after housing and bills")

    model_config = {"frozen": True}


class DownPaymentOption(BaseModel):
    """Solver result at one down-payment percent."""

    down_payment_pct: float
    max_price: float
    limiting_constraint: LimitingConstraint
    down_payment: float
    cash_needed: float
    monthly_mortgage_insurance: float

    model_config = {"frozen": True}


class DownPaymentSweep(BaseModel):
    """Solver results across a range of down-payment percents."""

    options: list[DownPaymentOption] = Field(default_factory=list)
    best: DownPaymentOption | None = None

    model_config = {"frozen": True}
