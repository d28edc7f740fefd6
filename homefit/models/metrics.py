"""Derived metric models.

Everything here is recomputed on demand from a ``PropertyRecord`` and the
active financing; none of it is persisted as a source of truth.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PITIBreakdown(BaseModel):
    """Monthly principal & interest, tax and homeowners insurance."""

    principal_interest: float = 0.0
    tax: float = 0.0
    insurance: float = 0.0
    total: float = 0.0

    model_config = {"frozen": True}


class EquitySnapshot(BaseModel):
    """Position at the end of one projection year."""

    year: int
    home_value: float
    remaining_balance: float
    equity: float
    appreciation_gain: float
    principal_paid: float

    model_config = {"frozen": True}


class ValueSnapshot(BaseModel):
    """Total wealth generated by the investment at the end of one year.

    ``net_gain`` and the ROI figures are measured against the down payment
    alone; closing costs are reported separately in ``MetricsBundle``.
    """

    year: int
    home_value: float
    appreciation_gain: float
    principal_paid: float
    remaining_balance: float
    cumulative_cash_flow: float
    equity: float
    total_value: float
    net_gain: float
    total_roi: float
    annualized_roi: float

    model_config = {"frozen": True}


class OnePercentRule(BaseModel):
    """Monthly rent compared with 1 % of the purchase price."""

    target: float
    actual: float
    passes: bool

    model_config = {"frozen": True}


class MetricsBundle(BaseModel):
    """Full investment and ownership metrics for one property."""

    # Returns
    cap_rate: float = Field(..., description="NOI / price")
    cash_on_cash_return: float = Field(..., description="Annual cash flow / cash invested")
    monthly_cash_flow: float
    annual_cash_flow: float
    gross_rent_multiplier: float = Field(..., description="inf when there is no rent")
    one_percent_rule: OnePercentRule

    # Financing
    piti: PITIBreakdown
    mortgage_insurance: float = Field(..., description="Monthly, 0 when LTV <= 80 %")
    loan_amount: float
    ltv: float
    down_payment: float
    closing_costs: float
    cash_invested: float = Field(..., description="Down payment + closing costs")
    projection_cash_invested: float = Field(..., description="Down payment only, used by projections")

    # Ownership
    monthly_cost_of_ownership: float
    rent_vs_buy_delta: float = Field(..., description="Ownership cost minus the user's current rent")

    # Growth
    appreciation_rate: float = Field(..., description="Annual fraction used for projections")
    equity_projection: list[EquitySnapshot] = Field(default_factory=list)
    total_value_projection: list[ValueSnapshot] = Field(default_factory=list)
    leveraged_appreciation_return: float
    total_annual_return: float

    model_config = {"frozen": True}

    def net_gain_at(self, year: int) -> float:
        """Projected net gain at ``year``, or the last projected year if shorter."""
        if not self.total_value_projection:
            return 0.0
        index = min(max(year, 1), len(self.total_value_projection)) - 1
        return self.total_value_projection[index].net_gain
