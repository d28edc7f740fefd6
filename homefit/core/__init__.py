"""Core finance formulas, constants and ambient infrastructure."""

from .exceptions import (
    CatalogError,
    ConfigurationError,
    DataLoadError,
    HomefitError,
    InvalidParameterError,
    UnknownPropertyError,
)
from .financial import (
    amortized_payment,
    back_end_dti,
    cap_rate,
    cash_on_cash,
    closing_cost_estimate,
    equity_projection,
    front_end_dti,
    gross_rent_multiplier,
    monthly_cash_flow,
    mortgage_insurance,
    needs_mortgage_insurance,
    piti,
    total_value_projection,
)

__all__ = [
    "amortized_payment",
    "piti",
    "mortgage_insurance",
    "needs_mortgage_insurance",
    "front_end_dti",
    "back_end_dti",
    "cap_rate",
    "cash_on_cash",
    "gross_rent_multiplier",
    "monthly_cash_flow",
    "equity_projection",
    "total_value_projection",
    "closing_cost_estimate",
    # Exceptions
    "HomefitError",
    "DataLoadError",
    "CatalogError",
    "UnknownPropertyError",
    "InvalidParameterError",
    "ConfigurationError",
]
