"""Data models for homefit."""

from .affordability import (
    AffordabilityLimit,
    AffordabilityResult,
    BuyingPower,
    DownPaymentOption,
    DownPaymentSweep,
    MonthlyHousingAtPrice,
    TargetPriceAssessment,
)
from .metrics import EquitySnapshot, MetricsBundle, OnePercentRule, PITIBreakdown, ValueSnapshot
from .profile import FinancialProfile, LoanTerms
from .property import PropertyRecord

__all__ = [
    "AffordabilityLimit",
    "AffordabilityResult",
    "BuyingPower",
    "DownPaymentOption",
    "DownPaymentSweep",
    "EquitySnapshot",
    "FinancialProfile",
    "LoanTerms",
    "MetricsBundle",
    "MonthlyHousingAtPrice",
    "OnePercentRule",
    "PITIBreakdown",
    "PropertyRecord",
    "TargetPriceAssessment",
    "ValueSnapshot",
]
