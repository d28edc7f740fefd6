"""Property record data model.

A record is one market-level listing: usually a zipcode from the seed
catalog, or a user-entered neighborhood identified by name.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

_SIGNED_FIELDS = {"appreciation_rate_pct", "appreciation_5yr_pct", "latitude", "longitude"}

_NUMERIC_FIELDS = (
    "median_price",
    "expected_rent",
    "property_tax_rate_pct",
    "monthly_hoa",
    "annual_insurance",
    "vacancy_rate_pct",
    "maintenance_rate_pct",
    "management_fee_pct",
    "appreciation_rate_pct",
    "appreciation_5yr_pct",
    "latitude",
    "longitude",
)


class PropertyRecord(BaseModel):
    """Market record with the operating assumptions needed for metrics.

    Rates on the record are whole percents (``1.16`` means 1.16 %), matching
    the market data feed.
    """

    # Identity
    zipcode: str = Field(default="", description="Postal code, preferred identity")
    name: str = Field(default="", description="Display name, legacy identity")
    city: str = Field(default="")
    region: str = Field(default="")
    county: str | None = Field(None)

    # Market
    median_price: float = Field(default=0.0, ge=0, description="Typical home value in $")
    expected_rent: float = Field(default=0.0, ge=0, description="Typical monthly rent in $")
    appreciation_rate_pct: float = Field(default=3.0, description="Last 12 months %")
    appreciation_5yr_pct: float | None = Field(None, description="Annualized 5 year %")

    # Operating
    property_tax_rate_pct: float = Field(default=1.25, ge=0)
    monthly_hoa: float = Field(default=0.0, ge=0)
    annual_insurance: float = Field(default=1500.0, ge=0)
    vacancy_rate_pct: float = Field(default=5.0, ge=0, le=100)
    maintenance_rate_pct: float = Field(default=1.0, ge=0)
    management_fee_pct: float = Field(default=0.0, ge=0, le=100)

    # Financing carried by legacy records; replaced by the active loan terms
    down_payment_pct: float | None = Field(None)
    interest_rate: float | None = Field(None)
    term_years: int | None = Field(None)
    closing_cost_rate: float | None = Field(None)

    # Location
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)

    # Lifestyle scores (display only)
    school_score: int | None = Field(None, ge=1, le=10)
    safety_score: int | None = Field(None, ge=1, le=10)
    walk_score: int | None = Field(None, ge=1, le=10)

    model_config = {
        "extra": "allow",
    }

    @field_validator(*_NUMERIC_FIELDS, mode="before")
    @classmethod
    def coerce_missing(cls, v: Any, info: ValidationInfo) -> Any:
        """Blank, NaN or non-numeric feed values fall back to the field default."""
        default = cls.model_fields[info.field_name].default
        if v is None or (isinstance(v, str) and not v.strip()):
            return default
        try:
            value = float(v)
        except (TypeError, ValueError):
            return default
        if math.isnan(value) or math.isinf(value):
            return default
        if value < 0 and info.field_name not in _SIGNED_FIELDS:
            return default
        return value

    @field_validator("zipcode", mode="before")
    @classmethod
    def normalize_zipcode(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        text = str(v).strip()
        # Feeds drop leading zeros when the column is read as numbers
        return text.zfill(5) if text.isdigit() and len(text) < 5 else text

    @property
    def key(self) -> str:
        """Identity used for deduplication: zipcode, else name."""
        return self.zipcode or self.name

    @property
    def is_usable(self) -> bool:
        return self.median_price > 0

    @property
    def coordinate(self) -> tuple[float, float] | None:
        if self.latitude is None or self.longitude is None:
            return None
        return self.latitude, self.longitude

    @property
    def display_name(self) -> str:
        return self.name or self.city or self.zipcode
