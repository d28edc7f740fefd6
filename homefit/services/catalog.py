"""Seed catalog ingestion.

Builds ``PropertyRecord`` entries from Zillow-style wide CSV exports: ZHVI
(home values) and ZORI (rents), one row per zipcode and one column per
month (``YYYY-MM-DD``). Region, property tax and vacancy come from county
defaults.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Iterable

import pandas as pd
from pydantic import ValidationError

from homefit.core.constants import DEFAULT_MARKET, MarketDefaults
from homefit.core.exceptions import CatalogError, DataLoadError
from homefit.core.logging import get_logger
from homefit.models.property import PropertyRecord

log = get_logger(__name__)

TARGET_COUNTIES = (
    "Los Angeles County",
    "Orange County",
    "Riverside County",
    "San Bernardino County",
    "San Diego County",
)

COUNTY_REGIONS = {
    "Los Angeles County": "SoCal - LA",
    "Orange County": "SoCal - OC",
    "Riverside County": "Inland Empire",
    "San Bernardino County": "Inland Empire",
    "San Diego County": "SoCal - SD",
}

# Percent of assessed value
COUNTY_TAX_RATES = {
    "Los Angeles County": 1.16,
    "Orange County": 1.08,
    "Riverside County": 1.25,
    "San Bernardino County": 1.28,
    "San Diego County": 1.13,
}

# Percent of the year vacant
COUNTY_VACANCY = {
    "Los Angeles County": 4.0,
    "Orange County": 3.0,
    "Riverside County": 5.0,
    "San Bernardino County": 6.0,
    "San Diego County": 4.0,
}

DEFAULT_REGION = "SoCal"
DEFAULT_TAX_RATE = 1.16
DEFAULT_VACANCY = 5.0
DEFAULT_APPRECIATION = 2.0

REQUIRED_COLUMNS = {"RegionName", "State", "CountyName"}

_DATE_COLUMN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def date_columns(frame: pd.DataFrame) -> list[str]:
    """Monthly value columns, oldest first."""
    return sorted(str(c) for c in frame.columns if _DATE_COLUMN.match(str(c)))


def _positive(value: Any) -> float | None:
    if value is None:
        return None
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number) or number <= 0:
        return None
    return float(number)


def latest_value(row: pd.Series, columns: list[str]) -> tuple[float, str] | None:
    """Most recent positive value and its date column."""
    for column in reversed(columns):
        value = _positive(row.get(column))
        if value is not None:
            return float(round(value)), column
    return None


def value_years_before(row: pd.Series, date: str, years: int) -> float | None:
    year, month, day = date.split("-")
    return _positive(row.get(f"{int(year) - years}-{month}-{day}"))


def _require_columns(frame: pd.DataFrame, label: str) -> None:
    missing = REQUIRED_COLUMNS - set(map(str, frame.columns))
    if missing:
        raise CatalogError(f"{label} feed is missing columns: {', '.join(sorted(missing))}")


def build_catalog(
    zhvi: pd.DataFrame,
    zori: pd.DataFrame,
    counties: Iterable[str] = TARGET_COUNTIES,
    state: str = "CA",
    market: MarketDefaults = DEFAULT_MARKET,
) -> list[PropertyRecord]:
    """Join home values with rents into one record per zipcode.

    Args:
        zhvi: Home value frame (``RegionName`` = zipcode)
        zori: Rent frame, same layout
        counties: Counties to keep
        state: State code to keep
        market: Supplies the homeowners insurance rate

    Returns:
        Records sorted by region, city, zipcode

    Raises:
        CatalogError: A feed lacks the identifying columns
    """
    _require_columns(zhvi, "ZHVI")
    _require_columns(zori, "ZORI")
    counties = set(counties)

    values = zhvi[(zhvi["State"] == state) & (zhvi["CountyName"].isin(counties))]
    rents = zori[zori["State"] == state].copy()
    rents["RegionName"] = rents["RegionName"].astype(str).str.zfill(5)
    rents = rents.drop_duplicates(subset="RegionName", keep="last").set_index("RegionName")

    value_columns = date_columns(zhvi)
    rent_columns = date_columns(zori)

    records = []
    for _, row in values.iterrows():
        zipcode = str(row["RegionName"]).zfill(5)
        price = latest_value(row, value_columns)
        if price is None:
            continue
        price_value, price_date = price

        rent = None
        if zipcode in rents.index:
            rent = latest_value(rents.loc[zipcode], rent_columns)

        appreciation = DEFAULT_APPRECIATION
        year_ago = value_years_before(row, price_date, 1)
        if year_ago:
            appreciation = round((price_value / year_ago - 1) * 100, 1)

        appreciation_5yr = None
        five_years_ago = value_years_before(row, price_date, 5)
        if five_years_ago:
            appreciation_5yr = round(((price_value / five_years_ago) ** (1 / 5) - 1) * 100, 1)

        county = str(row["CountyName"])
        city = row.get("City")
        city = str(city) if isinstance(city, str) and city.strip() else "Unknown"

        records.append(
            PropertyRecord(
                zipcode=zipcode,
                name=city,
                city=city,
                region=COUNTY_REGIONS.get(county, DEFAULT_REGION),
                county=county,
                median_price=price_value,
                expected_rent=float(round(rent[0])) if rent else 0.0,
                property_tax_rate_pct=COUNTY_TAX_RATES.get(county, DEFAULT_TAX_RATE),
                monthly_hoa=0.0,
                annual_insurance=float(round(price_value * market.homeowners_insurance_rate)),
                vacancy_rate_pct=COUNTY_VACANCY.get(county, DEFAULT_VACANCY),
                maintenance_rate_pct=1.0,
                management_fee_pct=0.0,
                appreciation_rate_pct=appreciation,
                appreciation_5yr_pct=appreciation_5yr,
            )
        )

    records.sort(key=lambda r: (r.region, r.city, r.zipcode))

    with_rent = sum(1 for r in records if r.expected_rent > 0)
    log.info(
        "catalog_built",
        count=len(records),
        with_rent=with_rent,
        without_rent=len(records) - with_rent,
    )
    return records


def load_catalog_csv(zhvi_path: str | Path, zori_path: str | Path, **kwargs: Any) -> list[PropertyRecord]:
    """Read both CSV exports and build the catalog.

    Raises:
        DataLoadError: A file is missing or unreadable
    """
    frames = []
    for path in (zhvi_path, zori_path):
        try:
            frames.append(pd.read_csv(path, dtype={"RegionName": str}))
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise DataLoadError(f"Cannot read market data {path}: {e}") from e
    return build_catalog(frames[0], frames[1], **kwargs)


def load_seed_catalog(path: str | Path) -> list[PropertyRecord]:
    """Load a seed catalog saved as a JSON list of records.

    Raises:
        DataLoadError: File missing, not JSON, or not a list of records
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DataLoadError(f"Cannot read seed catalog {path}: {e}") from e

    if not isinstance(raw, list):
        raise DataLoadError(f"Seed catalog {path} must be a JSON list")

    try:
        records = [PropertyRecord.model_validate(item) for item in raw]
    except ValidationError as e:
        raise DataLoadError(f"Invalid record in seed catalog {path}: {e}") from e

    log.info("seed_catalog_loaded", path=str(path), count=len(records))
    return records


def save_seed_catalog(records: Iterable[PropertyRecord], path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [r.model_dump(mode="json", exclude_none=True) for r in records]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    log.info("seed_catalog_saved", path=str(path), count=len(payload))
    return path
