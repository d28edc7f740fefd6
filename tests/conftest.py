"""Pytest fixtures for homefit tests."""

import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from homefit.models.profile import FinancialProfile, LoanTerms  # noqa: E402
from homefit.models.property import PropertyRecord  # noqa: E402


@pytest.fixture
def standard_terms():
    """20 % down, 6.75 % over 30 years, 1.25 % tax, 3 % closing."""
    return LoanTerms()


@pytest.fixture
def profile_120k():
    """$120k household with $100k saved and no debts."""
    return FinancialProfile(
        gross_annual_income=120_000,
        savings_available=100_000,
        comfort_level="standard",
    )


@pytest.fixture
def empty_profile():
    return FinancialProfile()


@pytest.fixture
def sample_record_data():
    """Raw seed catalog entry as stored on disk."""
    return {
        "zipcode": "92101",
        "name": "San Diego",
        "city": "San Diego",
        "region": "SoCal - SD",
        "county": "San Diego County",
        "median_price": 650_000,
        "expected_rent": 3_200,
        "appreciation_rate_pct": 2.5,
        "appreciation_5yr_pct": 5.1,
        "property_tax_rate_pct": 1.13,
        "monthly_hoa": 250,
        "annual_insurance": 2_275,
        "vacancy_rate_pct": 4,
        "maintenance_rate_pct": 1,
        "management_fee_pct": 0,
        "latitude": 32.7157,
        "longitude": -117.1611,
    }


@pytest.fixture
def sample_records():
    """Small mixed catalog: two regions, one record without rent."""
    return [
        PropertyRecord(
            zipcode="90012", name="Downtown LA", city="Los Angeles", region="SoCal - LA",
            median_price=750_000, expected_rent=3_400, appreciation_rate_pct=3.0,
            property_tax_rate_pct=1.16, annual_insurance=2_625,
            latitude=34.0614, longitude=-118.2385,
        ),
        PropertyRecord(
            zipcode="92501", name="Riverside", city="Riverside", region="Inland Empire",
            median_price=420_000, expected_rent=2_600, appreciation_rate_pct=4.0,
            property_tax_rate_pct=1.25, annual_insurance=1_470,
            latitude=33.9806, longitude=-117.3755,
        ),
        PropertyRecord(
            zipcode="92401", name="San Bernardino", city="San Bernardino", region="Inland Empire",
            median_price=380_000, expected_rent=0, appreciation_rate_pct=3.5,
            property_tax_rate_pct=1.28, annual_insurance=1_330,
            latitude=34.1083, longitude=-117.2898,
        ),
        PropertyRecord(
            zipcode="92660", name="Newport Beach", city="Newport Beach", region="SoCal - OC",
            median_price=2_900_000, expected_rent=9_500, appreciation_rate_pct=5.0,
            property_tax_rate_pct=1.08, annual_insurance=10_150,
            latitude=33.6189, longitude=-117.8731,
        ),
    ]
