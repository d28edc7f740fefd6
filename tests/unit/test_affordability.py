"""Unit tests for the per-property affordability check."""

import pytest

from homefit.core.settings import AppSettings
from homefit.models.profile import FinancialProfile, LoanTerms
from homefit.models.property import PropertyRecord
from homefit.services.affordability import AffordabilityChecker


@pytest.fixture
def checker():
    return AffordabilityChecker()


@pytest.fixture
def starter_home():
    return PropertyRecord(
        zipcode="92501",
        city="Riverside",
        median_price=400_000,
        expected_rent=2_500,
        property_tax_rate_pct=1.25,
        annual_insurance=1_400,
    )


class TestAffordabilityChecker:
    """Tests for AffordabilityChecker.check."""

    def test_unknown_without_financials(self, checker, starter_home, standard_terms):
        """No income or no savings leaves the verdict undecided."""
        result = checker.check(starter_home, FinancialProfile(gross_annual_income=120_000), standard_terms)
        assert result.affordable is None
        assert result.can_afford_cash is None
        assert result.reasons == []

    def test_affordable(self, checker, starter_home, profile_120k, standard_terms):
        result = checker.check(starter_home, profile_120k, standard_terms)
        assert result.affordable is True
        assert result.total_cash_needed == pytest.approx(92_000)
        assert result.cash_shortfall == 0.0
        assert result.reasons == []

    def test_cash_shortfall(self, checker, starter_home, standard_terms):
        profile = FinancialProfile(gross_annual_income=120_000, savings_available=50_000)
        result = checker.check(starter_home, profile, standard_terms)
        assert result.affordable is False
        assert result.can_afford_cash is False
        assert result.can_afford_dti is True
        assert result.cash_shortfall == pytest.approx(42_000)
        assert result.reasons == ["Need $92,000 cash (have $50,000)"]

    def test_dti_failure(self, checker, starter_home, standard_terms):
        profile = FinancialProfile(
            gross_annual_income=60_000, monthly_debts=1_000, savings_available=200_000
        )
        result = checker.check(starter_home, profile, standard_terms)
        assert result.can_afford_cash is True
        assert result.can_afford_dti is False
        assert result.back_end_dti > 0.43
        assert result.reasons[0].startswith("DTI ")
        assert result.reasons[0].endswith("exceeds 43.0% limit")

    def test_mortgage_insurance_counts_toward_dti(self, checker, starter_home, profile_120k):
        low = checker.check(starter_home, profile_120k, LoanTerms(down_payment_pct=10))
        high = checker.check(starter_home, profile_120k, LoanTerms(down_payment_pct=20))
        mi = 360_000 * 0.007 / 12
        assert low.total_monthly_housing > high.total_monthly_housing + mi - 1

    def test_hoa_counts_toward_housing(self, checker, starter_home, profile_120k, standard_terms):
        with_hoa = starter_home.model_copy(update={"monthly_hoa": 400.0})
        base = checker.check(starter_home, profile_120k, standard_terms)
        result = checker.check(with_hoa, profile_120k, standard_terms)
        assert result.total_monthly_housing == pytest.approx(base.total_monthly_housing + 400)

    def test_jumbo_flag(self, checker, profile_120k, standard_terms):
        mansion = PropertyRecord(zipcode="92660", city="Newport Beach", median_price=2_000_000)
        assert checker.check(mansion, profile_120k, standard_terms).is_jumbo

    def test_max_dti_from_settings(self, starter_home, standard_terms):
        profile = FinancialProfile(gross_annual_income=60_000, savings_available=200_000)
        strict = AffordabilityChecker.from_settings(AppSettings(max_back_end_dti=0.2))
        result = strict.check(starter_home, profile, standard_terms)
        assert result.can_afford_dti is False
        assert "20.0% limit" in result.reasons[-1]
