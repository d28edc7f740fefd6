"""Unit tests for homefit.services.metrics."""

import math

import pytest

from homefit.core.constants import MarketDefaults
from homefit.models.profile import LoanTerms
from homefit.models.property import PropertyRecord
from homefit.services.metrics import PropertyMetricsEngine, apply_loan_terms, projection_appreciation


@pytest.fixture
def engine():
    return PropertyMetricsEngine()


@pytest.fixture
def house():
    """$500k house renting for $3,000 with round-number costs."""
    return PropertyRecord(
        zipcode="92501",
        city="Riverside",
        median_price=500_000,
        expected_rent=3_000,
        property_tax_rate_pct=1.2,
        annual_insurance=1_800,
        vacancy_rate_pct=5,
        maintenance_rate_pct=1,
        appreciation_rate_pct=4.0,
    )


class TestApplyLoanTerms:

    def test_active_terms_replace_record_financing(self, house):
        legacy = house.model_copy(update={"down_payment_pct": 5.0, "interest_rate": 0.03})
        financed = apply_loan_terms(legacy, LoanTerms(down_payment_pct=25, interest_rate=0.07))
        assert financed.down_payment_pct == 25
        assert financed.interest_rate == 0.07
        assert legacy.down_payment_pct == 5.0


class TestProjectionAppreciation:

    def test_prefers_five_year_rate(self, house):
        assert projection_appreciation(house) == pytest.approx(0.04)
        five_year = house.model_copy(update={"appreciation_5yr_pct": 6.5})
        assert projection_appreciation(five_year) == pytest.approx(0.065)


class TestMortgageInsuranceByDownPayment:
    """$500k at 10 % down carries insurance; at 25 % down it does not."""

    def test_ten_percent_down(self, engine, house):
        metrics = engine.compute(house, LoanTerms(down_payment_pct=10))
        assert metrics.ltv == pytest.approx(0.9)
        assert metrics.mortgage_insurance == pytest.approx(450_000 * 0.007 / 12)

    def test_twenty_five_percent_down(self, engine, house):
        metrics = engine.compute(house, LoanTerms(down_payment_pct=25))
        assert metrics.ltv == pytest.approx(0.75)
        assert metrics.mortgage_insurance == 0.0

    def test_custom_market_rate(self, house):
        engine = PropertyMetricsEngine(market=MarketDefaults(pmi_rate=0.012))
        metrics = engine.compute(house, LoanTerms(down_payment_pct=10))
        assert metrics.mortgage_insurance == pytest.approx(450_000 * 0.012 / 12)


class TestCompute:
    """Tests for PropertyMetricsEngine.compute."""

    def test_cash_invested_includes_closing(self, engine, house, standard_terms):
        metrics = engine.compute(house, standard_terms)
        assert metrics.down_payment == pytest.approx(100_000)
        assert metrics.closing_costs == pytest.approx(15_000)
        assert metrics.cash_invested == pytest.approx(115_000)
        assert metrics.projection_cash_invested == pytest.approx(100_000)

    def test_cap_rate(self, engine, house, standard_terms):
        # EGI 34,200 - (6,000 tax + 1,800 insurance + 5,000 maintenance)
        metrics = engine.compute(house, standard_terms)
        assert metrics.cap_rate == pytest.approx(21_400 / 500_000)

    def test_cash_flow_consistency(self, engine, house, standard_terms):
        metrics = engine.compute(house, standard_terms)
        assert metrics.annual_cash_flow == pytest.approx(metrics.monthly_cash_flow * 12)
        assert metrics.cash_on_cash_return == pytest.approx(metrics.annual_cash_flow / 115_000)
        expected = 3_000 * 0.95 - metrics.piti.total - 5_000 / 12
        assert metrics.monthly_cash_flow == pytest.approx(expected)

    def test_rent_vs_buy(self, engine, house, standard_terms):
        metrics = engine.compute(house, standard_terms, current_rent=2_500)
        assert metrics.monthly_cost_of_ownership == pytest.approx(metrics.piti.total + 5_000 / 12)
        assert metrics.rent_vs_buy_delta == pytest.approx(metrics.monthly_cost_of_ownership - 2_500)

    def test_leveraged_appreciation(self, engine, house, standard_terms):
        metrics = engine.compute(house, standard_terms)
        assert metrics.leveraged_appreciation_return == pytest.approx(500_000 * 0.04 / 115_000)
        assert metrics.total_annual_return == pytest.approx(
            metrics.cash_on_cash_return + metrics.leveraged_appreciation_return
        )

    def test_projections_use_configured_years(self, house, standard_terms):
        metrics = PropertyMetricsEngine(projection_years=5).compute(house, standard_terms)
        assert len(metrics.equity_projection) == 5
        assert len(metrics.total_value_projection) == 5
        assert metrics.net_gain_at(10) == metrics.total_value_projection[-1].net_gain

    def test_no_rent(self, engine, house, standard_terms):
        metrics = engine.compute(house.model_copy(update={"expected_rent": 0.0}), standard_terms)
        assert metrics.gross_rent_multiplier == math.inf
        assert not metrics.one_percent_rule.passes
        assert metrics.monthly_cash_flow < 0

    def test_all_cash_purchase(self, engine, house):
        metrics = engine.compute(house, LoanTerms(down_payment_pct=100))
        assert metrics.loan_amount == 0.0
        assert metrics.piti.principal_interest == 0.0
        assert metrics.mortgage_insurance == 0.0

    def test_zero_price_is_degenerate_not_error(self, engine, standard_terms):
        metrics = engine.compute(PropertyRecord(zipcode="00000"), standard_terms)
        assert metrics.cap_rate == 0.0
        assert metrics.ltv == 0.0
        assert metrics.cash_on_cash_return == 0.0
        assert metrics.leveraged_appreciation_return == 0.0
