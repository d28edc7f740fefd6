"""Per-property investment and ownership metrics.

Given one ``PropertyRecord`` and the active ``LoanTerms``, derive the full
``MetricsBundle``. The record's own financing fields are replaced by the
active terms first so every property in a view is financed the same way.
"""

from __future__ import annotations

from homefit.core.constants import DEFAULT_MARKET, MarketDefaults
from homefit.core.financial import (
    cap_rate,
    cash_on_cash,
    closing_cost_estimate,
    equity_projection,
    gross_rent_multiplier,
    loan_to_value,
    monthly_cash_flow,
    mortgage_insurance,
    needs_mortgage_insurance,
    one_percent_rule,
    piti,
    total_value_projection,
)
from homefit.core.settings import AppSettings, get_settings
from homefit.models.metrics import MetricsBundle
from homefit.models.profile import LoanTerms
from homefit.models.property import PropertyRecord


def apply_loan_terms(record: PropertyRecord, terms: LoanTerms) -> PropertyRecord:
    """Copy of ``record`` carrying the active financing."""
    return record.model_copy(
        update={
            "down_payment_pct": terms.down_payment_pct,
            "interest_rate": terms.interest_rate,
            "term_years": terms.term_years,
            "closing_cost_rate": terms.closing_cost_rate,
        }
    )


def projection_appreciation(record: PropertyRecord) -> float:
    """Annual appreciation as a fraction, preferring the 5 year history."""
    if record.appreciation_5yr_pct is not None:
        return record.appreciation_5yr_pct / 100.0
    return record.appreciation_rate_pct / 100.0


class PropertyMetricsEngine:
    """Computes ``MetricsBundle`` objects; holds only configuration."""

    def __init__(self, market: MarketDefaults = DEFAULT_MARKET, projection_years: int = 10):
        self.market = market
        self.projection_years = projection_years

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        market: MarketDefaults = DEFAULT_MARKET,
    ) -> PropertyMetricsEngine:
        settings = settings or get_settings()
        return cls(market=market, projection_years=settings.projection_years)

    def compute(
        self,
        record: PropertyRecord,
        terms: LoanTerms,
        current_rent: float = 0.0,
    ) -> MetricsBundle:
        """Full metrics for one property.

        Args:
            record: Property market record
            terms: Active loan terms, applied over the record's own
            current_rent: The household's rent today, for rent-vs-buy

        Returns:
            ``MetricsBundle`` for the record under ``terms``
        """
        financed = apply_loan_terms(record, terms)
        price = financed.median_price
        rent = financed.expected_rent
        annual_rent = rent * 12

        down_payment = price * (financed.down_payment_pct / 100.0)
        loan = price - down_payment
        annual_tax = price * (financed.property_tax_rate_pct / 100.0)
        annual_maintenance = price * (financed.maintenance_rate_pct / 100.0)
        annual_management = annual_rent * (financed.management_fee_pct / 100.0)
        closing_costs = closing_cost_estimate(price, financed.closing_cost_rate)
        cash_invested = down_payment + closing_costs
        vacancy = financed.vacancy_rate_pct / 100.0
        hoa = financed.monthly_hoa

        breakdown = piti(
            loan, financed.interest_rate, financed.term_years, annual_tax, financed.annual_insurance
        )
        ltv = loan_to_value(loan, price)
        mi = (
            mortgage_insurance(loan, self.market.pmi_rate)
            if needs_mortgage_insurance(loan, price, self.market.max_ltv_without_pmi)
            else 0.0
        )

        cr = cap_rate(
            price,
            annual_rent,
            vacancy,
            annual_tax,
            financed.annual_insurance,
            annual_maintenance,
            hoa * 12,
            annual_management,
        )
        cash_flow = monthly_cash_flow(
            rent, vacancy, breakdown.total, mi, hoa, annual_maintenance / 12, annual_management / 12
        )
        annual_cash_flow = cash_flow * 12
        coc = cash_on_cash(annual_cash_flow, cash_invested)

        cost_of_ownership = breakdown.total + mi + hoa + annual_maintenance / 12

        appreciation = projection_appreciation(financed)
        equity = list(
            equity_projection(
                price,
                down_payment,
                loan,
                financed.interest_rate,
                financed.term_years,
                appreciation,
                self.projection_years,
            )
        )
        total_value = list(
            total_value_projection(
                price,
                down_payment,
                loan,
                financed.interest_rate,
                financed.term_years,
                appreciation,
                annual_cash_flow,
                self.projection_years,
            )
        )

        # Appreciation accrues on the whole asset; only the cash is at risk
        leveraged = price * appreciation / cash_invested if cash_invested > 0 else 0.0

        return MetricsBundle(
            cap_rate=cr,
            cash_on_cash_return=coc,
            monthly_cash_flow=cash_flow,
            annual_cash_flow=annual_cash_flow,
            gross_rent_multiplier=gross_rent_multiplier(price, annual_rent),
            one_percent_rule=one_percent_rule(price, rent),
            piti=breakdown,
            mortgage_insurance=mi,
            loan_amount=loan,
            ltv=ltv,
            down_payment=down_payment,
            closing_costs=closing_costs,
            cash_invested=cash_invested,
            projection_cash_invested=down_payment,
            monthly_cost_of_ownership=cost_of_ownership,
            rent_vs_buy_delta=cost_of_ownership - current_rent,
            appreciation_rate=appreciation,
            equity_projection=equity,
            total_value_projection=total_value,
            leveraged_appreciation_return=leveraged,
            total_annual_return=coc + leveraged,
        )
