"""Property-level affordability check.

Decides whether one household can buy one property under the active loan
terms: savings must cover down payment plus closing costs, and back-end DTI
must stay under the lender maximum.
"""

from __future__ import annotations

from homefit.core.constants import DEFAULT_MARKET, MarketDefaults
from homefit.core.financial import back_end_dti, mortgage_insurance, needs_mortgage_insurance, piti
from homefit.core.formatting import format_currency, format_percent
from homefit.core.settings import AppSettings, get_settings
from homefit.models.affordability import AffordabilityResult
from homefit.models.profile import FinancialProfile, LoanTerms
from homefit.models.property import PropertyRecord
from homefit.services.metrics import apply_loan_terms


class AffordabilityChecker:
    """Cash and DTI pass/fail for a property against a household."""

    def __init__(self, market: MarketDefaults = DEFAULT_MARKET, max_back_end_dti: float | None = None):
        self.market = market
        self.max_back_end_dti = (
            market.back_end_dti_max if max_back_end_dti is None else max_back_end_dti
        )

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        market: MarketDefaults = DEFAULT_MARKET,
    ) -> AffordabilityChecker:
        settings = settings or get_settings()
        return cls(market=market, max_back_end_dti=settings.max_back_end_dti)

    def check(
        self,
        record: PropertyRecord,
        profile: FinancialProfile,
        terms: LoanTerms,
    ) -> AffordabilityResult:
        """Evaluate ``record`` for ``profile``.

        Returns:
            ``AffordabilityResult``; ``affordable`` is ``None`` when the profile
            has no income or no savings to judge against.
        """
        if not profile.has_financials:
            return AffordabilityResult()

        financed = apply_loan_terms(record, terms)
        price = financed.median_price
        savings = profile.savings_available

        down_payment = price * (financed.down_payment_pct / 100.0)
        closing_costs = price * financed.closing_cost_rate
        total_cash_needed = down_payment + closing_costs
        can_afford_cash = savings >= total_cash_needed

        loan = price - down_payment
        annual_tax = price * (financed.property_tax_rate_pct / 100.0)
        breakdown = piti(
            loan, financed.interest_rate, financed.term_years, annual_tax, financed.annual_insurance
        )
        mi = (
            mortgage_insurance(loan, self.market.pmi_rate)
            if needs_mortgage_insurance(loan, price, self.market.max_ltv_without_pmi)
            else 0.0
        )
        total_housing = breakdown.total + mi + financed.monthly_hoa
        dti = back_end_dti(total_housing, profile.monthly_debts, profile.gross_monthly_income)
        can_afford_dti = dti <= self.max_back_end_dti

        reasons = []
        if not can_afford_cash:
            reasons.append(
                f"Need {format_currency(total_cash_needed)} cash (have {format_currency(savings)})"
            )
        if not can_afford_dti:
            reasons.append(
                f"DTI {format_percent(dti)} exceeds {format_percent(self.max_back_end_dti)} limit"
            )

        return AffordabilityResult(
            affordable=can_afford_cash and can_afford_dti,
            can_afford_cash=can_afford_cash,
            can_afford_dti=can_afford_dti,
            total_cash_needed=total_cash_needed,
            cash_shortfall=max(0.0, total_cash_needed - savings),
            back_end_dti=dti,
            total_monthly_housing=total_housing,
            is_jumbo=loan > self.market.conforming_limit(terms.is_high_cost_area),
            reasons=reasons,
        )
