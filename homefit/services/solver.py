"""Max affordable price solver.

Combines a closed-form cash constraint with an income constraint that has to
be searched: mortgage insurance switches on above 80 % loan-to-value, so the
monthly cost at a price is not invertible in closed form. The search is a
fixed-iteration bisection over a fixed price bracket.
"""

from __future__ import annotations

import math
from typing import Iterable

from homefit.core.constants import DEFAULT_MARKET, DTI_ACCEPTABLE, DTI_EXCELLENT, MarketDefaults
from homefit.core.exceptions import InvalidParameterError
from homefit.core.financial import (
    back_end_dti,
    closing_cost_estimate,
    front_end_dti,
    loan_to_value,
    mortgage_insurance,
    needs_mortgage_insurance,
    piti,
)
from homefit.core.logging import get_logger
from homefit.core.settings import AppSettings, get_settings
from homefit.models.affordability import (
    AffordabilityLimit,
    BuyingPower,
    DownPaymentOption,
    DownPaymentSweep,
    DTIStatus,
    MonthlyHousingAtPrice,
    TargetPriceAssessment,
)
from homefit.models.metrics import PITIBreakdown
from homefit.models.profile import FinancialProfile, LoanTerms

log = get_logger(__name__)

DEFAULT_SWEEP_PERCENTS = tuple(range(3, 51))

CASH_TOLERANCE = 0.005


class AffordabilitySolver:
    """Finds the largest home price a household can carry.

    Attributes:
        market: Market assumptions (insurance and mortgage insurance rates)
        iterations: Bisection steps per solve
        max_price: Upper bracket for ``max_affordable_price``
        optimizer_max_price: Upper bracket for the down-payment sweep
    """

    def __init__(
        self,
        market: MarketDefaults = DEFAULT_MARKET,
        iterations: int = 50,
        max_price: float = 5_000_000.0,
        optimizer_max_price: float = 10_000_000.0,
    ):
        if iterations < 1:
            raise InvalidParameterError("iterations", iterations, "need at least one bisection step")
        for name, value in (("max_price", max_price), ("optimizer_max_price", optimizer_max_price)):
            if value <= 0:
                raise InvalidParameterError(name, value, "price bracket must be positive")
        self.market = market
        self.iterations = iterations
        self.max_price = max_price
        self.optimizer_max_price = optimizer_max_price

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        market: MarketDefaults = DEFAULT_MARKET,
    ) -> AffordabilitySolver:
        settings = settings or get_settings()
        return cls(
            market=market,
            iterations=settings.solver_iterations,
            max_price=settings.solver_max_price,
            optimizer_max_price=settings.optimizer_max_price,
        )

    # --- Constraints ---

    def monthly_housing_ceiling(self, profile: FinancialProfile, monthly_hoa: float = 0.0) -> float:
        """Tightest of the front-end, back-end and budget limits, net of HOA.

        May be zero or negative; callers treat that as "nothing affordable".
        """
        gross = profile.gross_monthly_income
        comfort = profile.comfort

        by_front_end = gross * comfort.front_end_dti
        by_back_end = gross * comfort.back_end_dti - profile.monthly_debts
        # Current rent is left out: it goes away once the household buys
        by_budget = (
            gross
            - profile.monthly_debts
            - profile.monthly_other_expenses
            - gross * comfort.buffer_rate
        )
        return min(by_front_end, by_back_end, by_budget) - monthly_hoa

    def monthly_housing_budget(self, profile: FinancialProfile) -> float:
        if profile.gross_monthly_income <= 0:
            return 0.0
        return max(0.0, self.monthly_housing_ceiling(profile))

    @staticmethod
    def cash_constraint_price(profile: FinancialProfile, terms: LoanTerms) -> float:
        """Price at which savings exactly cover down payment plus closing."""
        cash_fraction = terms.down_payment_fraction + terms.closing_cost_rate
        if cash_fraction <= 0:
            return 0.0
        return profile.savings_available / cash_fraction

    def _housing_at(self, price: float, terms: LoanTerms) -> tuple[PITIBreakdown, float]:
        loan = price * (1 - terms.down_payment_fraction)
        breakdown = piti(
            loan,
            terms.interest_rate,
            terms.term_years,
            price * terms.property_tax_rate,
            price * self.market.homeowners_insurance_rate,
        )
        mi = (
            mortgage_insurance(loan, self.market.pmi_rate)
            if needs_mortgage_insurance(loan, price, self.market.max_ltv_without_pmi)
            else 0.0
        )
        return breakdown, mi

    def income_constraint_price(
        self,
        ceiling: float,
        terms: LoanTerms,
        max_price: float | None = None,
    ) -> float:
        """Bisect for the highest whole-dollar price whose housing cost stays under ``ceiling``."""
        if ceiling <= 0:
            return 0.0

        lo, hi = 0.0, float(max_price or self.max_price)
        for _ in range(self.iterations):
            mid = (lo + hi) / 2
            loan = mid * (1 - terms.down_payment_fraction)
            if loan <= 0:
                lo = mid
                continue
            breakdown, mi = self._housing_at(mid, terms)
            if breakdown.total + mi < ceiling:
                lo = mid
            else:
                hi = mid
        return float(math.floor(lo))

    def max_affordable_price(
        self,
        profile: FinancialProfile,
        terms: LoanTerms,
        monthly_hoa: float = 0.0,
        max_price: float | None = None,
    ) -> AffordabilityLimit:
        """Largest price satisfying both the cash and the income constraint.

        Args:
            profile: Household finances
            terms: Loan terms (down payment, rate, tax and closing rates)
            monthly_hoa: HOA dues carved out of the housing ceiling
            max_price: Upper search bracket, defaults to ``self.max_price``

        Returns:
            ``AffordabilityLimit``. Without income or with no room under the
            ceiling the limit is reported as income, otherwise ties report cash.
        """
        ceiling = self.monthly_housing_ceiling(profile, monthly_hoa)
        by_cash = self.cash_constraint_price(profile, terms)
        if profile.gross_monthly_income <= 0:
            by_income = 0.0
        else:
            by_income = self.income_constraint_price(ceiling, terms, max_price)

        if profile.gross_monthly_income <= 0 or ceiling <= 0:
            limiting = "income"
        else:
            limiting = "cash" if by_cash <= by_income else "income"
        result = AffordabilityLimit(
            max_price=min(by_cash, by_income),
            cash_constraint_price=by_cash,
            income_constraint_price=by_income,
            limiting_constraint=limiting,
            monthly_housing_ceiling=ceiling,
        )
        log.debug(
            "max_price_solved",
            max_price=round(result.max_price),
            limiting=limiting,
            ceiling=round(ceiling, 2),
        )
        return result

    # --- Household summaries ---

    def monthly_housing_at(self, price: float, terms: LoanTerms) -> MonthlyHousingAtPrice:
        breakdown, mi = self._housing_at(price, terms)
        return MonthlyHousingAtPrice(
            principal_interest=breakdown.principal_interest,
            taxes=breakdown.tax,
            insurance=breakdown.insurance,
            mortgage_insurance=mi,
            total=breakdown.total + mi,
        )

    def buying_power(self, profile: FinancialProfile, terms: LoanTerms) -> BuyingPower:
        """Max price plus the savings plan needed to reach it."""
        limit = self.max_affordable_price(profile, terms)
        price = limit.max_price
        housing = self.monthly_housing_at(price, terms) if price > 0 else None

        gross = profile.gross_monthly_income
        if gross <= 0:
            cushion = 0.0
        else:
            cushion = (
                gross
                - profile.monthly_debts
                - profile.monthly_other_expenses
                - (housing.total if housing else 0.0)
            )

        cash_needed = price * (terms.down_payment_fraction + terms.closing_cost_rate)
        have = profile.savings_available
        # A cash-bound price reproduces savings only up to float rounding
        if cash_needed - have < CASH_TOLERANCE:
            months = 0.0
        elif profile.monthly_savings_rate <= 0:
            months = math.inf
        else:
            months = float(math.ceil((cash_needed - have) / profile.monthly_savings_rate))

        progress = 100.0 if cash_needed <= 0 else min(100.0, have / cash_needed * 100)

        return BuyingPower(
            limit=limit,
            monthly_housing_budget=self.monthly_housing_budget(profile),
            housing_at_max_price=housing,
            monthly_cushion=cushion,
            cash_needed_at_max_price=cash_needed,
            months_to_afford=months,
            savings_progress=progress,
        )

    def assess_target_price(
        self,
        profile: FinancialProfile,
        terms: LoanTerms,
        price: float,
        monthly_hoa: float = 0.0,
    ) -> TargetPriceAssessment:
        """Monthly and upfront cost picture for a specific purchase price."""
        price = max(0.0, price)
        down_payment = price * terms.down_payment_fraction
        loan = max(0.0, price - down_payment)
        ltv = loan_to_value(loan, price)
        needs_mi = needs_mortgage_insurance(loan, price, self.market.max_ltv_without_pmi)

        if price <= 0 or loan <= 0:
            breakdown = PITIBreakdown()
        else:
            breakdown = piti(
                loan,
                terms.interest_rate,
                terms.term_years,
                price * terms.property_tax_rate,
                price * self.market.homeowners_insurance_rate,
            )
        mi = mortgage_insurance(loan, self.market.pmi_rate) if needs_mi else 0.0
        housing = breakdown.total + mi + monthly_hoa

        gross = profile.gross_monthly_income
        front = front_end_dti(housing, gross)
        back = back_end_dti(housing, profile.monthly_debts, gross)

        closing = closing_cost_estimate(price, terms.closing_cost_rate)
        cash_needed = down_payment + closing
        take_home = gross * (1 - profile.effective_tax_rate)
        conforming = self.market.conforming_limit(terms.is_high_cost_area)

        return TargetPriceAssessment(
            price=price,
            down_payment=down_payment,
            loan_amount=loan,
            ltv=ltv,
            needs_mortgage_insurance=needs_mi,
            conforming_limit=conforming,
            is_jumbo=loan > conforming,
            piti=breakdown,
            mortgage_insurance=mi,
            total_monthly_housing=housing,
            front_end_dti=front,
            back_end_dti=back,
            dti_status=dti_status(front, back),
            closing_costs=closing,
            total_cash_needed=cash_needed,
            savings_shortfall=max(0.0, cash_needed - profile.savings_available),
            monthly_cash_flow=take_home - housing - profile.monthly_debts - profile.monthly_other_expenses,
        )

    def optimize_down_payment(
        self,
        profile: FinancialProfile,
        terms: LoanTerms,
        percents: Iterable[float] = DEFAULT_SWEEP_PERCENTS,
    ) -> DownPaymentSweep:
        """Solve at each down-payment percent over the wider bracket.

        The best option is the highest max price; ties go to the smaller
        down payment.
        """
        options = []
        for pct in percents:
            swept = terms.model_copy(update={"down_payment_pct": float(pct)})
            limit = self.max_affordable_price(profile, swept, max_price=self.optimizer_max_price)
            price = limit.max_price
            housing = self.monthly_housing_at(price, swept) if price > 0 else None
            options.append(
                DownPaymentOption(
                    down_payment_pct=float(pct),
                    max_price=price,
                    limiting_constraint=limit.limiting_constraint,
                    down_payment=price * swept.down_payment_fraction,
                    cash_needed=price * (swept.down_payment_fraction + swept.closing_cost_rate),
                    monthly_mortgage_insurance=housing.mortgage_insurance if housing else 0.0,
                )
            )

        best = None
        for option in options:
            if best is None or option.max_price > best.max_price or (
                option.max_price == best.max_price and option.down_payment_pct < best.down_payment_pct
            ):
                best = option

        log.info(
            "down_payment_sweep_completed",
            count=len(options),
            best_pct=best.down_payment_pct if best else None,
            best_price=round(best.max_price) if best else None,
        )
        return DownPaymentSweep(options=options, best=best)


def dti_status(front: float, back: float) -> DTIStatus:
    """Bucket a front/back DTI pair into excellent, acceptable or risky."""
    if front <= DTI_EXCELLENT[0] and back <= DTI_EXCELLENT[1]:
        return "excellent"
    if front <= DTI_ACCEPTABLE[0] and back <= DTI_ACCEPTABLE[1]:
        return "acceptable"
    return "risky"
