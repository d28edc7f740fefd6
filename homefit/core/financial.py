"""Financial calculation functions.

Stateless mortgage, tax, insurance and rental-return formulas. All rates are
annual fractions (``0.0675`` for 6.75 %). Degenerate inputs return sentinel
values instead of raising: 0 for undefined ratios, ``math.inf`` for an
undefined gross rent multiplier.
"""

from __future__ import annotations

import math
from typing import Callable, Generic, Iterator, TypeVar

import numpy_financial as npf

from homefit.models.metrics import EquitySnapshot, OnePercentRule, PITIBreakdown, ValueSnapshot

MAX_LTV_WITHOUT_MI = 0.8
LTV_PRECISION = 9

T = TypeVar("T")


def _term_months(term_years: float) -> int:
    return int(round(term_years * 12))


def amortized_payment(principal: float, annual_rate: float, term_years: float) -> float:
    """Monthly principal & interest payment of a fully amortizing loan.

    Args:
        principal: Loan amount in $
        annual_rate: Annual interest rate as a fraction
        term_years: Loan term in years

    Returns:
        Monthly payment in $. Straight-line ``principal / months`` at 0 %.
    """
    months = _term_months(term_years)
    if principal <= 0 or months <= 0:
        return 0.0

    monthly_rate = annual_rate / 12.0
    if monthly_rate <= 0:
        return principal / months

    return float(-npf.pmt(monthly_rate, months, principal))


def piti(
    principal: float,
    annual_rate: float,
    term_years: float,
    annual_tax: float,
    annual_insurance: float,
) -> PITIBreakdown:
    """Monthly principal, interest, tax and homeowners insurance."""
    pi = amortized_payment(principal, annual_rate, term_years)
    tax = annual_tax / 12.0
    insurance = annual_insurance / 12.0
    return PITIBreakdown(
        principal_interest=pi,
        tax=tax,
        insurance=insurance,
        total=pi + tax + insurance,
    )


def mortgage_insurance(loan_amount: float, annual_rate: float) -> float:
    """Monthly mortgage insurance premium.

    Does not check loan-to-value; see ``needs_mortgage_insurance``.
    """
    return loan_amount * annual_rate / 12.0


def loan_to_value(loan_amount: float, price: float) -> float:
    """Loan / price, 0 without a price.

    Rounded to 9 places so a loan built as ``price * (1 - dp)`` lands on the
    same ratio as ``dp`` itself.
    """
    if price <= 0:
        return 0.0
    return round(loan_amount / price, LTV_PRECISION)


def needs_mortgage_insurance(
    loan_amount: float, price: float, max_ltv: float = MAX_LTV_WITHOUT_MI
) -> bool:
    """True when loan-to-value exceeds ``max_ltv`` (80 % by default)."""
    return loan_to_value(loan_amount, price) > max_ltv


def front_end_dti(housing_cost: float, gross_monthly_income: float) -> float:
    """Housing cost / gross monthly income."""
    if gross_monthly_income <= 0:
        return 0.0
    return housing_cost / gross_monthly_income


def back_end_dti(housing_cost: float, other_debts: float, gross_monthly_income: float) -> float:
    """(Housing cost + all other debts) / gross monthly income."""
    if gross_monthly_income <= 0:
        return 0.0
    return (housing_cost + other_debts) / gross_monthly_income


def cap_rate(
    price: float,
    annual_gross_rent: float,
    vacancy_rate: float,
    annual_tax: float,
    annual_insurance: float,
    annual_maintenance: float,
    annual_hoa: float,
    annual_management: float,
) -> float:
    """Net operating income / purchase price."""
    if price <= 0:
        return 0.0
    effective_gross_income = annual_gross_rent * (1 - vacancy_rate)
    operating_expenses = (
        annual_tax + annual_insurance + annual_maintenance + annual_hoa + annual_management
    )
    return (effective_gross_income - operating_expenses) / price


def cash_on_cash(annual_cash_flow: float, cash_invested: float) -> float:
    """Annual pre-tax cash flow / total cash invested."""
    if cash_invested <= 0:
        return 0.0
    return annual_cash_flow / cash_invested


def gross_rent_multiplier(price: float, annual_gross_rent: float) -> float:
    """Purchase price / annual gross rent, ``inf`` without rent."""
    if annual_gross_rent <= 0:
        return math.inf
    return price / annual_gross_rent


def one_percent_rule(price: float, monthly_rent: float) -> OnePercentRule:
    """Monthly rent should be at least 1 % of the purchase price."""
    target = price * 0.01
    return OnePercentRule(target=target, actual=monthly_rent, passes=monthly_rent >= target)


def monthly_cash_flow(
    monthly_rent: float,
    vacancy_rate: float,
    piti_total: float,
    mortgage_insurance: float,
    monthly_hoa: float,
    monthly_maintenance: float,
    monthly_management: float,
) -> float:
    """Effective rent minus every monthly carrying cost."""
    effective_rent = monthly_rent * (1 - vacancy_rate)
    expenses = piti_total + mortgage_insurance + monthly_hoa + monthly_maintenance + monthly_management
    return effective_rent - expenses


def closing_cost_estimate(price: float, rate: float) -> float:
    return price * rate


class Projection(Generic[T]):
    """Finite yearly sequence, recomputed lazily on each iteration."""

    def __init__(self, walk: Callable[[], Iterator[T]], years: int):
        self._walk = walk
        self._years = years

    def __iter__(self) -> Iterator[T]:
        return self._walk()

    def __len__(self) -> int:
        return self._years


def _amortize_by_year(
    loan: float, annual_rate: float, term_years: float, years: int
) -> Iterator[tuple[int, float]]:
    """Yield ``(year, remaining_balance)`` from a month-by-month walk."""
    monthly_rate = annual_rate / 12.0
    payment = amortized_payment(loan, annual_rate, term_years)
    balance = max(0.0, loan)

    for year in range(1, years + 1):
        for _ in range(12):
            if balance <= 0:
                break
            interest = balance * monthly_rate
            balance = max(0.0, balance - (payment - interest))
        yield year, balance


def equity_projection(
    price: float,
    down_payment: float,
    loan: float,
    annual_rate: float,
    term_years: float,
    annual_appreciation: float,
    years: int,
) -> Projection[EquitySnapshot]:
    """Yearly equity from appreciation plus principal paydown.

    Args:
        price: Purchase price in $
        down_payment: Down payment in $ (kept for signature symmetry)
        loan: Initial loan amount in $
        annual_rate: Annual interest rate as a fraction
        term_years: Loan term in years
        annual_appreciation: Annual home value growth as a fraction
        years: Number of yearly snapshots

    Returns:
        Restartable iterable of ``EquitySnapshot``, one per year.
    """
    years = max(0, int(years))

    def walk() -> Iterator[EquitySnapshot]:
        for year, balance in _amortize_by_year(loan, annual_rate, term_years, years):
            home_value = price * (1 + annual_appreciation) ** year
            yield EquitySnapshot(
                year=year,
                home_value=home_value,
                remaining_balance=balance,
                equity=home_value - balance,
                appreciation_gain=home_value - price,
                principal_paid=loan - balance,
            )

    return Projection(walk, years)


def total_value_projection(
    price: float,
    down_payment: float,
    loan: float,
    annual_rate: float,
    term_years: float,
    annual_appreciation: float,
    annual_cash_flow: float,
    years: int,
) -> Projection[ValueSnapshot]:
    """Yearly total wealth: equity plus cumulative cash flow.

    Returns are measured against ``down_payment`` only; closing costs are
    left out of this baseline.
    """
    years = max(0, int(years))
    cash_invested = down_payment

    def walk() -> Iterator[ValueSnapshot]:
        cumulative = 0.0
        for year, balance in _amortize_by_year(loan, annual_rate, term_years, years):
            cumulative += annual_cash_flow
            home_value = price * (1 + annual_appreciation) ** year
            equity = home_value - balance
            total_value = equity + cumulative
            net_gain = total_value - cash_invested
            total_roi = net_gain / cash_invested if cash_invested > 0 else 0.0
            yield ValueSnapshot(
                year=year,
                home_value=home_value,
                appreciation_gain=home_value - price,
                principal_paid=loan - balance,
                remaining_balance=balance,
                cumulative_cash_flow=cumulative,
                equity=equity,
                total_value=total_value,
                net_gain=net_gain,
                total_roi=total_roi,
                annualized_roi=total_roi / year,
            )

    return Projection(walk, years)
