"""Loan calculators: amortized payments, mortgages, car loans, card payoff."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import List

from .results import CalculationError

MAX_SCHEDULE_MONTHS = 1_200


@dataclass(frozen=True, slots=True)
class LoanSummary:
    principal: float
    monthly_payment: float
    months: int
    total_paid: float
    total_interest: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class AmortizationRow:
    month: int
    payment: float
    principal: float
    interest: float
    balance: float


@dataclass(frozen=True, slots=True)
class CardPayoff:
    months: int
    exact_months: float
    total_paid: float
    total_interest: float

    def to_dict(self) -> dict:
        return asdict(self)


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise CalculationError(message)


def amortized_payment(principal: float, annual_rate: float, months: int) -> float:
    """Level monthly payment ``M = P*i / (1 - (1+i)^-n)``; zero rate gives ``P/n``."""

    _require(principal >= 0, "Loan amount cannot be negative.")
    _require(annual_rate >= 0, "Interest rate cannot be negative.")
    _require(months >= 1, "Loan term must be at least one month.")

    rate = annual_rate / 12
    if rate == 0:
        return principal / months
    return principal * rate / (1 - (1 + rate) ** -months)


def _summarize(principal: float, annual_rate: float, months: int) -> LoanSummary:
    payment = amortized_payment(principal, annual_rate, months)
    total_paid = payment * months
    return LoanSummary(
        principal=principal,
        monthly_payment=payment,
        months=months,
        total_paid=total_paid,
        total_interest=max(total_paid - principal, 0.0),
    )


def loan_summary(principal: float, annual_rate: float, years: float) -> LoanSummary:
    """Payment and totals for a fixed-rate loan with a term in years."""

    _require(years > 0, "Loan term must be positive.")
    return _summarize(principal, annual_rate, int(round(years * 12)))


def mortgage(
    home_value: float, down_payment: float, annual_rate: float, years: float
) -> LoanSummary:
    _require(home_value > 0, "Home value must be greater than zero.")
    _require(0 <= down_payment <= home_value, "Down payment must be between zero and the home value.")
    return loan_summary(home_value - down_payment, annual_rate, years)


def car_loan(
    price: float,
    down_payment: float = 0.0,
    trade_in: float = 0.0,
    annual_rate: float = 0.055,
    months: int = 60,
) -> LoanSummary:
    """Car loan where negative inputs are clamped, as the form does."""

    price = max(price, 0.0)
    down_payment = max(down_payment, 0.0)
    trade_in = max(trade_in, 0.0)
    months = max(int(months), 1)
    annual_rate = max(annual_rate, 0.0)
    loan_amount = max(price - down_payment - trade_in, 0.0)
    return _summarize(loan_amount, annual_rate, months)


def credit_card_payoff(balance: float, annual_rate: float, monthly_payment: float) -> CardPayoff:
    """Months to clear a card balance paying a fixed amount each month.

    Uses ``n = ln(M / (M - B*i)) / ln(1 + i)``.
    """

    _require(balance > 0, "Please enter a valid current balance.")
    _require(annual_rate >= 0, "Please enter a valid interest rate.")
    _require(monthly_payment > 0, "Please enter a valid monthly payment.")

    rate = annual_rate / 12
    _require(
        monthly_payment > balance * rate,
        "Your monthly payment is too low to cover the interest. Please increase it.",
    )
    if rate == 0:
        exact = balance / monthly_payment
    else:
        exact = math.log(monthly_payment / (monthly_payment - balance * rate)) / math.log(1 + rate)
    total_paid = monthly_payment * exact
    return CardPayoff(
        months=math.ceil(exact - 1e-9),
        exact_months=exact,
        total_paid=total_paid,
        total_interest=total_paid - balance,
    )


def amortization_schedule(principal: float, annual_rate: float, months: int) -> List[AmortizationRow]:
    """Month-by-month split of a level payment into principal and interest."""

    _require(months <= MAX_SCHEDULE_MONTHS, f"Schedules are limited to {MAX_SCHEDULE_MONTHS:,} months.")
    payment = amortized_payment(principal, annual_rate, months)
    rate = annual_rate / 12
    balance = principal
    rows: List[AmortizationRow] = []
    for month in range(1, months + 1):
        interest = balance * rate
        # Final row absorbs floating-point residue.
        principal_part = balance if month == months else payment - interest
        balance -= principal_part
        rows.append(
            AmortizationRow(
                month=month,
                payment=principal_part + interest,
                principal=principal_part,
                interest=interest,
                balance=max(balance, 0.0),
            )
        )
    return rows
