"""Growth and return calculators."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Optional, Sequence

from .results import CalculationError

COMPOUNDING_FREQUENCIES = {
    "annually": 1,
    "semiannually": 2,
    "quarterly": 4,
    "monthly": 12,
    "weekly": 52,
    "daily": 365,
}

TOO_LARGE = "Result is too large to compute; shorten the term or lower the rate."


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise CalculationError(message)


def _finite(value: float) -> float:
    _require(math.isfinite(value), TOO_LARGE)
    return value


def _compound(rate: float, periods: float) -> float:
    """``(1 + rate) ** periods``, raising CalculationError on overflow."""

    try:
        return _finite((1 + rate) ** periods)
    except OverflowError:
        raise CalculationError(TOO_LARGE) from None


def periods_per_year(frequency: str | int) -> int:
    """Resolve a compounding frequency name (or count) into periods per year."""

    if isinstance(frequency, str) and frequency.strip().isdigit():
        frequency = int(frequency.strip())
    if isinstance(frequency, int):
        _require(frequency > 0, "Compounding frequency must be positive.")
        return frequency
    try:
        return COMPOUNDING_FREQUENCIES[str(frequency).strip().lower()]
    except KeyError:
        raise CalculationError(f"Unknown compounding frequency: {frequency!r}") from None


@dataclass(frozen=True, slots=True)
class GrowthResult:
    principal: float
    amount: float
    interest_earned: float
    effective_annual_yield: float

    def to_dict(self) -> dict:
        return asdict(self)


def compound_interest(
    principal: float, annual_rate: float, years: float, frequency: str | int = "monthly"
) -> GrowthResult:
    """``A = P (1 + r/n)^(n t)``."""

    _require(principal > 0, "Principal must be greater than zero.")
    _require(annual_rate >= 0, "Interest rate cannot be negative.")
    _require(years > 0, "Years must be greater than zero.")
    n = periods_per_year(frequency)
    amount = _finite(principal * _compound(annual_rate / n, n * years))
    return GrowthResult(
        principal=principal,
        amount=amount,
        interest_earned=amount - principal,
        effective_annual_yield=_compound(annual_rate / n, n) - 1,
    )


def cd_maturity(
    deposit: float, annual_rate: float, years: float, frequency: str | int = "monthly"
) -> GrowthResult:
    """Certificate of deposit maturity value and APY."""
    return compound_interest(deposit, annual_rate, years, frequency)


@dataclass(frozen=True, slots=True)
class TimeValueResult:
    present_value: float
    future_value: float
    growth_factor: float

    def to_dict(self) -> dict:
        return asdict(self)


def time_value_of_money(
    *,
    present_value: Optional[float] = None,
    future_value: Optional[float] = None,
    annual_rate: float,
    years: float,
    frequency: str | int = "annually",
) -> TimeValueResult:
    """Project a present value forward and/or discount a future value back.

    When both are given, each is derived from the other.
    """

    _require(
        present_value is not None or future_value is not None,
        "Enter a present value or a future value.",
    )
    _require(annual_rate > 0, "Rate must be greater than zero.")
    _require(years > 0, "Years must be greater than zero.")
    n = periods_per_year(frequency)
    factor = _compound(annual_rate / n, n * years)

    if present_value is not None and future_value is not None:
        return TimeValueResult(
            present_value=future_value / factor,
            future_value=_finite(present_value * factor),
            growth_factor=factor,
        )
    if present_value is not None:
        return TimeValueResult(present_value, _finite(present_value * factor), factor)
    return TimeValueResult(future_value / factor, future_value, factor)


@dataclass(frozen=True, slots=True)
class ROIResult:
    net_profit: float
    roi: float
    annualized_roi: float

    def to_dict(self) -> dict:
        return asdict(self)


def roi(initial: float, final: float, years: float = 0.0) -> ROIResult:
    """Return on investment, annualized when a holding period is given."""

    _require(initial > 0, "Initial investment must be greater than zero.")
    _require(years >= 0, "Time period cannot be negative.")
    net = final - initial
    total = net / initial
    if years > 0:
        _require(final >= 0, "Final value cannot be negative for an annualized return.")
        annualized = _compound(total, 1 / years) - 1
    else:
        annualized = total
    return ROIResult(net_profit=net, roi=total, annualized_roi=annualized)


@dataclass(frozen=True, slots=True)
class NPVResult:
    npv: float
    discount_rate: float
    present_values: tuple[float, ...]

    @property
    def profitable(self) -> bool:
        return self.npv > 0

    def to_dict(self) -> dict:
        return {
            "npv": self.npv,
            "discount_rate": self.discount_rate,
            "present_values": list(self.present_values),
            "profitable": self.profitable,
        }


def npv(initial_investment: float, discount_rate: float, cash_flows: Sequence[float]) -> NPVResult:
    """Net present value of end-of-year ``cash_flows`` less the initial outlay.

    A ``discount_rate`` above 1 is read as a percentage (``10`` means 10%).
    """

    if discount_rate > 1:
        discount_rate = discount_rate / 100
    _require(discount_rate > -1, "Discount rate must be greater than -100%.")
    _require(len(cash_flows) > 0, "Enter at least one cash flow.")

    present_values = tuple(
        flow / _compound(discount_rate, year) for year, flow in enumerate(cash_flows, start=1)
    )
    return NPVResult(
        npv=sum(present_values) - initial_investment,
        discount_rate=discount_rate,
        present_values=present_values,
    )


@dataclass(frozen=True, slots=True)
class RetirementProjection:
    years_to_retire: int
    annual_contribution: float
    future_value: float
    real_value: float
    real_return: float
    monthly_withdrawal: float

    def to_dict(self) -> dict:
        return asdict(self)


def retirement_projection(
    *,
    current_age: int,
    retirement_age: int,
    current_savings: float,
    annual_contribution: float,
    employer_match: float = 0.0,
    match_limit: float = 0.0,
    annual_return: float = 0.07,
    inflation_rate: float = 0.03,
) -> RetirementProjection:
    """Savings at retirement with contributions made at the start of each year.

    Employer match is ``contribution * min(employer_match, match_limit)``.
    The sustainable monthly withdrawal spends the real return only.
    """

    years = int(retirement_age) - int(current_age)
    _require(years > 0, "Retirement age must be greater than current age.")
    _require(current_savings >= 0 and annual_contribution >= 0, "Savings cannot be negative.")
    _require(inflation_rate > -1, "Inflation rate must be greater than -100%.")

    match = min(annual_contribution * employer_match, annual_contribution * match_limit)
    yearly = annual_contribution + max(match, 0.0)

    value = current_savings
    for _ in range(years):
        value = (value + yearly) * (1 + annual_return)

    real_return = (1 + annual_return) / (1 + inflation_rate) - 1
    return RetirementProjection(
        years_to_retire=years,
        annual_contribution=yearly,
        future_value=_finite(value),
        real_value=value / _compound(inflation_rate, years),
        real_return=real_return,
        monthly_withdrawal=value * real_return / 12,
    )
