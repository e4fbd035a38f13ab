"""Corporate finance calculators."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

from .results import CalculationError


@dataclass(frozen=True, slots=True)
class WACCResult:
    total_capital: float
    equity_weight: float
    debt_weight: float
    after_tax_cost_of_debt: float
    wacc: float

    def to_dict(self) -> dict:
        return asdict(self)


def wacc(
    equity: float, debt: float, cost_of_equity: float, cost_of_debt: float, tax_rate: float
) -> WACCResult:
    """Weighted average cost of capital; rates are decimal fractions."""

    if equity < 0 or debt < 0:
        raise CalculationError("Equity and debt values cannot be negative.")
    total = equity + debt
    if total <= 0:
        raise CalculationError("Total capital must be greater than zero.")
    if not 0 <= tax_rate <= 1:
        raise CalculationError("Tax rate must be between 0% and 100%.")

    after_tax_debt = cost_of_debt * (1 - tax_rate)
    we = equity / total
    wd = debt / total
    return WACCResult(
        total_capital=total,
        equity_weight=we,
        debt_weight=wd,
        after_tax_cost_of_debt=after_tax_debt,
        wacc=we * cost_of_equity + wd * after_tax_debt,
    )


@dataclass(frozen=True, slots=True)
class BreakEvenResult:
    units: int
    revenue: float
    contribution_margin: float  # per-unit margin as a fraction of price

    def to_dict(self) -> dict:
        return asdict(self)


def break_even(fixed_costs: float, variable_cost: float, price: float) -> BreakEvenResult:
    """Units (rounded up) and revenue needed to cover fixed costs."""

    if fixed_costs < 0 or variable_cost < 0:
        raise CalculationError("Fixed costs and variable cost must be non-negative.")
    if price <= 0:
        raise CalculationError("Price per unit must be positive.")
    if price <= variable_cost:
        raise CalculationError(
            "Price per unit must be greater than variable cost per unit to break even."
        )

    units = math.ceil(fixed_costs / (price - variable_cost))
    return BreakEvenResult(
        units=units,
        revenue=units * price,
        contribution_margin=(price - variable_cost) / price,
    )
