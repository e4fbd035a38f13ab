"""Calculator registry: maps URL names to service functions and their fields."""

from __future__ import annotations

from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Callable, Dict, List, Mapping, Tuple

from fincalc.services import corporate, investments, loans, securities
from fincalc.services.parsing import parse_int, parse_number, parse_percent
from fincalc.services.results import CalculationError

_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "number": parse_number,
    "percent": parse_percent,
    "int": parse_int,
    "text": lambda value: str(value).strip() or None,
}


@dataclass(frozen=True, slots=True)
class Field:
    """One calculator input.

    ``kind`` picks the parser: ``number``, ``percent`` (converted to a
    fraction), ``int``, ``text`` or ``numbers`` (a list). Optional fields that
    are missing are left out so the service default applies.
    """

    name: str
    kind: str = "number"
    required: bool = True


@dataclass(frozen=True, slots=True)
class Calculator:
    func: Callable[..., Any]
    fields: Tuple[Field, ...]
    description: str = ""

    def parse(self, payload: Mapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, List[str]]]:
        """Return (kwargs, errors) for a raw payload."""

        kwargs: Dict[str, Any] = {}
        errors: Dict[str, List[str]] = {}
        for field in self.fields:
            raw = payload.get(field.name)
            if raw is None or raw == "" or raw == []:
                if field.required:
                    errors.setdefault(field.name, []).append("This field is required.")
                continue
            if field.kind == "numbers":
                items = raw if isinstance(raw, list) else str(raw).split(";")
                values = [parse_number(item) for item in items]
                if any(value is None for value in values):
                    errors.setdefault(field.name, []).append("Enter valid numbers.")
                    continue
                kwargs[field.name] = values
                continue
            value = _PARSERS[field.kind](raw)
            if value is None:
                errors.setdefault(field.name, []).append("Enter a valid number.")
                continue
            kwargs[field.name] = value
        return kwargs, errors

    def run(self, payload: Mapping[str, Any]) -> Any:
        kwargs, errors = self.parse(payload)
        if errors:
            raise InvalidFields(errors)
        try:
            return self.func(**kwargs)
        except OverflowError as exc:
            raise CalculationError("Result is too large to compute.") from exc


class InvalidFields(CalculationError):
    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__("One or more fields are invalid.")
        self.errors = errors


def serialize(result: Any) -> Any:
    """Turn a calculator result into JSON-ready data."""

    if hasattr(result, "to_dict"):
        return result.to_dict()
    if isinstance(result, list):
        return [serialize(item) for item in result]
    if is_dataclass(result):
        return asdict(result)
    return result


CALCULATORS: Dict[str, Calculator] = {
    "loan": Calculator(
        loans.loan_summary,
        (Field("principal"), Field("annual_rate", "percent"), Field("years")),
        "Monthly payment and total interest for a fixed-rate loan.",
    ),
    "mortgage": Calculator(
        loans.mortgage,
        (Field("home_value"), Field("down_payment"), Field("annual_rate", "percent"), Field("years")),
        "Mortgage payment after down payment.",
    ),
    "car-loan": Calculator(
        loans.car_loan,
        (
            Field("price"),
            Field("down_payment", required=False),
            Field("trade_in", required=False),
            Field("annual_rate", "percent", required=False),
            Field("months", "int", required=False),
        ),
        "Car loan payment net of down payment and trade-in.",
    ),
    "credit-card-payoff": Calculator(
        loans.credit_card_payoff,
        (Field("balance"), Field("annual_rate", "percent"), Field("monthly_payment")),
        "Months to pay off a card with a fixed monthly payment.",
    ),
    "amortization": Calculator(
        loans.amortization_schedule,
        (Field("principal"), Field("annual_rate", "percent"), Field("months", "int")),
        "Month-by-month amortization schedule.",
    ),
    "compound-interest": Calculator(
        investments.compound_interest,
        (
            Field("principal"),
            Field("annual_rate", "percent"),
            Field("years"),
            Field("frequency", "text", required=False),
        ),
        "Compound growth of a lump sum.",
    ),
    "cd": Calculator(
        investments.cd_maturity,
        (
            Field("deposit"),
            Field("annual_rate", "percent"),
            Field("years"),
            Field("frequency", "text", required=False),
        ),
        "Certificate of deposit maturity value and APY.",
    ),
    "time-value-of-money": Calculator(
        investments.time_value_of_money,
        (
            Field("present_value", required=False),
            Field("future_value", required=False),
            Field("annual_rate", "percent"),
            Field("years"),
            Field("frequency", "text", required=False),
        ),
        "Present and future value under compounding.",
    ),
    "roi": Calculator(
        investments.roi,
        (Field("initial"), Field("final"), Field("years", required=False)),
        "Total and annualized return on investment.",
    ),
    "npv": Calculator(
        investments.npv,
        (Field("initial_investment"), Field("discount_rate"), Field("cash_flows", "numbers")),
        "Net present value of yearly cash flows.",
    ),
    "retirement": Calculator(
        investments.retirement_projection,
        (
            Field("current_age", "int"),
            Field("retirement_age", "int"),
            Field("current_savings"),
            Field("annual_contribution"),
            Field("employer_match", "percent", required=False),
            Field("match_limit", "percent", required=False),
            Field("annual_return", "percent", required=False),
            Field("inflation_rate", "percent", required=False),
        ),
        "Retirement savings projection with employer match.",
    ),
    "wacc": Calculator(
        corporate.wacc,
        (
            Field("equity"),
            Field("debt"),
            Field("cost_of_equity", "percent"),
            Field("cost_of_debt", "percent"),
            Field("tax_rate", "percent"),
        ),
        "Weighted average cost of capital.",
    ),
    "break-even": Calculator(
        corporate.break_even,
        (Field("fixed_costs"), Field("variable_cost"), Field("price")),
        "Units and revenue needed to break even.",
    ),
    "bond-price": Calculator(
        securities.bond_price,
        (
            Field("face"),
            Field("coupon_rate", "percent"),
            Field("years"),
            Field("market_yield", "percent"),
            Field("payments_per_year", "int", required=False),
        ),
        "Bond price and current yield.",
    ),
    "duration-convexity": Calculator(
        securities.duration_convexity,
        (
            Field("face"),
            Field("coupon_rate", "percent"),
            Field("yield_rate", "percent"),
            Field("years"),
            Field("payments_per_year", "int", required=False),
        ),
        "Macaulay/modified duration and convexity.",
    ),
    "option-pricing": Calculator(
        securities.black_scholes,
        (
            Field("spot"),
            Field("strike"),
            Field("years"),
            Field("risk_free_rate", "percent"),
            Field("volatility", "percent"),
        ),
        "Black-Scholes European option prices and Greeks.",
    ),
}
