"""Monte Carlo form definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from fincalc.services.parsing import parse_int, parse_number


@dataclass(slots=True)
class MonteCarloForm:
    """Simulation inputs as submitted; return and volatility are percentages."""

    initial: Any = None
    annual_return: Any = None
    volatility: Any = None
    years: Any = None
    trials: Any = None
    seed: Any = None
    floor_at_zero: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)
    cleaned: Dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "MonteCarloForm":
        return cls(**{name: payload.get(name) for name in (
            "initial", "annual_return", "volatility", "years", "trials", "seed", "floor_at_zero",
        )})

    def validate(self, *, default_floor: bool = False, max_years: Optional[int] = None) -> bool:
        self.errors.clear()
        self.cleaned = {}

        initial = self._required_number("initial", self.initial)
        annual_return = self._required_number("annual_return", self.annual_return)
        volatility = self._required_number("volatility", self.volatility)
        years = self._required_number("years", self.years)
        trials = self._required_number("trials", self.trials)

        if initial is not None and initial <= 0:
            self._add("initial", "Initial investment must be greater than zero.")
        if annual_return is not None and annual_return < 0:
            self._add("annual_return", "Expected return cannot be negative.")
        if volatility is not None and volatility < 0:
            self._add("volatility", "Volatility cannot be negative.")
        if years is not None and (years < 1 or not float(years).is_integer()):
            self._add("years", "Years must be a whole number of at least 1.")
        elif years is not None and max_years is not None and years > max_years:
            self._add("years", f"Years cannot exceed {max_years}.")
        if trials is not None and not float(trials).is_integer():
            self._add("trials", "Trials must be a whole number.")

        seed: Optional[int] = None
        if self.seed not in (None, ""):
            seed = parse_int(self.seed)
            if seed is None:
                self._add("seed", "Seed must be an integer.")

        if self.errors:
            return False

        self.cleaned = {
            "initial": initial,
            "mean_annual_return": annual_return / 100,
            "annual_volatility": volatility / 100,
            "years": int(years),
            "trials": int(trials),
            "seed": seed,
            "floor_at_zero": _as_bool(self.floor_at_zero, default_floor),
        }
        return True

    def _required_number(self, name: str, value: Any) -> Optional[float]:
        if value is None or value == "":
            self._add(name, "This field is required.")
            return None
        number = parse_number(value)
        if number is None:
            self._add(name, "Enter a valid number.")
        return number

    def _add(self, name: str, message: str) -> None:
        self.errors.setdefault(name, []).append(message)


def _as_bool(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
