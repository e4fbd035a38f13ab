"""Payoff form definitions and validation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from fincalc.services.debts import Debt
from fincalc.services.parsing import parse_number

StrategyChoices = Dict[str, str]

DEFAULT_STRATEGIES: StrategyChoices = {
    "snowball": "Snowball Method (Smallest Balances First)",
    "avalanche": "Avalanche Method (Highest Interest First)",
}

MAX_DEBTS = 25


@dataclass(slots=True)
class PayoffForm:
    """Raw debt rows plus plan options, with per-field validation errors.

    Rates arrive as percentages (``18.9``) and are converted to fractions.
    """

    debts: List[Mapping[str, Any]] = field(default_factory=list)
    extra_payment: Any = None
    strategy: str = "snowball"
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)
    parsed_debts: List[Debt] = field(default_factory=list, init=False)
    parsed_extra: float = field(default=0.0, init=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PayoffForm":
        debts = payload.get("debts") or []
        if not isinstance(debts, list):
            debts = []
        return cls(
            debts=[row for row in debts if isinstance(row, Mapping)],
            extra_payment=payload.get("extra_payment"),
            strategy=str(payload.get("strategy") or "snowball").strip().lower(),
        )

    def validate(self, *, strategies: StrategyChoices | None = None) -> bool:
        """Validate inputs, returning True when every field is acceptable."""

        self.errors.clear()
        self.parsed_debts = []
        strategies = strategies or DEFAULT_STRATEGIES

        if not self.debts:
            self.errors.setdefault("debts", []).append("Add at least one debt.")
        elif len(self.debts) > MAX_DEBTS:
            self.errors.setdefault("debts", []).append(f"Enter at most {MAX_DEBTS} debts.")

        for index, row in enumerate(self.debts[:MAX_DEBTS]):
            prefix = f"debts[{index}]"
            balance = self._parse_amount(f"{prefix}.balance", row.get("balance"))
            rate = self._parse_amount(f"{prefix}.rate", row.get("rate"))
            minimum = self._parse_amount(f"{prefix}.minimum_payment", row.get("minimum_payment"))
            if rate is not None and rate > 100:
                self.errors.setdefault(f"{prefix}.rate", []).append(
                    "Interest rate must be between 0 and 100 percent."
                )
            if None in (balance, rate, minimum):
                continue
            name = str(row.get("name") or "").strip() or f"Debt {index + 1}"
            self.parsed_debts.append(
                Debt(name=name, balance=balance, annual_rate=rate / 100, minimum_payment=minimum)
            )

        if self.debts and not self.errors and not any(d.balance > 0 for d in self.parsed_debts):
            self.errors.setdefault("debts", []).append("At least one debt needs a balance.")

        if self.extra_payment in (None, ""):
            self.parsed_extra = 0.0
        else:
            extra = self._parse_amount("extra_payment", self.extra_payment)
            self.parsed_extra = extra or 0.0

        if self.strategy not in strategies:
            self.errors.setdefault("strategy", []).append("Choose a payoff strategy.")

        return not self.errors

    def _parse_amount(self, field_name: str, value: Any) -> float | None:
        """Parse a non-negative amount, storing errors when parsing fails."""

        if value is None or value == "":
            self.errors.setdefault(field_name, []).append("This field is required.")
            return None
        number = parse_number(value)
        if number is None:
            self.errors.setdefault(field_name, []).append("Enter a valid number.")
            return None
        if number < 0:
            self.errors.setdefault(field_name, []).append("Amount must be at least zero.")
            return None
        return number

    @property
    def error_messages(self) -> Iterable[str]:
        """Flattened iterable of error strings for summaries."""

        for messages in self.errors.values():
            yield from messages
