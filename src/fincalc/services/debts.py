"""Debt payoff simulator (snowball and avalanche).

Debts are ordered once before the simulation starts:

- snowball: ascending balance
- avalanche: descending annual rate

Every month each non-priority debt receives its minimum payment while the
priority debt (the head of the list) receives its minimum plus the extra
payment. Payments are capped at what it takes to clear a balance. When the
priority debt is cleared its minimum rolls into the extra payment for the
next target.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from ..logging_config import get_logger
from .parsing import coerce_amount
from .results import Failure, FailureKind, Result, Success

logger = get_logger(__name__)

PAYOFF_EPSILON = 0.01
DEFAULT_MAX_MONTHS = 600
STRATEGIES = ("snowball", "avalanche")


@dataclass(slots=True, eq=False)
class Debt:
    """A single liability fed into the payoff simulation."""

    name: str
    balance: float
    annual_rate: float  # decimal fraction, 0.189 == 18.9%
    minimum_payment: float

    @property
    def monthly_interest(self) -> float:
        return self.balance * self.annual_rate / 12

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Debt":
        """Build a debt from loosely typed input, coercing bad numbers to zero."""

        return cls(
            name=str(data.get("name") or "").strip() or "Debt",
            balance=coerce_amount(data.get("balance")),
            annual_rate=coerce_amount(data.get("annual_rate")),
            minimum_payment=coerce_amount(data.get("minimum_payment")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "balance": self.balance,
            "annual_rate": self.annual_rate,
            "minimum_payment": self.minimum_payment,
        }


@dataclass(frozen=True, slots=True)
class MonthlyLedgerEntry:
    """Totals across all debts for one simulated month."""

    month: int
    interest_paid: float
    principal_paid: float
    debts_remaining: int
    remaining_balance: float

    @property
    def total_paid(self) -> float:
        return self.interest_paid + self.principal_paid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "interest_paid": round(self.interest_paid, 2),
            "principal_paid": round(self.principal_paid, 2),
            "total_paid": round(self.total_paid, 2),
            "remaining_balance": round(self.remaining_balance, 2),
            "debts_remaining": self.debts_remaining,
        }


@dataclass(frozen=True, slots=True)
class PayoffResult:
    """Outcome of a payoff simulation."""

    strategy: str
    total_months: int
    total_interest: float
    total_principal: float
    extra_payment: float
    ledger: tuple[MonthlyLedgerEntry, ...]
    payoff_order: tuple[str, ...]
    completed: bool

    @property
    def total_paid(self) -> float:
        return self.total_interest + self.total_principal

    def to_dict(self, *, include_ledger: bool = True) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "strategy": self.strategy,
            "total_months": self.total_months,
            "years": self.total_months // 12,
            "months": self.total_months % 12,
            "total_interest": round(self.total_interest, 2),
            "total_principal": round(self.total_principal, 2),
            "total_paid": round(self.total_paid, 2),
            "extra_payment": self.extra_payment,
            "payoff_order": list(self.payoff_order),
            "completed": self.completed,
        }
        if include_ledger:
            payload["ledger"] = [entry.to_dict() for entry in self.ledger]
        return payload


@dataclass(slots=True)
class PayoffPlan:
    """Mutable month-by-month state of a running simulation."""

    debts: List[Debt]
    extra_payment: float
    month: int = 0
    total_interest: float = 0.0
    total_principal: float = 0.0
    ledger: List[MonthlyLedgerEntry] = field(default_factory=list)
    payoff_order: List[str] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return bool(self.debts)

    def step(self) -> MonthlyLedgerEntry:
        """Advance the plan by one month and record the ledger entry."""

        self.month += 1
        month_interest = 0.0
        month_principal = 0.0

        if not self.debts:
            raise RuntimeError("No active debts left to simulate")

        target, others = self.debts[0], self.debts[1:]
        survivors = [target]
        for debt in others:
            interest = debt.monthly_interest
            payment = min(debt.minimum_payment, debt.balance + interest)
            principal = payment - interest
            debt.balance -= principal
            month_interest += interest
            month_principal += principal
            if debt.balance <= PAYOFF_EPSILON:
                self.payoff_order.append(debt.name)
            else:
                survivors.append(debt)

        interest = target.monthly_interest
        payment = min(target.minimum_payment + self.extra_payment, target.balance + interest)
        principal = payment - interest
        target.balance -= principal
        month_interest += interest
        month_principal += principal
        if target.balance <= PAYOFF_EPSILON:
            # Freed minimum snowballs into the next target.
            self.extra_payment += target.minimum_payment
            self.payoff_order.append(target.name)
            survivors.pop(0)

        self.debts = survivors
        self.total_interest += month_interest
        self.total_principal += month_principal

        entry = MonthlyLedgerEntry(
            month=self.month,
            interest_paid=month_interest,
            principal_paid=month_principal,
            debts_remaining=len(self.debts),
            remaining_balance=sum((debt.balance for debt in self.debts), 0.0),
        )
        self.ledger.append(entry)
        return entry


def _prepare(debts: Iterable[Debt | Mapping[str, Any]]) -> List[Debt]:
    """Copy debts with coerced values, dropping those with nothing owed."""

    prepared: List[Debt] = []
    for item in debts:
        if isinstance(item, Debt):
            debt = replace(
                item,
                balance=coerce_amount(item.balance),
                annual_rate=coerce_amount(item.annual_rate),
                minimum_payment=coerce_amount(item.minimum_payment),
            )
        else:
            debt = Debt.from_mapping(item)
        if debt.balance > 0:
            prepared.append(debt)
    return prepared


def order_debts(debts: Sequence[Debt], strategy: str) -> List[Debt]:
    """Return debts in payoff priority order for ``strategy``."""

    if strategy == "snowball":
        return sorted(debts, key=lambda d: d.balance)
    if strategy == "avalanche":
        return sorted(debts, key=lambda d: d.annual_rate, reverse=True)
    raise ValueError(f"Invalid debt payoff strategy: {strategy!r}")


def find_non_convergent(debts: Sequence[Debt], extra_payment: float) -> List[Debt]:
    """Return debts whose payments never outpace their monthly interest.

    ``debts`` must already be in priority order: the head of the list is
    judged on its minimum plus the extra payment, every other debt on its
    minimum alone.
    """

    stuck: List[Debt] = []
    for index, debt in enumerate(debts):
        payment = debt.minimum_payment + (extra_payment if index == 0 else 0.0)
        if payment <= debt.monthly_interest:
            stuck.append(debt)
    return stuck


def simulate(
    debts: Iterable[Debt | Mapping[str, Any]],
    extra_payment: Any = 0.0,
    strategy: str = "snowball",
    *,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> Result[PayoffResult]:
    """Simulate month-by-month payoff of ``debts`` under ``strategy``.

    Returns ``Success`` with a completed :class:`PayoffResult`, or a
    ``Failure`` when the input is unusable, when some payment can never
    cover its interest, or when ``max_months`` elapse first. The capped
    failure carries the partial result under ``details["partial"]``.
    """

    if strategy not in STRATEGIES:
        return Failure(
            FailureKind.INVALID_INPUT,
            f"Unknown strategy {strategy!r}; expected one of {', '.join(STRATEGIES)}.",
        )
    if max_months <= 0:
        return Failure(FailureKind.INVALID_INPUT, "max_months must be positive.")

    extra = coerce_amount(extra_payment)
    active = _prepare(debts)
    if not active:
        return Failure(FailureKind.INVALID_INPUT, "Enter at least one debt with a balance.")

    ordered = order_debts(active, strategy)
    stuck = find_non_convergent(ordered, extra)
    if stuck:
        names = [debt.name for debt in stuck]
        logger.warning(
            "Payoff plan cannot converge",
            extra={"strategy": strategy, "debts": names},
        )
        return Failure(
            FailureKind.NON_CONVERGENT,
            "Minimum payment does not cover monthly interest for: " + ", ".join(names) + ".",
            {"debts": names},
        )

    plan = PayoffPlan(debts=ordered, extra_payment=extra)
    logger.debug(
        "Starting payoff simulation",
        extra={"strategy": strategy, "debt_count": len(ordered), "extra_payment": extra},
    )
    while plan.active and plan.month < max_months:
        plan.step()

    result = PayoffResult(
        strategy=strategy,
        total_months=plan.month,
        total_interest=plan.total_interest,
        total_principal=plan.total_principal,
        extra_payment=extra,
        ledger=tuple(plan.ledger),
        payoff_order=tuple(plan.payoff_order),
        completed=not plan.active,
    )

    if plan.active:
        logger.warning(
            "Payoff simulation hit month cap",
            extra={"strategy": strategy, "max_months": max_months, "debts_remaining": len(plan.debts)},
        )
        return Failure(
            FailureKind.CAP_REACHED,
            f"Debts were not paid off within {max_months} months.",
            {"partial": result, "max_months": max_months},
        )

    logger.info(
        "Payoff simulation finished",
        extra={
            "strategy": strategy,
            "months": result.total_months,
            "total_interest": round(result.total_interest, 2),
        },
    )
    return Success(result)


def snowball(
    debts: Iterable[Debt | Mapping[str, Any]], extra_payment: Any = 0.0, **kwargs: Any
) -> Result[PayoffResult]:
    """Simulate payoff prioritizing the smallest balances first."""
    return simulate(debts, extra_payment, "snowball", **kwargs)


def avalanche(
    debts: Iterable[Debt | Mapping[str, Any]], extra_payment: Any = 0.0, **kwargs: Any
) -> Result[PayoffResult]:
    """Simulate payoff prioritizing the highest rates first."""
    return simulate(debts, extra_payment, "avalanche", **kwargs)


@dataclass(frozen=True, slots=True)
class StrategyComparison:
    snowball: PayoffResult
    avalanche: PayoffResult

    @property
    def interest_saved(self) -> float:
        """Interest avalanche saves over snowball (negative if it costs more)."""
        return self.snowball.total_interest - self.avalanche.total_interest

    @property
    def months_saved(self) -> int:
        return self.snowball.total_months - self.avalanche.total_months

    def to_dict(self, *, include_ledger: bool = False) -> Dict[str, Any]:
        return {
            "snowball": self.snowball.to_dict(include_ledger=include_ledger),
            "avalanche": self.avalanche.to_dict(include_ledger=include_ledger),
            "interest_saved": round(self.interest_saved, 2),
            "months_saved": self.months_saved,
        }


def compare_strategies(
    debts: Iterable[Debt | Mapping[str, Any]],
    extra_payment: Any = 0.0,
    *,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> Result[StrategyComparison]:
    """Run both strategies on the same inputs; the first failure wins."""

    debt_list = list(debts)
    outcomes = {}
    for strategy in STRATEGIES:
        outcome = simulate(debt_list, extra_payment, strategy, max_months=max_months)
        if not outcome.ok:
            return outcome
        outcomes[strategy] = outcome.value
    return Success(StrategyComparison(**outcomes))
