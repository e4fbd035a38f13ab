"""Monte Carlo simulation of investment growth.

Each trial compounds ``initial`` over ``years`` annual returns drawn from a
normal distribution (Box-Muller). Terminal values are summarised with
nearest-rank percentiles, no interpolation.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..logging_config import get_logger
from .results import Failure, FailureKind, Result, Success

logger = get_logger(__name__)

MIN_TRIALS = 100
MAX_TRIALS = 10_000
MAX_YEARS = 100


@dataclass(frozen=True, slots=True)
class SimulationResult:
    """Distribution of terminal values across all trials."""

    initial: float
    years: int
    trials: int
    mean: float
    min: float
    max: float
    p10: float
    median: float
    p90: float
    floored: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial": self.initial,
            "years": self.years,
            "trials": self.trials,
            "mean": round(self.mean, 2),
            "min": round(self.min, 2),
            "max": round(self.max, 2),
            "p10": round(self.p10, 2),
            "median": round(self.median, 2),
            "p90": round(self.p90, 2),
            "floored": self.floored,
        }


def normal_draw(rng: random.Random, mean: float, std_dev: float) -> float:
    """Draw from N(mean, std_dev) using the Box-Muller transform."""

    u = 0.0
    v = 0.0
    while u == 0.0:
        u = rng.random()
    while v == 0.0:
        v = rng.random()
    z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
    return mean + z * std_dev


def deterministic_value(initial: float, mean_annual_return: float, years: int) -> float:
    """Terminal value when every year returns exactly the mean."""
    return initial * (1 + mean_annual_return) ** years


def run_trial(
    rng: random.Random,
    initial: float,
    mean_annual_return: float,
    annual_volatility: float,
    years: int,
    *,
    floor_at_zero: bool = False,
) -> float:
    """Return the terminal value of a single random path."""

    if annual_volatility == 0:
        return deterministic_value(initial, mean_annual_return, years)

    value = initial
    for _ in range(years):
        growth = 1 + normal_draw(rng, mean_annual_return, annual_volatility)
        if floor_at_zero and growth < 0:
            growth = 0.0
        value *= growth
    return value


def nearest_rank(sorted_values: List[float], fraction: float) -> float:
    """Element at ``floor(fraction * n)`` of an ascending list."""

    index = min(int(math.floor(fraction * len(sorted_values))), len(sorted_values) - 1)
    return sorted_values[index]


def validate_parameters(
    initial: float,
    mean_annual_return: float,
    annual_volatility: float,
    years: int,
    trials: int,
    min_trials: int,
    max_trials: int,
    max_years: int = MAX_YEARS,
) -> Optional[Failure]:
    """Return the failure these parameters would produce, or None if runnable."""

    problems: Dict[str, str] = {}
    if not math.isfinite(initial) or initial <= 0:
        problems["initial"] = "Initial investment must be greater than zero."
    if not math.isfinite(mean_annual_return) or mean_annual_return < 0:
        problems["mean_annual_return"] = "Expected return cannot be negative."
    if not math.isfinite(annual_volatility) or annual_volatility < 0:
        problems["annual_volatility"] = "Volatility cannot be negative."
    if years < 1:
        problems["years"] = "Simulate at least one year."
    elif years > max_years:
        problems["years"] = f"Simulate at most {max_years} years."
    if trials > max_trials:
        problems["trials"] = f"Run at most {max_trials:,} trials."
    if problems:
        return Failure(FailureKind.INVALID_INPUT, "Please enter valid positive values.", problems)
    if trials < min_trials:
        return Failure(
            FailureKind.DEGENERATE_PARAMETERS,
            f"Run at least {min_trials} trials for stable percentiles.",
            {"trials": trials, "min_trials": min_trials},
        )
    return None


def simulate(
    initial: float,
    mean_annual_return: float,
    annual_volatility: float,
    years: int,
    trials: int,
    *,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    floor_at_zero: bool = False,
    min_trials: int = MIN_TRIALS,
    max_trials: int = MAX_TRIALS,
    max_years: int = MAX_YEARS,
) -> Result[SimulationResult]:
    """Run ``trials`` independent paths and summarise their terminal values.

    Pass ``rng`` (or ``seed``) for reproducible output; otherwise every call
    draws fresh randomness. With ``floor_at_zero`` a year can at worst wipe
    the portfolio out instead of driving it negative.
    """

    if isinstance(years, float) and not years.is_integer():
        return Failure(FailureKind.INVALID_INPUT, "Years must be a whole number.", {"years": years})
    years = int(years)
    trials = int(trials)
    initial = float(initial)
    mean_annual_return = float(mean_annual_return)
    annual_volatility = float(annual_volatility)

    failure = validate_parameters(
        initial, mean_annual_return, annual_volatility, years, trials, min_trials, max_trials, max_years
    )
    if failure is not None:
        logger.warning("Monte Carlo input rejected", extra={"reason": failure.kind.value})
        return failure

    if rng is None:
        rng = random.Random(seed)

    try:
        outcomes = sorted(
            run_trial(
                rng,
                initial,
                mean_annual_return,
                annual_volatility,
                years,
                floor_at_zero=floor_at_zero,
            )
            for _ in range(trials)
        )
        # Identical outcomes must report a mean equal to them, not a rounded sum.
        mean = outcomes[0] if outcomes[0] == outcomes[-1] else math.fsum(outcomes) / trials
    except OverflowError:
        outcomes, mean = [], math.inf
    if not math.isfinite(mean) or not all(math.isfinite(value) for value in outcomes):
        logger.warning(
            "Monte Carlo values overflowed",
            extra={"years": years, "mean_annual_return": mean_annual_return},
        )
        return Failure(
            FailureKind.INVALID_INPUT,
            "Projected values are too large to represent; lower the return, volatility or years.",
            {"years": years, "mean_annual_return": mean_annual_return},
        )

    result = SimulationResult(
        initial=initial,
        years=years,
        trials=trials,
        mean=mean,
        min=outcomes[0],
        max=outcomes[-1],
        p10=nearest_rank(outcomes, 0.1),
        median=nearest_rank(outcomes, 0.5),
        p90=nearest_rank(outcomes, 0.9),
        floored=floor_at_zero,
    )
    logger.info(
        "Monte Carlo simulation finished",
        extra={"trials": trials, "years": years, "mean": round(result.mean, 2)},
    )
    return Success(result)
