"""Monte Carlo return simulator tests."""

from __future__ import annotations

import random
import statistics

import pytest

from fincalc.services.monte_carlo import (
    deterministic_value,
    nearest_rank,
    normal_draw,
    run_trial,
    simulate,
    validate_parameters,
)
from fincalc.services.results import FailureKind
from tests.conftest import assert_float_equal


def test_zero_volatility_is_deterministic_growth():
    outcome = simulate(10_000, 0.08, 0.0, 10, 250)

    assert outcome.ok
    result = outcome.value
    assert_float_equal(result.mean, 21_589.25)
    assert result.min == result.max == result.mean
    assert result.p10 == result.median == result.p90 == result.mean
    assert result.to_dict()["mean"] == 21_589.25


def test_seeded_runs_are_reproducible():
    first = simulate(10_000, 0.07, 0.15, 20, 500, seed=1234).value
    second = simulate(10_000, 0.07, 0.15, 20, 500, seed=1234).value
    injected = simulate(10_000, 0.07, 0.15, 20, 500, rng=random.Random(1234)).value

    assert first == second
    assert injected == first


def test_different_seeds_differ():
    first = simulate(10_000, 0.07, 0.15, 20, 500, seed=1).value
    second = simulate(10_000, 0.07, 0.15, 20, 500, seed=2).value

    assert first.mean != second.mean


def test_percentiles_are_ordered():
    result = simulate(10_000, 0.08, 0.18, 15, 2_000, seed=99).value

    assert result.min <= result.p10 <= result.median <= result.p90 <= result.max
    assert result.p10 <= result.mean <= result.p90


def test_mean_converges_as_trials_grow():
    expected = deterministic_value(10_000, 0.08, 10)

    small = simulate(10_000, 0.08, 0.15, 10, 100, seed=2024).value
    large = simulate(10_000, 0.08, 0.15, 10, 10_000, seed=2024).value

    assert abs(large.mean - expected) < 0.05 * expected
    assert abs(small.mean - expected) < 0.25 * expected


def test_too_few_trials_is_degenerate():
    outcome = simulate(10_000, 0.08, 0.15, 10, 50)

    assert not outcome.ok
    assert outcome.kind is FailureKind.DEGENERATE_PARAMETERS
    assert outcome.details == {"trials": 50, "min_trials": 100}


@pytest.mark.parametrize(
    "kwargs,field",
    [
        ({"initial": 0}, "initial"),
        ({"mean_annual_return": -0.01}, "mean_annual_return"),
        ({"annual_volatility": -0.2}, "annual_volatility"),
        ({"years": 0}, "years"),
        ({"years": 101}, "years"),
        ({"trials": 20_000}, "trials"),
    ],
)
def test_invalid_inputs_are_rejected(kwargs, field):
    params = {
        "initial": 10_000,
        "mean_annual_return": 0.08,
        "annual_volatility": 0.15,
        "years": 10,
        "trials": 1_000,
    }
    params.update(kwargs)

    outcome = simulate(**params)

    assert outcome.kind is FailureKind.INVALID_INPUT
    assert field in outcome.details


def test_fractional_years_are_rejected():
    outcome = simulate(10_000, 0.08, 0.15, 2.5, 1_000)

    assert outcome.kind is FailureKind.INVALID_INPUT


def test_trial_bounds_are_configurable():
    assert validate_parameters(1_000, 0.05, 0.1, 5, 20, 10, 50) is None
    failure = validate_parameters(1_000, 0.05, 0.1, 5, 60, 10, 50)
    assert failure.kind is FailureKind.INVALID_INPUT


def test_floor_at_zero_keeps_values_non_negative():
    unfloored = simulate(10_000, 0.08, 3.0, 5, 1_000, seed=7).value
    floored = simulate(10_000, 0.08, 3.0, 5, 1_000, seed=7, floor_at_zero=True).value

    assert unfloored.min < 0
    assert floored.min >= 0
    assert floored.floored is True


def test_run_trial_single_year_applies_one_draw():
    rng = random.Random(5)
    expected = 1_000 * (1 + normal_draw(random.Random(5), 0.05, 0.2))

    assert run_trial(rng, 1_000, 0.05, 0.2, 1) == pytest.approx(expected)


def test_normal_draw_matches_requested_moments():
    rng = random.Random(42)
    draws = [normal_draw(rng, 0.08, 0.15) for _ in range(20_000)]

    assert abs(statistics.fmean(draws) - 0.08) < 0.01
    assert abs(statistics.pstdev(draws) - 0.15) < 0.01


def test_nearest_rank_uses_floor_index():
    values = [float(n) for n in range(1, 11)]

    assert nearest_rank(values, 0.1) == 2.0
    assert nearest_rank(values, 0.5) == 6.0
    assert nearest_rank(values, 0.9) == 10.0
    assert nearest_rank(values, 1.0) == 10.0


def test_year_limit_is_configurable():
    assert validate_parameters(1_000, 0.05, 0.1, 40, 100, 100, 1_000, max_years=40) is None

    outcome = simulate(1_000, 0.05, 0.1, 41, 100, seed=1, max_years=40)

    assert outcome.kind is FailureKind.INVALID_INPUT
    assert outcome.details["years"] == "Simulate at most 40 years."


def test_long_horizon_is_rejected_before_running():
    outcome = simulate(10_000, 0.08, 0.0, 10_000, 100, seed=1)

    assert not outcome.ok
    assert outcome.kind is FailureKind.INVALID_INPUT
    assert "years" in outcome.details


@pytest.mark.parametrize("volatility", [0.0, 0.12])
def test_overflowing_growth_returns_failure(volatility):
    outcome = simulate(10_000, 1e8, volatility, 100, 100, seed=3)

    assert not outcome.ok
    assert outcome.kind is FailureKind.INVALID_INPUT
    assert "too large" in outcome.message
