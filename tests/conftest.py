"""Pytest configuration and shared fixtures for FinCalc tests.

Provides an isolated Flask app per test (logs under ``tmp_path``),
the sample debt set used across payoff tests, and float helpers.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from fincalc import create_app
from fincalc.services.debts import Debt
from fincalc.services.jobs import clear_jobs, set_async_execution

_ENV_VARS = (
    "FINCALC_SECRET_KEY",
    "FINCALC_DEV_MODE",
    "FINCALC_PAYOFF_MAX_MONTHS",
    "FINCALC_MC_MIN_TRIALS",
    "FINCALC_MC_MAX_TRIALS",
    "FINCALC_MC_MAX_YEARS",
    "FINCALC_MC_ASYNC_THRESHOLD",
    "FINCALC_MC_FLOOR_AT_ZERO",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the data directory at ``tmp_path`` and clear FinCalc overrides."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    data_dir = tmp_path / "instance"
    monkeypatch.setenv("FINCALC_DATA_DIR", str(data_dir))
    return data_dir


@pytest.fixture()
def app():
    app = create_app("testing")
    set_async_execution(False)
    clear_jobs()

    yield app

    set_async_execution(True)
    clear_jobs()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def sample_debts() -> list[Debt]:
    """Credit card, student loan and car loan with distinct rates and balances."""

    return [
        Debt(name="Credit Card", balance=5000.0, annual_rate=0.189, minimum_payment=150.0),
        Debt(name="Student Loan", balance=25000.0, annual_rate=0.056, minimum_payment=200.0),
        Debt(name="Car Loan", balance=15000.0, annual_rate=0.075, minimum_payment=300.0),
    ]


@pytest.fixture()
def sample_payload() -> dict:
    """The sample debts as a JSON form submission (rates in percent)."""

    return {
        "debts": [
            {"name": "Credit Card", "balance": "$5,000", "rate": "18.9%", "minimum_payment": "150"},
            {"name": "Student Loan", "balance": "25k", "rate": "5.6", "minimum_payment": "$200"},
            {"name": "Car Loan", "balance": "15,000", "rate": "7.5%", "minimum_payment": 300},
        ],
        "extra_payment": "500",
        "strategy": "snowball",
    }


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
