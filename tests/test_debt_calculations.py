"""Tests for the month-by-month debt payoff simulation (snowball/avalanche).

Covers:
- Single-debt runs matching the closed-form amortization payment
- Strategy ordering and the avalanche interest advantage
- Freed-up minimum payment rollover
- Monotonicity in the extra payment
- Non-convergent inputs and the month cap
"""

from __future__ import annotations

import pytest

from fincalc.services.debts import (
    Debt,
    avalanche,
    compare_strategies,
    simulate,
    snowball,
)
from fincalc.services.loans import amortized_payment
from fincalc.services.results import FailureKind
from tests.conftest import assert_float_equal


class TestSingleDebt:
    """A single debt degenerates to a standard amortization schedule."""

    @pytest.mark.parametrize(
        "principal,annual_rate,months",
        [(10_000.0, 0.06, 36), (5_000.0, 0.189, 24), (25_000.0, 0.045, 120)],
    )
    def test_matches_closed_form_amortization(self, principal, annual_rate, months):
        payment = amortized_payment(principal, annual_rate, months)
        debt = Debt(name="Loan", balance=principal, annual_rate=annual_rate, minimum_payment=payment)

        outcome = simulate([debt], 0.0, "snowball")

        assert outcome.ok
        result = outcome.value
        assert result.total_months == months
        assert_float_equal(result.total_interest, payment * months - principal)
        assert_float_equal(result.total_principal, principal)

    def test_zero_rate_debt_pays_down_linearly(self):
        debt = Debt(name="Family loan", balance=1000.0, annual_rate=0.0, minimum_payment=100.0)

        result = simulate([debt]).value

        assert result.total_months == 10
        assert result.total_interest == 0.0
        assert [entry.remaining_balance for entry in result.ledger][:3] == [900.0, 800.0, 700.0]

    def test_payment_is_capped_at_payoff_amount(self):
        debt = Debt(name="Store card", balance=50.0, annual_rate=0.0, minimum_payment=100.0)

        result = simulate([debt], 25.0).value

        assert result.total_months == 1
        assert result.total_principal == 50.0
        assert result.ledger[0].total_paid == 50.0

    def test_caller_debts_are_not_mutated(self):
        debt = Debt(name="Card", balance=1000.0, annual_rate=0.12, minimum_payment=100.0)

        simulate([debt], 50.0)

        assert debt.balance == 1000.0


class TestStrategies:
    def test_snowball_targets_smallest_balance_first(self):
        debts = [
            Debt(name="Big", balance=5000.0, annual_rate=0.20, minimum_payment=150.0),
            Debt(name="Small", balance=1000.0, annual_rate=0.05, minimum_payment=50.0),
        ]

        result = snowball(debts, 200.0).value

        assert result.payoff_order[0] == "Small"
        # Small gets 50 + 200 while Big only gets its minimum
        first = result.ledger[0]
        assert_float_equal(first.total_paid, 400.0)

    def test_avalanche_targets_highest_rate_first(self):
        debts = [
            Debt(name="Big", balance=5000.0, annual_rate=0.20, minimum_payment=150.0),
            Debt(name="Small", balance=1000.0, annual_rate=0.05, minimum_payment=50.0),
        ]

        result = avalanche(debts, 200.0).value

        assert result.payoff_order == ("Big", "Small")

    def test_avalanche_pays_less_interest_when_rates_differ(self):
        debts = [
            Debt(name="Low rate", balance=1000.0, annual_rate=0.05, minimum_payment=50.0),
            Debt(name="High rate", balance=5000.0, annual_rate=0.20, minimum_payment=150.0),
        ]

        comparison = compare_strategies(debts, 200.0).value

        assert comparison.avalanche.total_interest < comparison.snowball.total_interest
        assert comparison.interest_saved > 0

    def test_equal_rates_keep_input_order_for_avalanche(self):
        debts = [
            Debt(name="A", balance=1000.0, annual_rate=0.10, minimum_payment=50.0),
            Debt(name="B", balance=3000.0, annual_rate=0.10, minimum_payment=75.0),
            Debt(name="C", balance=8000.0, annual_rate=0.10, minimum_payment=150.0),
        ]

        comparison = compare_strategies(debts, 300.0).value

        assert comparison.snowball.total_months == comparison.avalanche.total_months
        assert comparison.snowball.payoff_order == comparison.avalanche.payoff_order
        assert comparison.months_saved == 0

    def test_sample_debts_are_deterministic(self, sample_debts):
        first = simulate(sample_debts, 500.0, "snowball").value
        second = simulate(sample_debts, 500.0, "snowball").value

        assert first.to_dict() == second.to_dict()
        assert first.total_interest == second.total_interest
        assert first.completed is True
        assert first.payoff_order == ("Credit Card", "Car Loan", "Student Loan")
        assert_float_equal(first.total_principal, 45_000.0, tolerance=0.05)

    def test_sample_debts_avalanche_never_costs_more(self, sample_debts):
        comparison = compare_strategies(sample_debts, 500.0).value

        assert comparison.avalanche.total_interest <= comparison.snowball.total_interest

    def test_equal_rates_diverge_when_a_minimum_clears_its_own_debt(self):
        # Under avalanche "Stub" is not the target and clears on its own
        # minimum, which then leaves the plan instead of rolling over.
        debts = [
            Debt(name="Lead", balance=1000.0, annual_rate=0.05, minimum_payment=204.17),
            Debt(name="Medium", balance=3000.0, annual_rate=0.05, minimum_payment=17.50),
            Debt(name="Large", balance=8000.0, annual_rate=0.05, minimum_payment=38.33),
            Debt(name="Stub", balance=1000.0, annual_rate=0.05, minimum_payment=64.17),
        ]

        comparison = compare_strategies(debts, 0.0).value

        assert comparison.snowball.total_months == 45
        assert comparison.avalanche.total_months == 52
        assert comparison.months_saved == -7

    def test_avalanche_can_cost_more_without_non_priority_rollover(self):
        debts = [
            Debt(name="Low rate", balance=3000.0, annual_rate=0.03, minimum_payment=207.50),
            Debt(name="High rate", balance=8000.0, annual_rate=0.22, minimum_payment=346.67),
        ]

        comparison = compare_strategies(debts, 50.0).value

        assert comparison.snowball.total_interest == pytest.approx(2091.73, abs=0.01)
        assert comparison.avalanche.total_interest == pytest.approx(2139.67, abs=0.01)
        assert comparison.interest_saved < 0

    def test_unknown_strategy_is_rejected(self, sample_debts):
        outcome = simulate(sample_debts, 0.0, "tsunami")

        assert not outcome.ok
        assert outcome.kind is FailureKind.INVALID_INPUT


class TestRollover:
    def test_freed_minimum_rolls_into_next_target(self):
        debts = [
            Debt(name="A", balance=300.0, annual_rate=0.0, minimum_payment=100.0),
            Debt(name="B", balance=1000.0, annual_rate=0.0, minimum_payment=100.0),
        ]

        result = snowball(debts).value

        assert result.payoff_order == ("A", "B")
        assert result.total_months == 7
        assert result.ledger[2].debts_remaining == 1
        # Month 4: B receives its own minimum plus A's freed 100
        assert result.ledger[3].principal_paid == 200.0
        assert result.ledger[-1].remaining_balance == 0.0

    def test_ledger_totals_match_result(self, sample_debts):
        result = simulate(sample_debts, 250.0, "avalanche").value

        interest = sum(entry.interest_paid for entry in result.ledger)
        principal = sum(entry.principal_paid for entry in result.ledger)

        assert result.total_months == len(result.ledger)
        assert_float_equal(interest, result.total_interest)
        assert_float_equal(principal, result.total_principal)
        assert [entry.month for entry in result.ledger] == list(range(1, result.total_months + 1))


class TestMonotonicity:
    @pytest.mark.parametrize("strategy", ["snowball", "avalanche"])
    def test_more_extra_never_takes_longer_or_costs_more(self, sample_debts, strategy):
        results = [
            simulate(sample_debts, extra, strategy).value for extra in (0.0, 250.0, 500.0, 1000.0)
        ]

        for smaller, larger in zip(results, results[1:]):
            assert larger.total_months <= smaller.total_months
            assert larger.total_interest <= smaller.total_interest + 1e-6


class TestFailures:
    def test_minimum_below_interest_is_non_convergent(self):
        debt = Debt(name="Payday", balance=10_000.0, annual_rate=0.24, minimum_payment=100.0)

        outcome = simulate([debt])

        assert not outcome.ok
        assert outcome.kind is FailureKind.NON_CONVERGENT
        assert outcome.details["debts"] == ["Payday"]

    def test_extra_payment_rescues_priority_debt(self):
        debt = Debt(name="Payday", balance=10_000.0, annual_rate=0.24, minimum_payment=100.0)

        outcome = simulate([debt], 150.0)

        assert outcome.ok
        assert outcome.value.completed

    def test_non_priority_debt_is_judged_on_its_minimum(self):
        debts = [
            Debt(name="Small", balance=500.0, annual_rate=0.0, minimum_payment=50.0),
            Debt(name="Big", balance=10_000.0, annual_rate=0.24, minimum_payment=100.0),
        ]

        outcome = simulate(debts, 500.0, "snowball")

        assert outcome.kind is FailureKind.NON_CONVERGENT
        assert outcome.details["debts"] == ["Big"]

    def test_month_cap_returns_partial_result(self):
        debt = Debt(name="Mortgage", balance=100_000.0, annual_rate=0.0, minimum_payment=100.0)

        outcome = simulate([debt])

        assert not outcome.ok
        assert outcome.kind is FailureKind.CAP_REACHED
        partial = outcome.details["partial"]
        assert partial.completed is False
        assert partial.total_months == 600
        assert_float_equal(partial.ledger[-1].remaining_balance, 40_000.0)

    def test_custom_month_cap(self, sample_debts):
        outcome = simulate(sample_debts, 0.0, max_months=12)

        assert outcome.kind is FailureKind.CAP_REACHED
        assert outcome.details["max_months"] == 12
        assert len(outcome.details["partial"].ledger) == 12

    def test_no_debts_with_balance_is_invalid(self):
        outcome = simulate([{"name": "Paid off", "balance": 0}, {"balance": "-25"}])

        assert outcome.kind is FailureKind.INVALID_INPUT

    def test_failure_serializes_partial_result(self, sample_debts):
        outcome = simulate(sample_debts, 0.0, max_months=3)

        payload = outcome.to_dict()

        assert payload["error"] == "cap_reached"
        assert payload["details"]["partial"]["total_months"] == 3
        assert payload["details"]["partial"]["completed"] is False


class TestPermissiveInput:
    def test_junk_and_negative_values_coerce_to_zero(self):
        debts = [
            {"name": "Card", "balance": "$1,200", "annual_rate": "oops", "minimum_payment": "-50"},
        ]

        outcome = simulate(debts, "100")

        assert outcome.ok
        assert outcome.value.total_months == 12
        assert outcome.value.total_interest == 0.0

    def test_zero_balance_debts_are_dropped(self):
        debts = [
            Debt(name="Done", balance=0.0, annual_rate=0.2, minimum_payment=25.0),
            Debt(name="Open", balance=200.0, annual_rate=0.0, minimum_payment=100.0),
        ]

        result = simulate(debts).value

        assert result.payoff_order == ("Open",)
        assert result.total_months == 2

    def test_negative_extra_payment_is_treated_as_zero(self):
        debt = Debt(name="Card", balance=1000.0, annual_rate=0.0, minimum_payment=100.0)

        result = simulate([debt], -500.0).value

        assert result.extra_payment == 0.0
        assert result.total_months == 10
