"""Tests for payoff ledger CSV export."""

from __future__ import annotations

import csv
from pathlib import Path

from fincalc.services import export_csv
from fincalc.services.debts import Debt, simulate


def _rollover_result():
    debts = [
        Debt(name="A", balance=300.0, annual_rate=0.0, minimum_payment=100.0),
        Debt(name="B", balance=1000.0, annual_rate=0.0, minimum_payment=100.0),
    ]
    return simulate(debts).value


def test_export_ledger_csv_creates_file(tmp_path):
    """Exporting a ledger writes one row per simulated month."""

    output_path = Path(tmp_path) / "nested" / "payoff.csv"

    returned = export_csv.export_ledger_csv(result=_rollover_result(), output_path=output_path)

    assert returned == output_path
    assert output_path.exists(), "ledger export should create a CSV file"
    with output_path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert len(rows) == 7
    assert rows[0] == {
        "month": "1",
        "interest_paid": "0.00",
        "principal_paid": "200.00",
        "total_paid": "200.00",
        "remaining_balance": "1100.00",
        "debts_remaining": "2",
    }
    assert rows[-1]["debts_remaining"] == "0"


def test_ledger_csv_text_has_header(sample_debts):
    result = simulate(sample_debts, 500.0).value

    text = export_csv.ledger_csv_text(result)
    lines = text.splitlines()

    assert lines[0] == ",".join(export_csv.LEDGER_HEADERS)
    assert len(lines) == result.total_months + 1
