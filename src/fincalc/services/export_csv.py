"""CSV export helpers for payoff ledgers."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import TextIO

from .debts import PayoffResult

LEDGER_HEADERS = [
    "month",
    "interest_paid",
    "principal_paid",
    "total_paid",
    "remaining_balance",
    "debts_remaining",
]


def write_ledger(result: PayoffResult, fh: TextIO) -> None:
    """Write one CSV row per simulated month to an open text stream."""

    writer = csv.DictWriter(
        fh, fieldnames=LEDGER_HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
    )
    writer.writeheader()
    for entry in result.ledger:
        row = entry.to_dict()
        writer.writerow(
            {
                key: f"{value:.2f}" if isinstance(value, float) else value
                for key, value in row.items()
            }
        )


def export_ledger_csv(*, result: PayoffResult, output_path: Path) -> Path:
    """Write the payoff ledger to CSV at ``output_path`` and return the path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        write_ledger(result, fh)
    return output_path


def ledger_csv_text(result: PayoffResult) -> str:
    buffer = io.StringIO(newline="")
    write_ledger(result, buffer)
    return buffer.getvalue()
