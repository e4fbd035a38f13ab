"""Service module exports."""

from . import (
    corporate,
    debts,
    export_csv,
    formatting,
    investments,
    jobs,
    loans,
    monte_carlo,
    parsing,
    reports,
    results,
    securities,
)

__all__ = [
    "corporate",
    "debts",
    "export_csv",
    "formatting",
    "investments",
    "jobs",
    "loans",
    "monte_carlo",
    "parsing",
    "reports",
    "results",
    "securities",
]
