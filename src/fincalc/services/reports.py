"""Chart rendering for payoff plans and simulation summaries."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import matplotlib.ticker as mticker  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from .debts import PayoffResult  # noqa: E402
from .monte_carlo import SimulationResult  # noqa: E402


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


def _currency_axis(ax) -> None:
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda value, _: f"${value:,.0f}"))


def payoff_marker_months(result: PayoffResult) -> list[int]:
    """Months in which at least one debt was paid off."""

    if not result.ledger:
        return []
    starting_count = len(result.payoff_order) + result.ledger[-1].debts_remaining
    counts = [starting_count] + [entry.debts_remaining for entry in result.ledger]
    return [
        entry.month
        for before, entry in zip(counts, result.ledger)
        if entry.debts_remaining < before
    ]


def build_payoff_chart(result: PayoffResult) -> Figure:
    """Remaining balance by month, with the debt-free month marked."""

    months = [0] + [entry.month for entry in result.ledger]
    starting = (
        result.ledger[0].remaining_balance + result.ledger[0].principal_paid
        if result.ledger
        else 0.0
    )
    balances = [starting] + [entry.remaining_balance for entry in result.ledger]

    fig, ax = plt.subplots(figsize=(10, 6))
    if result.ledger:
        ax.plot(months, balances, color="#4F46E5", linewidth=2.5)
        ax.fill_between(months, balances, color="#E0E7FF", alpha=0.5)

        for month in payoff_marker_months(result):
            ax.axvline(x=month, color="#22C55E", linestyle="--", alpha=0.5, linewidth=1)

        if result.completed:
            ax.scatter([months[-1]], [0], s=200, c="gold", marker="*", zorder=5, edgecolors="#F59E0B")
            ax.annotate(
                "DEBT FREE!",
                (months[-1], 0),
                xytext=(0, 25),
                textcoords="offset points",
                ha="center",
                fontsize=12,
                fontweight="bold",
                color="#16A34A",
            )

        ax.grid(True, linestyle="--", alpha=0.3)
        ax.set_xlabel("Month")
        ax.set_ylabel("Remaining balance")
        _currency_axis(ax)
        ax.set_title(
            f"{result.strategy.title()} payoff: {result.total_months} months, "
            f"${result.total_interest:,.0f} interest",
            fontsize=14,
            fontweight="bold",
        )
    else:
        ax.text(0.5, 0.5, "No debts to chart", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    fig.tight_layout()
    return fig


def build_simulation_chart(result: SimulationResult) -> Figure:
    """Bar chart of the terminal value distribution summary."""

    labels = ["Min", "P10", "Median", "Mean", "P90", "Max"]
    values = [result.min, result.p10, result.median, result.mean, result.p90, result.max]
    colors = ["#F87171", "#FBBF24", "#60A5FA", "#4F46E5", "#34D399", "#10B981"]

    fig, ax = plt.subplots(figsize=(9, 5))
    bars = ax.bar(labels, values, color=colors)
    ax.axhline(result.initial, color="#6B7280", linestyle="--", linewidth=1, label="Initial")
    for bar, value in zip(bars, values):
        ax.annotate(
            f"${value:,.0f}",
            (bar.get_x() + bar.get_width() / 2, bar.get_height()),
            xytext=(0, 4),
            textcoords="offset points",
            ha="center",
            fontsize=9,
        )
    _currency_axis(ax)
    ax.legend(loc="upper left")
    ax.set_title(
        f"{result.trials:,} trials over {result.years} years", fontsize=14, fontweight="bold"
    )
    fig.tight_layout()
    return fig


def _save(fig: Figure, output_path: Path, renderer: ReportRenderer | None) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if renderer is not None:
            renderer.render(fig, output_path=output_path)
        else:
            fig.savefig(output_path, bbox_inches="tight", dpi=120)
    finally:
        plt.close(fig)
    return output_path


def export_payoff_png(
    *, result: PayoffResult, output_path: Path, renderer: ReportRenderer | None = None
) -> Path:
    """Render the payoff chart to PNG and return the path."""
    return _save(build_payoff_chart(result), output_path, renderer)


def export_simulation_png(
    *, result: SimulationResult, output_path: Path, renderer: ReportRenderer | None = None
) -> Path:
    return _save(build_simulation_chart(result), output_path, renderer)
