"""Flask CLI commands for FinCalc."""

from __future__ import annotations

from pathlib import Path

import click


def _parse_debt(value: str) -> dict:
    """Split ``"Name,balance,rate%,minimum"`` into a raw debt row."""

    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 4:
        raise click.BadParameter(
            f"expected NAME,BALANCE,RATE,MINIMUM but got {value!r}", param_hint="--debt"
        )
    name, balance, rate, minimum = parts
    return {"name": name, "balance": balance, "rate": rate, "minimum_payment": minimum}


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("fincalc-payoff")
    @click.option(
        "--debt",
        "debt_rows",
        multiple=True,
        required=True,
        help='Debt as "Name,balance,rate%,minimum"; repeat for each debt.',
    )
    @click.option("--extra", default="0", show_default=True, help="Extra monthly payment")
    @click.option(
        "--strategy",
        type=click.Choice(["snowball", "avalanche"]),
        default="snowball",
        show_default=True,
    )
    @click.option("--csv", "csv_path", type=click.Path(dir_okay=False, path_type=Path))
    @click.option("--chart", "chart_path", type=click.Path(dir_okay=False, path_type=Path))
    def fincalc_payoff(debt_rows, extra, strategy, csv_path, chart_path) -> None:
        """Simulate a debt snowball/avalanche payoff plan."""

        from .blueprints.payoff.forms import PayoffForm
        from .services import debts
        from .services.export_csv import export_ledger_csv
        from .services.formatting import format_currency, format_duration

        form = PayoffForm(
            debts=[_parse_debt(row) for row in debt_rows],
            extra_payment=extra,
            strategy=strategy,
        )
        if not form.validate():
            for field_name, messages in form.errors.items():
                click.echo(f"{field_name}: {'; '.join(messages)}", err=True)
            raise click.exceptions.Exit(2)

        config = app.config["FINCALC_CONFIG"]
        outcome = debts.simulate(
            form.parsed_debts, form.parsed_extra, strategy, max_months=config.PAYOFF_MAX_MONTHS
        )
        if not outcome.ok:
            click.echo(f"Error: {outcome.message}", err=True)
            raise click.exceptions.Exit(1)

        result = outcome.value
        click.echo(f"Strategy: {result.strategy}")
        click.echo(f"Debt-free in: {format_duration(result.total_months)} ({result.total_months} months)")
        click.echo(f"Total interest: {format_currency(result.total_interest)}")
        click.echo(f"Payoff order: {', '.join(result.payoff_order)}")

        if csv_path is not None:
            export_ledger_csv(result=result, output_path=csv_path)
            click.echo(f"Ledger written: {csv_path}")
        if chart_path is not None:
            from .services.reports import export_payoff_png

            export_payoff_png(result=result, output_path=chart_path)
            click.echo(f"Chart written: {chart_path}")

    @app.cli.command("fincalc-montecarlo")
    @click.option("--initial", type=float, default=10_000.0, show_default=True)
    @click.option("--return", "annual_return", type=float, default=8.0, show_default=True,
                  help="Expected annual return, percent")
    @click.option("--volatility", type=float, default=15.0, show_default=True,
                  help="Annual volatility, percent")
    @click.option("--years", type=int, default=10, show_default=True)
    @click.option("--trials", type=int, default=1000, show_default=True)
    @click.option("--seed", type=int, default=None, help="Seed for reproducible runs")
    @click.option("--floor-at-zero", is_flag=True, default=False,
                  help="Clamp yearly growth so value never goes negative")
    @click.option("--chart", "chart_path", type=click.Path(dir_okay=False, path_type=Path))
    def fincalc_montecarlo(
        initial, annual_return, volatility, years, trials, seed, floor_at_zero, chart_path
    ) -> None:
        """Run a Monte Carlo projection of investment growth."""

        from .services import monte_carlo
        from .services.formatting import format_currency

        config = app.config["FINCALC_CONFIG"]
        outcome = monte_carlo.simulate(
            initial,
            annual_return / 100,
            volatility / 100,
            years,
            trials,
            seed=seed,
            floor_at_zero=floor_at_zero or config.MC_FLOOR_AT_ZERO,
            min_trials=config.MC_MIN_TRIALS,
            max_trials=config.MC_MAX_TRIALS,
            max_years=config.MC_MAX_YEARS,
        )
        if not outcome.ok:
            click.echo(f"Error: {outcome.message}", err=True)
            raise click.exceptions.Exit(1)

        result = outcome.value
        click.echo(f"Simulation results ({result.trials} trials, {result.years} years)")
        for label, value in (
            ("Mean", result.mean),
            ("Min", result.min),
            ("P10", result.p10),
            ("Median", result.median),
            ("P90", result.p90),
            ("Max", result.max),
        ):
            click.echo(f"{label:>7}: {format_currency(value)}")

        if chart_path is not None:
            from .services.reports import export_simulation_png

            export_simulation_png(result=result, output_path=chart_path)
            click.echo(f"Chart written: {chart_path}")
