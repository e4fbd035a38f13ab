"""Debt payoff routes."""

from __future__ import annotations

from flask import Response, current_app, jsonify

from fincalc.blueprints.payloads import json_object, not_an_object
from fincalc.logging_config import get_logger
from fincalc.services import debts
from fincalc.services.export_csv import ledger_csv_text
from fincalc.services.formatting import format_currency, format_duration
from fincalc.services.results import FailureKind

from . import bp
from .forms import DEFAULT_STRATEGIES, PayoffForm

logger = get_logger(__name__)

_FAILURE_STATUS = {
    FailureKind.INVALID_INPUT: 400,
    FailureKind.NON_CONVERGENT: 422,
    FailureKind.CAP_REACHED: 422,
}


def _max_months() -> int:
    return current_app.config["FINCALC_CONFIG"].PAYOFF_MAX_MONTHS


def _form_errors(form: PayoffForm):
    logger.info("Rejected payoff form", extra={"fields": sorted(form.errors)})
    return jsonify({"error": "validation_failed", "errors": form.errors}), 400


def _display(result: debts.PayoffResult) -> dict:
    return {
        "duration": format_duration(result.total_months),
        "total_interest": format_currency(result.total_interest),
        "total_paid": format_currency(result.total_paid),
    }


@bp.get("/strategies")
def list_strategies():
    """Expose strategy choices for the form."""

    return jsonify(DEFAULT_STRATEGIES)


@bp.post("/simulate")
def simulate():
    """Run the payoff simulation for the submitted debts."""

    body = json_object()
    if body is None:
        return not_an_object()
    form = PayoffForm.from_payload(body)
    if not form.validate(strategies=DEFAULT_STRATEGIES):
        return _form_errors(form)

    outcome = debts.simulate(
        form.parsed_debts, form.parsed_extra, form.strategy, max_months=_max_months()
    )
    if not outcome.ok:
        return jsonify(outcome.to_dict()), _FAILURE_STATUS[outcome.kind]

    payload = outcome.value.to_dict()
    payload["display"] = _display(outcome.value)
    return jsonify(payload)


@bp.post("/compare")
def compare():
    """Run snowball and avalanche side by side."""

    body = json_object()
    if body is None:
        return not_an_object()
    form = PayoffForm.from_payload(body)
    if not form.validate(strategies=DEFAULT_STRATEGIES):
        return _form_errors(form)

    outcome = debts.compare_strategies(
        form.parsed_debts, form.parsed_extra, max_months=_max_months()
    )
    if not outcome.ok:
        return jsonify(outcome.to_dict()), _FAILURE_STATUS[outcome.kind]
    return jsonify(outcome.value.to_dict())


@bp.post("/export.csv")
def export_csv():
    """Download the monthly ledger as CSV."""

    body = json_object()
    if body is None:
        return not_an_object()
    form = PayoffForm.from_payload(body)
    if not form.validate(strategies=DEFAULT_STRATEGIES):
        return _form_errors(form)

    outcome = debts.simulate(
        form.parsed_debts, form.parsed_extra, form.strategy, max_months=_max_months()
    )
    if not outcome.ok:
        return jsonify(outcome.to_dict()), _FAILURE_STATUS[outcome.kind]

    return Response(
        ledger_csv_text(outcome.value),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=payoff-{form.strategy}.csv"},
    )
