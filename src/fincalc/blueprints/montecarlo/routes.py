"""Monte Carlo simulation routes."""

from __future__ import annotations

from typing import Any, Dict

from flask import current_app, jsonify, url_for

from fincalc.blueprints.payloads import json_object, not_an_object
from fincalc.logging_config import get_logger
from fincalc.services import monte_carlo
from fincalc.services.formatting import format_currency
from fincalc.services.jobs import enqueue, get_job
from fincalc.services.results import FailureKind

from . import bp
from .forms import MonteCarloForm

logger = get_logger(__name__)

_FAILURE_STATUS = {
    FailureKind.INVALID_INPUT: 400,
    FailureKind.DEGENERATE_PARAMETERS: 422,
}


def _present(result: monte_carlo.SimulationResult) -> Dict[str, Any]:
    """JSON payload for a finished simulation, with display strings."""

    payload = result.to_dict()
    payload["display"] = {
        key: format_currency(payload[key]) for key in ("mean", "min", "max", "p10", "median", "p90")
    }
    return payload


@bp.post("/simulate")
def simulate():
    """Run the simulation inline, or queue it when the trial count is large."""

    config = current_app.config["FINCALC_CONFIG"]
    body = json_object()
    if body is None:
        return not_an_object()
    form = MonteCarloForm.from_payload(body)
    if not form.validate(default_floor=config.MC_FLOOR_AT_ZERO, max_years=config.MC_MAX_YEARS):
        logger.info("Rejected Monte Carlo form", extra={"fields": sorted(form.errors)})
        return jsonify({"error": "validation_failed", "errors": form.errors}), 400

    params = dict(
        form.cleaned,
        min_trials=config.MC_MIN_TRIALS,
        max_trials=config.MC_MAX_TRIALS,
        max_years=config.MC_MAX_YEARS,
    )

    failure = monte_carlo.validate_parameters(
        params["initial"],
        params["mean_annual_return"],
        params["annual_volatility"],
        params["years"],
        params["trials"],
        params["min_trials"],
        params["max_trials"],
        params["max_years"],
    )
    if failure is not None:
        return jsonify(failure.to_dict()), _FAILURE_STATUS[failure.kind]

    if params["trials"] > config.MC_ASYNC_THRESHOLD:
        job = enqueue(
            "monte-carlo-simulation",
            monte_carlo.simulate,
            present=_present,
            metadata={"trials": form.cleaned["trials"], "years": form.cleaned["years"]},
            **params,
        )
        response = job.to_dict()
        response["status_url"] = url_for("montecarlo.job_status", job_id=job.id)
        return jsonify(response), 202

    outcome = monte_carlo.simulate(**params)
    if not outcome.ok:
        return jsonify(outcome.to_dict()), _FAILURE_STATUS[outcome.kind]
    return jsonify(_present(outcome.value))


@bp.get("/jobs/<job_id>")
def job_status(job_id: str):
    """Expose job status for queued simulations."""

    job = get_job(job_id)
    if job is None:
        return jsonify({"error": "job_not_found", "job_id": job_id}), 404
    return jsonify(job)
