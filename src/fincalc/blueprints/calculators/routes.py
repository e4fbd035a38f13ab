"""Closed-form calculator routes."""

from __future__ import annotations

from flask import jsonify

from fincalc.blueprints.payloads import json_object, not_an_object
from fincalc.logging_config import get_logger
from fincalc.services.results import CalculationError

from . import bp
from .registry import CALCULATORS, InvalidFields, serialize

logger = get_logger(__name__)


@bp.get("/")
def list_calculators():
    return jsonify(
        {
            name: {
                "description": calc.description,
                "fields": [
                    {"name": field.name, "kind": field.kind, "required": field.required}
                    for field in calc.fields
                ],
            }
            for name, calc in sorted(CALCULATORS.items())
        }
    )


@bp.post("/<name>")
def calculate(name: str):
    """Run one calculator against the submitted JSON fields."""

    calculator = CALCULATORS.get(name)
    if calculator is None:
        return jsonify({"error": "calculator_not_found", "name": name}), 404

    body = json_object()
    if body is None:
        return not_an_object()
    try:
        result = calculator.run(body)
    except InvalidFields as exc:
        return jsonify({"error": "validation_failed", "errors": exc.errors}), 400
    except CalculationError as exc:
        logger.info("Calculation rejected", extra={"calculator": name, "reason": str(exc)})
        return jsonify({"error": "calculation_failed", "message": str(exc)}), 400

    return jsonify({"calculator": name, "result": serialize(result)})
