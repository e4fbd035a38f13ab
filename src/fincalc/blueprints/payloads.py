"""Request body helpers shared by the JSON blueprints."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import jsonify, request


def json_object() -> Optional[Mapping[str, Any]]:
    """Return the JSON body as a mapping, ``{}`` when absent, ``None`` if not an object."""

    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        return None
    return payload


def not_an_object():
    return (
        jsonify(
            {"error": "validation_failed", "errors": {"payload": ["Send a JSON object."]}}
        ),
        400,
    )
