"""Monte Carlo blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("montecarlo", __name__, url_prefix="/monte-carlo")

from . import routes  # noqa: E402,F401

__all__ = ["bp"]
