"""Blueprint exports."""

from . import calculators, montecarlo, payoff

__all__ = [
    "calculators",
    "montecarlo",
    "payoff",
]
