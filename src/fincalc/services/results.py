"""Success/failure result variants returned by the simulators.

Running out of payment capacity or hitting the month cap are expected
outcomes that callers branch on, so the simulators return one of these
instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, TypeVar, Union

T = TypeVar("T")


class FailureKind(str, Enum):
    """Categories of recoverable simulation failures."""

    INVALID_INPUT = "invalid_input"
    NON_CONVERGENT = "non_convergent"
    CAP_REACHED = "cap_reached"
    DEGENERATE_PARAMETERS = "degenerate_parameters"


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Wraps the value produced by a successful run."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Failure:
    """Describes why a run could not produce a normal result."""

    kind: FailureKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.kind.value, "message": self.message}
        if self.details:
            payload["details"] = {
                key: value.to_dict() if hasattr(value, "to_dict") else value
                for key, value in self.details.items()
            }
        return payload


Result = Union[Success[T], Failure]


class CalculationError(ValueError):
    """Raised by closed-form calculators when inputs make the formula meaningless."""
