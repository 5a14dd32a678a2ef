"""Closed set of error kinds surfaced to the user.

Every failure the controller knows how to explain is one of the typed
exceptions below. They never escape :meth:`PlotController.plot`; instead they
are turned into a :class:`Notice` carried by the outcome. Anything else is an
``UNHANDLED`` failure and is caught by the page-level boundary.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple


class ErrorKind(enum.Enum):
    VALIDATION = "validation"
    EVALUATION = "evaluation"
    RENDER = "render"
    UNHANDLED = "unhandled"


class CalcVizError(Exception):
    kind: ErrorKind = ErrorKind.UNHANDLED


class ValidationError(CalcVizError):
    """Empty or unparseable expression, or a non-finite point."""

    kind = ErrorKind.VALIDATION


class EvaluationError(CalcVizError):
    """The expression parses but cannot be evaluated somewhere it must be."""

    kind = ErrorKind.EVALUATION


class SamplingError(EvaluationError):
    """Evaluation failed at a specific point of a sampling grid."""

    def __init__(self, expression: str, point: Tuple[float, float], reason: str = "") -> None:
        self.expression = expression
        self.point = (float(point[0]), float(point[1]))
        self.reason = reason
        x, y = self.point
        msg = f"f(x,y) = {expression} is undefined at (x={x:.6g}, y={y:.6g})"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class RenderError(CalcVizError):
    kind = ErrorKind.RENDER


GENERIC_MESSAGE = "An unexpected error occurred. Please try again."


@dataclass(frozen=True)
class Notice:
    kind: ErrorKind
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Notice":
        if isinstance(exc, CalcVizError) and exc.kind is not ErrorKind.UNHANDLED:
            return cls(kind=exc.kind, message=str(exc))
        return cls(kind=ErrorKind.UNHANDLED, message=GENERIC_MESSAGE)

    @property
    def title(self) -> str:
        return {
            ErrorKind.VALIDATION: "Invalid function",
            ErrorKind.EVALUATION: "Evaluation failed",
            ErrorKind.RENDER: "Rendering failed",
            ErrorKind.UNHANDLED: "Unexpected error",
        }[self.kind]

    def describe(self) -> str:
        return f"{self.title}: {self.message}"
