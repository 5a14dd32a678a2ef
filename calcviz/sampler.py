"""Numeric sampling of f, its partials and the tangent plane on fixed grids.

Failure policy: sampling aborts on the first point where f or a partial is
undefined (exception, NaN or infinity) and raises :class:`SamplingError`.
Nothing non-finite is ever handed to the assembler.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .config import DOMAIN_MAX, DOMAIN_MIN, FIELD_STEP, GRADIENT_SCALE, SURFACE_STEP, VECTOR_SCALE
from .errors import SamplingError, ValidationError
from .expression import NumericFunction, ParsedExpression, evaluate

logger = logging.getLogger(__name__)

Point3 = Tuple[float, float, float]


def _readonly(a: np.ndarray) -> np.ndarray:
    a.flags.writeable = False
    return a


def build_grid(step: float, start: float = DOMAIN_MIN, stop: float = DOMAIN_MAX) -> np.ndarray:
    """Values from ``start`` (inclusive) to ``stop`` (exclusive) by ``step``."""
    if step <= 0:
        raise ValueError("step must be > 0")
    if stop <= start:
        raise ValueError("stop must be greater than start")
    return _readonly(np.arange(start, stop, step, dtype=float))


@dataclass(frozen=True)
class DerivativeResult:
    """f and its first partials at the evaluation point (x0, y0)."""

    x0: float
    y0: float
    f0: float
    fx0: float
    fy0: float

    @property
    def gradient_magnitude(self) -> float:
        return math.hypot(self.fx0, self.fy0)


def tangent_plane(d: DerivativeResult, x, y):
    """T(x, y) = f0 + fx0*(x - x0) + fy0*(y - y0). Works on scalars and arrays."""
    return d.f0 + d.fx0 * (x - d.x0) + d.fy0 * (y - d.y0)


def gradient_segment(d: DerivativeResult) -> Tuple[Point3, Point3]:
    """Fixed-scale indicator from (x0, y0, f0); not a unit vector."""
    start = (d.x0, d.y0, d.f0)
    end = (
        d.x0 + d.fx0 * GRADIENT_SCALE,
        d.y0 + d.fy0 * GRADIENT_SCALE,
        d.f0 + (d.fx0 + d.fy0) * GRADIENT_SCALE,
    )
    return start, end


@dataclass(frozen=True, eq=False)
class SampleResult:
    expression: str
    x0: float
    y0: float
    derivatives: DerivativeResult

    # 3D view
    xs: np.ndarray
    ys: np.ndarray
    z: np.ndarray            # z[j, i] = f(xs[i], ys[j])
    tangent_z: np.ndarray

    # 2D view
    field_xs: np.ndarray
    field_ys: np.ndarray
    contour_z: np.ndarray
    vector_start: np.ndarray  # (n, 2)
    vector_end: np.ndarray    # (n, 2)

    @property
    def gradient(self) -> Tuple[Point3, Point3]:
        return gradient_segment(self.derivatives)


def _sample_grid(parsed: ParsedExpression, func: NumericFunction, X: np.ndarray, Y: np.ndarray, label: str) -> np.ndarray:
    try:
        values = evaluate(func, X, Y)
    except Exception as exc:
        # vectorized call failed outright; no single cell to blame
        raise SamplingError(parsed.text, (float(X.flat[0]), float(Y.flat[0])), f"{label}: {exc}") from exc

    bad = ~np.isfinite(values)
    if bad.any():
        j, i = np.argwhere(bad)[0]
        point = (float(X[j, i]), float(Y[j, i]))
        logger.info("sampling %s of %r aborted at %s", label, parsed.text, point)
        raise SamplingError(parsed.text, point, f"{label} is not finite")
    return values


def _sample_point(parsed: ParsedExpression, func: NumericFunction, x0: float, y0: float, label: str) -> float:
    try:
        value = float(evaluate(func, x0, y0))
    except Exception as exc:
        raise SamplingError(parsed.text, (x0, y0), f"{label}: {exc}") from exc
    if not math.isfinite(value):
        raise SamplingError(parsed.text, (x0, y0), f"{label} is not finite")
    return value


def sample(
    parsed: ParsedExpression,
    x0: float,
    y0: float,
    surface_step: float = SURFACE_STEP,
    field_step: float = FIELD_STEP,
) -> SampleResult:
    x0 = float(x0)
    y0 = float(y0)
    if not (math.isfinite(x0) and math.isfinite(y0)):
        raise ValidationError(f"evaluation point must be finite, got ({x0}, {y0})")

    f0 = _sample_point(parsed, parsed.f_num, x0, y0, "f")
    fx0 = _sample_point(parsed, parsed.fx_num, x0, y0, "f_x")
    fy0 = _sample_point(parsed, parsed.fy_num, x0, y0, "f_y")
    derivs = DerivativeResult(x0=x0, y0=y0, f0=f0, fx0=fx0, fy0=fy0)

    xs = build_grid(surface_step)
    ys = build_grid(surface_step)
    X, Y = np.meshgrid(xs, ys, indexing="xy")
    Z = _sample_grid(parsed, parsed.f_num, X, Y, "f")
    T = tangent_plane(derivs, X, Y)

    gxs = build_grid(field_step)
    gys = build_grid(field_step)
    GX, GY = np.meshgrid(gxs, gys, indexing="xy")
    C = _sample_grid(parsed, parsed.f_num, GX, GY, "f")
    U = _sample_grid(parsed, parsed.fx_num, GX, GY, "f_x")
    V = _sample_grid(parsed, parsed.fy_num, GX, GY, "f_y")

    start = np.column_stack([GX.ravel(), GY.ravel()])
    end = np.column_stack([GX.ravel() + VECTOR_SCALE * U.ravel(), GY.ravel() + VECTOR_SCALE * V.ravel()])

    logger.debug("sampled %r at (%g, %g): f0=%g fx0=%g fy0=%g", parsed.text, x0, y0, f0, fx0, fy0)
    return SampleResult(
        expression=parsed.text,
        x0=x0,
        y0=y0,
        derivatives=derivs,
        xs=xs,
        ys=ys,
        z=_readonly(Z),
        tangent_z=_readonly(np.asarray(T, dtype=float)),
        field_xs=gxs,
        field_ys=gys,
        contour_z=_readonly(C),
        vector_start=_readonly(start),
        vector_end=_readonly(end),
    )
