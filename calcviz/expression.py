"""SymPy adapter: parse f(x, y), differentiate it, and evaluate it with NumPy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Dict, Tuple

import numpy as np
import sympy as sp
from sympy.core.function import AppliedUndef

from .config import TEST_POINT
from .errors import EvaluationError, ValidationError

logger = logging.getLogger(__name__)

NumericFunction = Callable[[np.ndarray, np.ndarray], np.ndarray]


def _dirac_delta(x, *order):
    # derivative of sign/Heaviside; zero away from the jump, taken as zero on it
    return np.zeros_like(np.asarray(x, dtype=float))


# NumPy has no DiracDelta
LAMBDIFY_MODULES = [{"DiracDelta": _dirac_delta}, "numpy"]


# ----------------------------
# SYMBOLS + PARSER
# ----------------------------
@lru_cache(maxsize=None)
def sympy_env() -> Tuple[sp.Symbol, sp.Symbol, Dict[str, object]]:
    x = sp.Symbol("x", real=True)
    y = sp.Symbol("y", real=True)

    locals_map = {
        "x": x, "y": y,
        "sin": sp.sin, "cos": sp.cos, "tan": sp.tan,
        "asin": sp.asin, "acos": sp.acos, "atan": sp.atan,
        "sinh": sp.sinh, "cosh": sp.cosh, "tanh": sp.tanh,
        "exp": sp.exp, "log": sp.log, "ln": sp.log, "sqrt": sp.sqrt,
        "Abs": sp.Abs, "abs": sp.Abs,
        "pi": sp.pi, "E": sp.E, "e": sp.E,
        "sign": sp.sign,
    }
    return x, y, locals_map


def evaluate(func: NumericFunction, xs, ys) -> np.ndarray:
    """Evaluate a lambdified f(x, y) and return a float array shaped like ``xs``.

    Constant expressions come back from ``lambdify`` as scalars, so the result
    is broadcast. Points where the value is complex or not finite become NaN;
    callers decide what a NaN means.
    """
    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    with np.errstate(all="ignore"):
        raw = np.asarray(func(xs, ys))

    if np.iscomplexobj(raw):
        values = np.array(raw.real, dtype=float)
        values[np.abs(raw.imag) > 0] = np.nan
    else:
        values = np.array(raw, dtype=float)

    values = np.array(np.broadcast_to(values, np.broadcast(xs, ys).shape), dtype=float)
    values[~np.isfinite(values)] = np.nan
    return values


@dataclass(frozen=True)
class ParsedExpression:
    text: str
    expr: sp.Expr
    fx: sp.Expr
    fy: sp.Expr
    f_num: NumericFunction = field(repr=False, compare=False)
    fx_num: NumericFunction = field(repr=False, compare=False)
    fy_num: NumericFunction = field(repr=False, compare=False)

    def derivative(self, variable: str) -> sp.Expr:
        if variable == "x":
            return self.fx
        if variable == "y":
            return self.fy
        raise ValueError(f"unknown variable {variable!r}; expected 'x' or 'y'")

    def evaluate(self, x: float, y: float) -> float:
        return float(evaluate(self.f_num, x, y))

    def to_display_string(self) -> str:
        return sp.sstr(self.expr)

    def to_latex(self) -> str:
        return sp.latex(self.expr)

    def partials_display(self) -> Dict[str, str]:
        return {"fx": sp.sstr(self.fx), "fy": sp.sstr(self.fy)}

    def partials_latex(self) -> Dict[str, str]:
        return {"fx": sp.latex(self.fx), "fy": sp.latex(self.fy)}


def parse(text: str) -> sp.Expr:
    """Parse ``text`` into a SymPy expression over x and y.

    ``^`` is accepted as exponentiation. Raises :class:`ValidationError` for
    empty input, syntax errors, non-scalar results, variables other than x and
    y, and calls to unknown functions.
    """
    if not text or not text.strip():
        raise ValidationError("Please enter a function")

    x, y, locals_map = sympy_env()
    try:
        expr = sp.sympify(text, locals=locals_map, convert_xor=True)
    except Exception as exc:
        logger.debug("sympify failed for %r", text, exc_info=True)
        raise ValidationError(f"could not parse {text!r}") from exc

    if not isinstance(expr, sp.Expr):
        raise ValidationError(f"{text!r} is not a scalar expression in x and y")

    unknown = sorted(str(s) for s in expr.free_symbols - {x, y})
    if unknown:
        raise ValidationError(f"unknown variable(s) {', '.join(unknown)}; only x and y are allowed")

    undefined = sorted(str(f.func) for f in expr.atoms(AppliedUndef))
    if undefined:
        raise ValidationError(f"unknown function(s) {', '.join(undefined)}")

    return expr


def compile_expression(text: str) -> ParsedExpression:
    """Parse, differentiate and lambdify ``text``, then check it at the test point."""
    x, y, _ = sympy_env()
    expr = parse(text)

    fx = sp.diff(expr, x)
    fy = sp.diff(expr, y)

    try:
        f_num = sp.lambdify((x, y), expr, modules=LAMBDIFY_MODULES)
        fx_num = sp.lambdify((x, y), fx, modules=LAMBDIFY_MODULES)
        fy_num = sp.lambdify((x, y), fy, modules=LAMBDIFY_MODULES)
    except Exception as exc:
        raise ValidationError(f"cannot compile {text!r} for numeric evaluation: {exc}") from exc

    parsed = ParsedExpression(
        text=text, expr=expr, fx=fx, fy=fy,
        f_num=f_num, fx_num=fx_num, fy_num=fy_num,
    )

    tx, ty = TEST_POINT
    try:
        value = parsed.evaluate(tx, ty)
    except Exception as exc:
        raise EvaluationError(f"cannot evaluate {text!r} at ({tx:g}, {ty:g}): {exc}") from exc
    if not np.isfinite(value):
        raise EvaluationError(f"{text!r} is undefined at ({tx:g}, {ty:g})")

    logger.debug("compiled %r: fx=%s fy=%s", text, sp.sstr(fx), sp.sstr(fy))
    return parsed
