"""Built-in math functions available to expressions.

All functions take and return floats. Domain violations raise
``EvalError``; everything else follows IEEE-754 (an infinite argument to a
trig function yields NaN rather than Python's ``ValueError``).
"""

from __future__ import annotations

import math

from exprcalc.formulas.errors import EvalError
from exprcalc.functions.registry import register_builtin


def _trig(fn, x: float) -> float:
    if math.isinf(x):
        return math.nan
    return fn(x)


@register_builtin("sin", 1)
def fn_sin(x: float) -> float:
    """Sine of *x* radians."""
    return _trig(math.sin, x)


@register_builtin("cos", 1)
def fn_cos(x: float) -> float:
    """Cosine of *x* radians."""
    return _trig(math.cos, x)


@register_builtin("tan", 1)
def fn_tan(x: float) -> float:
    """Tangent of *x* radians."""
    return _trig(math.tan, x)


@register_builtin("sqrt", 1)
def fn_sqrt(x: float) -> float:
    """Square root of *x*.

    Raises:
        EvalError: If *x* is negative. ``-0.0`` is not negative and
            yields ``-0.0``.
    """
    if x < 0:
        raise EvalError.domain_violation("sqrt", f"sqrt of a negative number: {x!r}")
    return math.sqrt(x)


@register_builtin("log", 1)
def fn_log(x: float) -> float:
    """Natural logarithm of *x*.

    Raises:
        EvalError: If *x* is zero or negative.
    """
    if x <= 0:
        raise EvalError.domain_violation("log", f"log of a non-positive number: {x!r}")
    return math.log(x)


@register_builtin("abs", 1)
def fn_abs(x: float) -> float:
    """Absolute value of *x*."""
    return abs(x)


@register_builtin("clamp", 3)
def fn_clamp(v: float, lo: float, hi: float) -> float:
    """Clamp *v* into the closed interval [lo, hi].

    A NaN in any argument yields NaN.

    Raises:
        EvalError: If *lo* is greater than *hi*.
    """
    if lo > hi:
        raise EvalError.domain_violation(
            "clamp", f"clamp lower bound {lo!r} is greater than upper bound {hi!r}"
        )
    if math.isnan(v) or math.isnan(lo) or math.isnan(hi):
        return math.nan
    return max(lo, min(hi, v))
