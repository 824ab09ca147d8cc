"""Canonical fully-parenthesized text form of an expression tree.

Every unary and binary node is wrapped in parentheses, so the rendered
text parses back to the same tree::

    render(parse("2 + 3 * sin(x)"))  ->  "(2 + (3 * sin(x)))"
    render(parse("-x^2"))            ->  "(-(x ^ 2))"
    render(parse("(-x)^2"))          ->  "(((-x)) ^ 2)"
"""

from __future__ import annotations

from exprcalc.formulas.nodes import (
    Binary,
    BinaryOp,
    Call,
    Constant,
    Expr,
    Number,
    Unary,
    Variable,
)

# Integral values at or beyond this magnitude keep exponent notation.
_INTEGRAL_LIMIT = 1e16


def render(expr: Expr) -> str:
    """Return the canonical textual form of *expr*."""
    if isinstance(expr, Number):
        return format_number(expr.value)
    if isinstance(expr, Constant):
        return expr.name
    if isinstance(expr, Variable):
        return expr.name
    if isinstance(expr, Unary):
        return f"({expr.op.value}{render(expr.operand)})"
    if isinstance(expr, Binary):
        left = render(expr.left)
        if expr.op is BinaryOp.POW and isinstance(expr.left, Unary):
            # A signed base is grouped again so it cannot read as -(x ^ y).
            left = f"({left})"
        return f"({left} {expr.op.value} {render(expr.right)})"
    if isinstance(expr, Call):
        return f"{expr.name}({', '.join(render(arg) for arg in expr.args)})"
    raise TypeError(f"Unknown expression node: {expr!r}")


def format_number(value: float) -> str:
    """Shortest decimal form; integral values drop the fractional part.

    Examples:
        ``2.0`` -> ``"2"``, ``3.14`` -> ``"3.14"``, ``1e-05`` -> ``"1e-05"``
    """
    if value.is_integer() and abs(value) < _INTEGRAL_LIMIT:
        return str(int(value))
    return repr(value)
