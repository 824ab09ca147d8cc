"""Tree-walking evaluator for parsed expressions.

Arithmetic follows IEEE-754 doubles throughout: overflow saturates to
infinity and division by zero yields NaN or a signed infinity instead of
raising. Only unknown names, wrong arity and function domain violations
are errors.
"""

from __future__ import annotations

import math
from typing import Mapping

import exprcalc.functions.scalar  # noqa: F401  (registers builtins)
from exprcalc.formulas.errors import EvalError
from exprcalc.formulas.nodes import (
    Binary,
    BinaryOp,
    Call,
    Constant,
    Expr,
    Number,
    Unary,
    UnaryOp,
    Variable,
)
from exprcalc.functions.registry import get_builtin


def evaluate(expr: Expr, context: Mapping[str, float] | None = None) -> float:
    """Evaluate an expression tree against a variable context.

    Args:
        expr: Tree from ``parse()``.
        context: Mapping of variable names (case-sensitive) to values.
            ``pi`` and ``e`` never need to be supplied.

    Returns:
        The computed value.

    Raises:
        EvalError: On an unknown variable or function, an arity mismatch,
            or a function domain violation.
    """
    return _eval(expr, context or {})


def _eval(node: Expr, ctx: Mapping[str, float]) -> float:
    if isinstance(node, Number):
        return node.value
    if isinstance(node, Constant):
        return node.which.number
    if isinstance(node, Variable):
        if node.name not in ctx:
            raise EvalError.unknown_variable(node.name)
        return float(ctx[node.name])
    if isinstance(node, Unary):
        value = _eval(node.operand, ctx)
        return -value if node.op is UnaryOp.MINUS else value
    if isinstance(node, Binary):
        return _eval_binary(node, ctx)
    if isinstance(node, Call):
        return _eval_call(node, ctx)
    raise TypeError(f"Unknown expression node: {node!r}")


def _eval_binary(node: Binary, ctx: Mapping[str, float]) -> float:
    left = _eval(node.left, ctx)
    right = _eval(node.right, ctx)
    op = node.op
    if op is BinaryOp.ADD:
        return left + right
    if op is BinaryOp.SUB:
        return left - right
    if op is BinaryOp.MUL:
        return left * right
    if op is BinaryOp.DIV:
        return _divide(left, right)
    if op is BinaryOp.POW:
        return _power(left, right)
    raise TypeError(f"Unknown binary operator: {op!r}")


def _divide(left: float, right: float) -> float:
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.inf if left > 0 else -math.inf
    return left / right


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def _power(base: float, exponent: float) -> float:
    """``math.pow`` with C ``pow`` results where Python raises instead."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0.0:
            # 0 ** negative: pole error, signed by a -0.0 base and odd exponent
            if math.copysign(1.0, base) < 0 and _is_odd_integer(exponent):
                return -math.inf
            return math.inf
        # negative base with a non-integer exponent
        return math.nan


def _eval_call(node: Call, ctx: Mapping[str, float]) -> float:
    args = [_eval(arg, ctx) for arg in node.args]
    try:
        builtin = get_builtin(node.name)
    except KeyError:
        raise EvalError.unknown_function(node.name) from None
    if len(args) != builtin.arity:
        raise EvalError.arity_mismatch(node.name, builtin.arity, len(args))
    return builtin.fn(*args)


def extract_free_variables(expr: Expr) -> list[str]:
    """Collect the variable names referenced by *expr*.

    Names appear once each, in first-encountered order of a depth-first,
    left-to-right traversal. Constants (``pi``, ``e``) are not variables.

    Args:
        expr: Tree from ``parse()``.

    Returns:
        Ordered list of unique variable names.
    """
    seen: dict[str, None] = {}
    _collect(expr, seen)
    return list(seen)


def _collect(node: Expr, seen: dict[str, None]) -> None:
    if isinstance(node, Variable):
        seen.setdefault(node.name, None)
    elif isinstance(node, Unary):
        _collect(node.operand, seen)
    elif isinstance(node, Binary):
        _collect(node.left, seen)
        _collect(node.right, seen)
    elif isinstance(node, Call):
        for arg in node.args:
            _collect(arg, seen)
