"""Tests for expression evaluation and free-variable extraction."""

from __future__ import annotations

import math
from typing import Any

import pytest

from exprcalc.formulas import (
    Binary,
    BinaryOp,
    EvalError,
    EvalErrorKind,
    Number,
    evaluate,
    extract_free_variables,
    parse,
)


# ────────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────────


def _eval(text: str, ctx: dict[str, Any] | None = None) -> float:
    """Parse and evaluate an expression string."""
    return evaluate(parse(text), ctx or {})


# ────────────────────────────────────────────────────────────────
# Literals, constants, variables
# ────────────────────────────────────────────────────────────────


class TestLiterals:
    @pytest.mark.parametrize(
        "text", ["42", "3.14", "1e-3", "1E-3", "2.5e4", "2.5E+4", "1e3", "1e0", ".5", "6.02e23"]
    )
    def test_literal_value_is_exact(self, text: str) -> None:
        assert _eval(text) == float(text)

    def test_exponent_example(self) -> None:
        assert _eval("2.5e4") == 25000.0

    def test_context_is_optional(self) -> None:
        assert evaluate(parse("1 + 1")) == 2.0


class TestConstants:
    def test_pi(self) -> None:
        assert _eval("pi") == math.pi

    def test_e(self) -> None:
        assert _eval("e") == math.e

    def test_constant_in_expression(self) -> None:
        assert _eval("pi * 2") == 2 * math.pi

    def test_constants_ignore_context(self) -> None:
        assert _eval("pi", {"pi": 3.0}) == math.pi


class TestVariables:
    def test_values_from_context(self) -> None:
        ctx = {"x": 3.0, "y": 4.0}
        assert _eval("x + y", ctx) == 7.0
        assert _eval("x ^ 2", ctx) == 9.0

    def test_case_sensitive(self) -> None:
        with pytest.raises(EvalError):
            _eval("X", {"x": 1.0})

    def test_unknown_variable(self) -> None:
        with pytest.raises(EvalError) as exc_info:
            _eval("x + y", {"x": 1.0})
        assert exc_info.value.kind == EvalErrorKind.unknown_variable
        assert exc_info.value.name == "y"
        assert "y" in str(exc_info.value)

    def test_variable_named_like_function(self) -> None:
        assert _eval("sin", {"sin": 5.0}) == 5.0


# ────────────────────────────────────────────────────────────────
# Operators
# ────────────────────────────────────────────────────────────────


class TestOperators:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2 + 3 * 4", 14.0),
            ("(2 + 3) * 4", 20.0),
            ("(2+3)*4", 20.0),
            ("3 ^ 4", 81.0),
            ("2 ^ 3 ^ 2", 512.0),
            ("2^3^2", 512.0),
            ("-3 - 2", -5.0),
            ("6 / 3 / 2", 1.0),
            ("10 - 4 - 3", 3.0),
            ("-2^2", -4.0),
            ("2^-1", 0.5),
        ],
    )
    def test_precedence_and_associativity(self, text: str, expected: float) -> None:
        assert _eval(text) == expected

    def test_unary(self) -> None:
        assert _eval("+5") == 5.0
        assert _eval("-5") == -5.0
        assert _eval("-(2 + 1)") == -3.0
        assert _eval("+(3 + 2)") == 5.0
        assert _eval("-x", {"x": 6.0}) == -6.0
        assert _eval("--x", {"x": 6.0}) == 6.0


class TestIeeeEdgeCases:
    def test_zero_over_zero_is_nan(self) -> None:
        assert math.isnan(_eval("0 / 0"))

    def test_positive_over_zero(self) -> None:
        assert _eval("5 / 0") == math.inf

    def test_negative_over_zero(self) -> None:
        assert _eval("-5 / 0") == -math.inf

    def test_divide_by_negative_zero_uses_dividend_sign(self) -> None:
        assert _eval("5 / -0") == math.inf

    def test_nan_over_zero_is_nan(self) -> None:
        assert math.isnan(_eval("x / 0", {"x": math.nan}))

    def test_direct_tree_division(self) -> None:
        tree = Binary(BinaryOp.DIV, Number(0.0), Number(0.0))
        assert math.isnan(evaluate(tree, {}))

    def test_overflow_is_infinity(self) -> None:
        result = _eval("1e308 * 10")
        assert math.isinf(result)
        assert result > 0

    def test_power_overflow(self) -> None:
        assert _eval("10 ^ 400") == math.inf
        assert _eval("(-10) ^ 401") == -math.inf
        assert _eval("(-10) ^ 400") == math.inf

    def test_negative_base_fractional_exponent_is_nan(self) -> None:
        assert math.isnan(_eval("(-8) ^ (1/3)"))

    def test_zero_to_negative_power_is_infinity(self) -> None:
        assert _eval("0 ^ -1") == math.inf

    def test_integer_power_of_negative_base(self) -> None:
        assert _eval("(-2) ^ 3") == -8.0

    def test_square_root_power(self) -> None:
        assert _eval("2 ^ 0.5") == pytest.approx(math.sqrt(2))


# ────────────────────────────────────────────────────────────────
# Builtin functions
# ────────────────────────────────────────────────────────────────


class TestTrig:
    def test_sin_cos(self) -> None:
        assert _eval("sin(pi/2)") == pytest.approx(1.0, abs=1e-12)
        assert _eval("cos(pi/2)") == pytest.approx(0.0, abs=1e-12)
        assert _eval("sin(0)") == 0.0
        assert _eval("cos(0)") == 1.0

    def test_tan(self) -> None:
        assert _eval("tan(pi/4)") == pytest.approx(1.0, abs=1e-12)

    def test_tan_near_pole_is_large_but_finite(self) -> None:
        result = _eval("tan(pi/2)")
        assert result > 1e15
        assert math.isfinite(result)

    def test_trig_of_infinity_is_nan(self) -> None:
        assert math.isnan(_eval("sin(1e308 * 10)"))


class TestMathFunctions:
    def test_sqrt(self) -> None:
        assert _eval("sqrt(4)") == 2.0

    def test_log(self) -> None:
        assert _eval("log(10)") == math.log(10)

    def test_abs(self) -> None:
        assert _eval("abs(-5)") == 5.0

    def test_case_insensitive_names(self) -> None:
        assert _eval("SQRT(16)") == 4.0
        assert _eval("Abs(-2)") == 2.0

    def test_sqrt_of_negative_zero(self) -> None:
        result = _eval("sqrt(-0.0)")
        assert result == 0.0
        assert math.copysign(1.0, result) == -1.0

    @pytest.mark.parametrize("text", ["sqrt(-1)", "sqrt(-1e-10)", "log(0)", "log(-5)"])
    def test_domain_violation(self, text: str) -> None:
        with pytest.raises(EvalError) as exc_info:
            _eval(text)
        assert exc_info.value.kind == EvalErrorKind.domain_violation

    def test_unknown_function(self) -> None:
        with pytest.raises(EvalError) as exc_info:
            _eval("foo(5)")
        assert exc_info.value.kind == EvalErrorKind.unknown_function
        assert "foo" in str(exc_info.value)

    def test_exp_is_not_builtin(self) -> None:
        with pytest.raises(EvalError, match="exp"):
            _eval("exp(1)")


class TestClamp:
    @pytest.mark.parametrize(
        "text, expected",
        [("clamp(5, 0, 10)", 5.0), ("clamp(-3, 0, 10)", 0.0), ("clamp(15, 0, 10)", 10.0)],
    )
    def test_clamp(self, text: str, expected: float) -> None:
        assert _eval(text) == expected

    def test_clamp_with_variable(self) -> None:
        assert _eval("clamp(x, 0, 100)", {"x": 150.0}) == 100.0

    @pytest.mark.parametrize(
        "text", ["clamp(0/0, 0, 10)", "clamp(5, 0/0, 10)", "clamp(5, 0, 0/0)"]
    )
    def test_clamp_propagates_nan(self, text: str) -> None:
        assert math.isnan(_eval(text))

    def test_lower_above_upper(self) -> None:
        with pytest.raises(EvalError) as exc_info:
            _eval("clamp(5, 10, 0)")
        assert exc_info.value.kind == EvalErrorKind.domain_violation

    @pytest.mark.parametrize("text, actual", [("clamp(5, 0)", 2), ("clamp(5, 0, 10, 20)", 4)])
    def test_arity_mismatch(self, text: str, actual: int) -> None:
        with pytest.raises(EvalError) as exc_info:
            _eval(text)
        err = exc_info.value
        assert err.kind == EvalErrorKind.arity_mismatch
        assert err.name == "clamp"
        assert err.expected == 3
        assert err.actual == actual

    def test_arguments_evaluated_before_arity_check(self) -> None:
        with pytest.raises(EvalError) as exc_info:
            _eval("clamp(y)")
        assert exc_info.value.kind == EvalErrorKind.unknown_variable

    def test_unary_arity(self) -> None:
        with pytest.raises(EvalError) as exc_info:
            _eval("sin(1, 2)")
        assert exc_info.value.expected == 1
        assert exc_info.value.actual == 2


# ────────────────────────────────────────────────────────────────
# Free variables
# ────────────────────────────────────────────────────────────────


class TestFreeVariables:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("x + y * sin(z)", ["x", "y", "z"]),
            ("pi * r^2", ["r"]),
            ("5 + 3", []),
            ("b + a + b", ["b", "a"]),
            ("clamp(v, lo, hi) + v", ["v", "lo", "hi"]),
            ("-(q ^ e)", ["q"]),
            ("sin", ["sin"]),
        ],
    )
    def test_order_and_uniqueness(self, text: str, expected: list[str]) -> None:
        assert extract_free_variables(parse(text)) == expected

    def test_extracted_names_are_sufficient_context(self) -> None:
        tree = parse("a * b + clamp(c, 0, 1)")
        ctx = {name: 2.0 for name in extract_free_variables(tree)}
        assert evaluate(tree, ctx) == 5.0
