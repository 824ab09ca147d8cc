"""Error types for expression lexing, parsing and evaluation."""

from __future__ import annotations

from enum import Enum


class LexErrorKind(str, Enum):
    unknown_char = "unknown_char"
    invalid_number = "invalid_number"


class ParseErrorKind(str, Enum):
    empty_input = "empty_input"
    excess_input = "excess_input"
    expected_token = "expected_token"
    unknown_token = "unknown_token"
    too_deep = "too_deep"


class EvalErrorKind(str, Enum):
    unknown_variable = "unknown_variable"
    unknown_function = "unknown_function"
    arity_mismatch = "arity_mismatch"
    domain_violation = "domain_violation"


class ExprError(Exception):
    """Base class for all expression-related errors."""


class LexError(ExprError):
    """Unrecognized character or malformed numeric literal.

    Attributes:
        kind: Which lexing rule was violated.
        position: Index into the whitespace-stripped input, if known.
    """

    def __init__(
        self, kind: LexErrorKind, message: str, position: int | None = None
    ) -> None:
        self.kind = kind
        self.position = position
        super().__init__(message)


class ParseError(ExprError):
    """Syntax error in the token sequence.

    Attributes:
        kind: Which grammar rule was violated.
        position: Index of the offending token's first character, if known.
    """

    def __init__(
        self, kind: ParseErrorKind, message: str, position: int | None = None
    ) -> None:
        self.kind = kind
        self.position = position
        super().__init__(message)


class EvalError(ExprError):
    """Failure while reducing an expression tree to a number.

    Attributes:
        kind: The failure category.
        name: Variable or function name involved, if any.
        expected: Expected argument count (arity mismatches only).
        actual: Received argument count (arity mismatches only).
    """

    def __init__(
        self,
        kind: EvalErrorKind,
        message: str,
        *,
        name: str | None = None,
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(message)

    @classmethod
    def unknown_variable(cls, name: str) -> EvalError:
        return cls(
            EvalErrorKind.unknown_variable, f"Unknown variable: {name}", name=name
        )

    @classmethod
    def unknown_function(cls, name: str) -> EvalError:
        return cls(
            EvalErrorKind.unknown_function, f"Unknown function: {name}", name=name
        )

    @classmethod
    def arity_mismatch(cls, name: str, expected: int, actual: int) -> EvalError:
        return cls(
            EvalErrorKind.arity_mismatch,
            f"Function '{name}' expects {expected} argument"
            f"{'' if expected == 1 else 's'}, but received {actual}",
            name=name,
            expected=expected,
            actual=actual,
        )

    @classmethod
    def domain_violation(cls, name: str, message: str) -> EvalError:
        return cls(EvalErrorKind.domain_violation, message, name=name)
