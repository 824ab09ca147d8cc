"""exprcalc -- a small arithmetic expression language."""

__version__ = "0.1.0"

from exprcalc.formulas import (  # noqa: E402
    EvalError,
    ExprError,
    LexError,
    ParseError,
    evaluate,
    extract_free_variables,
    parse,
    render,
)

__all__ = [
    "EvalError",
    "ExprError",
    "LexError",
    "ParseError",
    "__version__",
    "evaluate",
    "extract_free_variables",
    "parse",
    "render",
]
