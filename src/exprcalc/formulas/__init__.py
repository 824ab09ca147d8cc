"""Arithmetic expression parsing and evaluation.

Public API::

    from exprcalc.formulas import parse, evaluate, extract_free_variables, render
"""

from exprcalc.formulas.errors import (
    EvalError,
    EvalErrorKind,
    ExprError,
    LexError,
    LexErrorKind,
    ParseError,
    ParseErrorKind,
)
from exprcalc.formulas.evaluator import evaluate, extract_free_variables
from exprcalc.formulas.lexer import tokenize
from exprcalc.formulas.nodes import (
    Binary,
    BinaryOp,
    Call,
    Constant,
    ConstantKind,
    Expr,
    Number,
    Unary,
    UnaryOp,
    Variable,
)
from exprcalc.formulas.parser import parse, parse_tokens
from exprcalc.formulas.render import render
from exprcalc.formulas.tokens import Token, TokenKind

__all__ = [
    "Binary",
    "BinaryOp",
    "Call",
    "Constant",
    "ConstantKind",
    "EvalError",
    "EvalErrorKind",
    "Expr",
    "ExprError",
    "LexError",
    "LexErrorKind",
    "Number",
    "ParseError",
    "ParseErrorKind",
    "Token",
    "TokenKind",
    "Unary",
    "UnaryOp",
    "Variable",
    "evaluate",
    "extract_free_variables",
    "parse",
    "parse_tokens",
    "render",
    "tokenize",
]
