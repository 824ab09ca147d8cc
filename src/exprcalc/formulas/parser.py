"""Recursive-descent parser for arithmetic expressions.

Operator precedence (lowest to highest):
  1. Addition/subtraction: + -      (left-associative)
  2. Multiplication/division: * /   (left-associative)
  3. Unary plus/minus: + -
  4. Exponentiation: ^              (right-associative)
  5. Atoms: number, constant, variable, function call, parenthesized expr

Grammar::

    expression := term (('+' | '-') term)*
    term       := unary (('*' | '/') unary)*
    unary      := ('+' | '-') unary | power
    power      := primary ('^' unary)?
    primary    := NUMBER | IDENT '(' args ')' | IDENT | '(' expression ')'
    args       := (expression (',' expression)*)?

Because unary sits above power, ``-x^2`` is ``-(x^2)``; because the right
operand of ``^`` re-enters ``unary``, ``2^3^2`` is ``2^(3^2)`` and
``2^-1`` is accepted.

Nesting is bounded: more than ``MAX_NESTING`` open parentheses, signs or
exponents, or a tree deeper than ``MAX_DEPTH`` nodes, fails with a
``ParseError`` of kind ``too_deep`` so that evaluation and rendering stay
well inside the interpreter's recursion limit.
"""

from __future__ import annotations

from typing import Sequence

from exprcalc.formulas.errors import ParseError, ParseErrorKind
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
from exprcalc.formulas.tokens import Token, TokenKind

_ADD_OPS = {TokenKind.PLUS: BinaryOp.ADD, TokenKind.MINUS: BinaryOp.SUB}
_MUL_OPS = {TokenKind.MULT: BinaryOp.MUL, TokenKind.DIV: BinaryOp.DIV}
_UNARY_OPS = {TokenKind.PLUS: UnaryOp.PLUS, TokenKind.MINUS: UnaryOp.MINUS}

MAX_NESTING = 100
MAX_DEPTH = 250


def parse(text: str) -> Expr:
    """Parse expression text into an expression tree.

    Args:
        text: The expression, e.g. ``"pi * r^2"``.

    Returns:
        The root node of the tree.

    Raises:
        LexError: If the text contains an unknown character or bad number.
        ParseError: If the token sequence is not a valid expression.
    """
    return parse_tokens(tokenize(text))


def parse_tokens(tokens: Sequence[Token]) -> Expr:
    """Parse an already-tokenized expression.

    Raises:
        ParseError: On empty input, malformed grammar, or leftover tokens.
    """
    if not tokens:
        raise ParseError(ParseErrorKind.empty_input, "empty expression")
    return _Parser(tokens).parse()


class _Parser:
    """Cursor over a token list; one method per grammar rule."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = tokens
        self.pos = 0
        self.nesting = 0

    def parse(self) -> Expr:
        expr = self.expression()
        if self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            raise ParseError(
                ParseErrorKind.excess_input,
                f"excess input: {token}",
                position=token.position,
            )
        if _tree_depth(expr) > MAX_DEPTH:
            raise ParseError(
                ParseErrorKind.too_deep,
                f"expression nested too deeply (more than {MAX_DEPTH} levels)",
            )
        return expr

    # ---------- helpers ----------

    def _peek(self, offset: int = 0) -> Token | None:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def _peek_kind(self, offset: int = 0) -> TokenKind | None:
        token = self._peek(offset)
        return token.kind if token is not None else None

    def _expect(self, kind: TokenKind, what: str) -> Token:
        token = self._peek()
        if token is None or token.kind != kind:
            raise ParseError(
                ParseErrorKind.expected_token,
                f"expected {what}" + (f", got {token}" if token is not None else ""),
                position=token.position if token is not None else None,
            )
        self.pos += 1
        return token

    # ---------- grammar rules ----------

    def expression(self) -> Expr:
        left = self.term()
        while self._peek_kind() in _ADD_OPS:
            op = _ADD_OPS[self.tokens[self.pos].kind]
            self.pos += 1
            left = Binary(op, left, self.term())
        return left

    def term(self) -> Expr:
        left = self.unary()
        while self._peek_kind() in _MUL_OPS:
            op = _MUL_OPS[self.tokens[self.pos].kind]
            self.pos += 1
            left = Binary(op, left, self.unary())
        return left

    def unary(self) -> Expr:
        # Nested operands of every kind come through here.
        self.nesting += 1
        try:
            if self.nesting > MAX_NESTING:
                token = self._peek()
                raise ParseError(
                    ParseErrorKind.too_deep,
                    f"expression nested too deeply (more than {MAX_NESTING} levels)",
                    position=token.position if token is not None else None,
                )
            kind = self._peek_kind()
            if kind in _UNARY_OPS:
                self.pos += 1
                return Unary(_UNARY_OPS[kind], self.unary())
            return self.power()
        finally:
            self.nesting -= 1

    def power(self) -> Expr:
        base = self.primary()
        if self._peek_kind() == TokenKind.POW:
            self.pos += 1
            # Recurse instead of looping so repeated ^ nests to the right.
            return Binary(BinaryOp.POW, base, self.unary())
        return base

    def primary(self) -> Expr:
        token = self._peek()
        if token is None:
            raise ParseError(
                ParseErrorKind.expected_token,
                "expected number, variable, function or '('",
            )

        if token.kind == TokenKind.NUMBER:
            self.pos += 1
            return Number(float(token.text))

        if token.kind == TokenKind.IDENTIFIER:
            if self._peek_kind(1) == TokenKind.LPAREN:
                return self.call()
            self.pos += 1
            constant = ConstantKind.from_name(token.text)
            if constant is not None:
                return Constant(constant)
            return Variable(token.text)

        if token.kind == TokenKind.LPAREN:
            self.pos += 1
            expr = self.expression()
            self._expect(TokenKind.RPAREN, "')'")
            return expr

        raise ParseError(
            ParseErrorKind.unknown_token,
            f"unexpected token: {token}",
            position=token.position,
        )

    def call(self) -> Call:
        name = self.tokens[self.pos].text
        self.pos += 2  # name and '('
        args: list[Expr] = []
        if self._peek_kind() not in (TokenKind.RPAREN, None):
            args.append(self.expression())
            while self._peek_kind() == TokenKind.COMMA:
                self.pos += 1
                args.append(self.expression())
        self._expect(TokenKind.RPAREN, f"')' after arguments of function '{name}'")
        return Call(name, tuple(args))


def _tree_depth(expr: Expr) -> int:
    """Height of *expr* in nodes, computed without recursion."""
    deepest = 0
    stack = [(expr, 1)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        if isinstance(node, Unary):
            stack.append((node.operand, depth + 1))
        elif isinstance(node, Binary):
            stack.append((node.left, depth + 1))
            stack.append((node.right, depth + 1))
        elif isinstance(node, Call):
            stack.extend((arg, depth + 1) for arg in node.args)
    return deepest
