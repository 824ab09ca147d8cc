"""Immutable expression tree node types.

``Expr`` is a closed union; the evaluator, renderer and free-variable
collector dispatch on it exhaustively.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union


class ConstantKind(str, Enum):
    PI = "pi"
    E = "e"

    @property
    def number(self) -> float:
        return _CONSTANT_VALUES[self]

    @classmethod
    def from_name(cls, name: str) -> ConstantKind | None:
        """Return the constant spelled exactly *name*, or None."""
        try:
            return cls(name)
        except ValueError:
            return None


_CONSTANT_VALUES = {ConstantKind.PI: math.pi, ConstantKind.E: math.e}


class UnaryOp(str, Enum):
    PLUS = "+"
    MINUS = "-"


class BinaryOp(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"


class _Node:
    def __str__(self) -> str:
        from exprcalc.formulas.render import render

        return render(self)  # type: ignore[arg-type]


@dataclass(frozen=True)
class Number(_Node):
    value: float


@dataclass(frozen=True)
class Constant(_Node):
    which: ConstantKind

    @property
    def name(self) -> str:
        return self.which.value


@dataclass(frozen=True)
class Variable(_Node):
    name: str


@dataclass(frozen=True)
class Unary(_Node):
    op: UnaryOp
    operand: Expr


@dataclass(frozen=True)
class Binary(_Node):
    op: BinaryOp
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Call(_Node):
    """Function call; ``name`` is stored as written and matched case-insensitively."""

    name: str
    args: tuple[Expr, ...] = ()


Expr = Union[Number, Constant, Variable, Unary, Binary, Call]
