"""Token model produced by the lexer and consumed by the parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TokenKind(str, Enum):
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    PLUS = "PLUS"
    MINUS = "MINUS"
    MULT = "MULT"
    DIV = "DIV"
    POW = "POW"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    COMMA = "COMMA"


# Single-character operators and punctuation.
PUNCTUATION: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MULT,
    "/": TokenKind.DIV,
    "^": TokenKind.POW,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}


@dataclass(frozen=True)
class Token:
    """A lexical token.

    ``position`` is the index of the first character in the
    whitespace-stripped input and is excluded from equality.
    """

    kind: TokenKind
    text: str
    position: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"{self.kind.value}({self.text})"
