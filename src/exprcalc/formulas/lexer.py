"""Hand-written scanner turning expression text into tokens.

Whitespace separates tokens but never appears in one, so ``"1 2"`` yields
two NUMBER tokens (rejected later by the parser as excess input) and
``"sin 5"`` yields an identifier followed by a number. Token positions
count only non-whitespace characters, i.e. they index the text with all
whitespace removed.
"""

from __future__ import annotations

from exprcalc.formulas.errors import LexError, LexErrorKind
from exprcalc.formulas.tokens import PUNCTUATION, Token, TokenKind

_DIGITS = frozenset("0123456789")
_EXPONENT_MARKERS = frozenset("eE")


def tokenize(text: str) -> list[Token]:
    """Split *text* into an ordered list of tokens.

    Args:
        text: Raw expression text, e.g. ``"2 * sin(x) + 1e-3"``.

    Returns:
        The tokens in source order.

    Raises:
        LexError: On an unrecognized character or a malformed number.
    """
    tokens: list[Token] = []
    pos = 0
    skipped = 0  # whitespace characters seen so far
    while pos < len(text):
        c = text[pos]
        if c.isspace():
            pos += 1
            skipped += 1
            continue
        if c in _DIGITS or c == ".":
            token, pos = _scan_number(text, pos, pos - skipped)
            tokens.append(token)
            continue
        if c.isalpha():
            token, pos = _scan_identifier(text, pos, pos - skipped)
            tokens.append(token)
            continue
        kind = PUNCTUATION.get(c)
        if kind is None:
            raise LexError(
                LexErrorKind.unknown_char,
                f"unknown token '{c}' at position {pos - skipped}",
                position=pos - skipped,
            )
        tokens.append(Token(kind, c, pos - skipped))
        pos += 1
    return tokens


def _scan_number(src: str, start: int, position: int) -> tuple[Token, int]:
    """Greedily collect a numeric literal candidate, then validate it."""
    pos = start
    while pos < len(src):
        c = src[pos]
        if c in _DIGITS or c == "." or c in _EXPONENT_MARKERS:
            pos += 1
        elif c in "+-" and pos > start and src[pos - 1] in _EXPONENT_MARKERS:
            pos += 1
        else:
            break
    text = src[start:pos]
    try:
        float(text)
    except ValueError:
        raise LexError(
            LexErrorKind.invalid_number,
            f"invalid number: {text}",
            position=position,
        ) from None
    return Token(TokenKind.NUMBER, text, position), pos


def _scan_identifier(src: str, start: int, position: int) -> tuple[Token, int]:
    pos = start
    while pos < len(src) and src[pos].isalnum():
        pos += 1
    return Token(TokenKind.IDENTIFIER, src[start:pos], position), pos
