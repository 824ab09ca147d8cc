"""Central registry for builtin expression functions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class Builtin:
    """A registered function together with its fixed arity."""

    name: str
    arity: int
    fn: Callable[..., float]


_BUILTINS: dict[str, Builtin] = {}


def register_builtin(name: str, arity: int) -> Callable:
    """Decorator that registers a builtin function by lower-case name.

    Args:
        name: The lookup name for this function.
        arity: Exact number of arguments the function takes.

    Returns:
        The original function, unmodified.
    """

    def decorator(fn: Callable[..., float]) -> Callable[..., float]:
        _BUILTINS[name.lower()] = Builtin(name.lower(), arity, fn)
        return fn

    return decorator


def get_builtin(name: str) -> Builtin:
    """Look up a registered builtin, ignoring case.

    Args:
        name: The function name as written in the expression.

    Returns:
        The registered builtin.

    Raises:
        KeyError: If no function is registered under *name*.
    """
    key = name.lower()
    if key not in _BUILTINS:
        raise KeyError(f"Unknown builtin function: {name!r}")
    return _BUILTINS[key]


def builtin_names() -> list[str]:
    """Return the names of all registered builtins, sorted."""
    return sorted(_BUILTINS)
