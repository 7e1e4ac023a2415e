"""
Internal utilities.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping, Sized
from typing import Any

from .typedefs import is_collection


def count_positional_params(func: Callable[..., Any], /, *, default: int = 1) -> int:
    """
    Count positional params of function, or `default` if its signature can't be
    inspected. Variadic positional params count as unbounded.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return default

    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 1 << 16
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


def fetch_value(obj: Any, name: str, /) -> Any:
    """
    Fetch named value from arbitrary object: mapping item, attribute or property, or
    the result of calling a bound method without arguments.
    """
    if isinstance(obj, Mapping):
        return obj[name]
    value = getattr(obj, name)
    if inspect.ismethod(value):
        return value()
    return value


def materialize(obj: Any, /) -> Any:
    """
    Convert one-shot iterables like generators to lists so they can be traversed more
    than once.
    """
    if is_collection(obj) and not isinstance(obj, Sized):
        return list(obj)
    return obj
