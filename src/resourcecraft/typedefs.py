"""
Basic definitions shared throughout the package.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from types import NoneType
from typing import Any, Literal

__all__ = [
    "JsonType",
    "KeyType",
    "KeyCasingType",
    "KeyTransformType",
    "OnErrorType",
    "OnNilType",
    "Symbol",
    "SkipSentinel",
    "SKIP",
    "is_collection",
]

type JsonType = str | int | float | bool | NoneType | list[JsonType] | dict[
    str, JsonType
]
"""
Native types which can be represented in JSON format.
"""

type KeyCasingType = Literal["stringify", "symbolize"]
"""
Native representation of output keys:

- `"stringify"`: Plain `str`
- `"symbolize"`: `Symbol`
"""

type KeyTransformType = Literal["camel", "lower_camel", "dash", "snake", "none"]
"""
Case transformation applied to output keys by the inflector.
"""

type OnErrorHandlerType = Callable[[Exception, Any, str, type], Any]
"""
Custom error handler invoked as `handler(error, obj, key, resource_cls)`, returning
the value to use or `SKIP`.
"""

type OnErrorType = Literal["raise", "nullify", "ignore"] | OnErrorHandlerType
"""
Policy applied when an accessor raises:

- `"raise"`: Propagate to caller
- `"nullify"`: Use `None` as the value
- `"ignore"`: Omit the field
- Callable: Use the value returned by the handler
"""

type OnNilType = Callable[[Any, str], Any] | Any
"""
Policy applied when a resolved value is `None`: `None` to keep it, a callable
invoked as `handler(obj, key)`, or a constant replacement.
"""


class Symbol(str):
    """
    String flavor used for output keys when keys are symbolized; compares and hashes
    equal to the plain string.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f":{str(self)}"


type KeyType = str | Symbol


class SkipSentinel:
    def __repr__(self) -> str:
        return type(self).__name__


SKIP = SkipSentinel()
"""
Returned by a custom error handler to omit the field from output.
"""


def is_collection(obj: Any) -> bool:
    """
    Check whether the object should be resolved element-wise rather than as a single
    object.

    Strings, mappings and named tuples are treated as single objects.
    """
    if isinstance(obj, (str, bytes, bytearray, Mapping)):
        return False
    if isinstance(obj, tuple) and hasattr(obj, "_fields"):
        return False
    return isinstance(obj, Iterable)
