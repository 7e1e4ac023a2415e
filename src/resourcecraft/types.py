"""
Registry of named types which check and optionally convert attribute values.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import Any

from .exceptions import TypeCheckFailure, UnsupportedType

__all__ = [
    "CheckFuncType",
    "ConverterFuncType",
    "TypeDescriptor",
    "TypeRegistry",
    "BUILTIN_TYPES",
]

type CheckFuncType = Callable[[Any], bool]
"""
Function returning whether the value is an instance of the type.
"""

type ConverterFuncType = Callable[[Any], Any]
"""
Function converting a value to an instance of the type, raising if impossible.
"""


class TypeDescriptor:
    """
    Named, reusable value check with optional conversion.
    """

    name: Hashable
    """
    Name under which this type is registered, a Python type or a symbolic string.
    """

    check: CheckFuncType | None
    """
    Check applied to values; if `None`, values always need conversion.
    """

    converter: ConverterFuncType | None
    """
    Conversion applied to values failing the check.
    """

    auto_convert: bool
    """
    Whether to convert values failing the check rather than rejecting them.
    """

    def __init__(
        self,
        name: Hashable,
        *,
        check: CheckFuncType | None = None,
        converter: ConverterFuncType | None = None,
        auto_convert: bool = False,
    ):
        self.name = name
        self.check = check
        self.converter = converter
        self.auto_convert = auto_convert

    def __repr__(self) -> str:
        return f"TypeDescriptor(name={self.display_name}, auto_convert={self.auto_convert})"

    @property
    def display_name(self) -> str:
        return self.name.__name__ if isinstance(self.name, type) else str(self.name)

    def is_instance(self, value: Any) -> bool:
        return self.check(value) if self.check else False

    def check_value(self, value: Any, /, *, auto_convert: bool | None = None) -> Any:
        """
        Return the value if it passes the check, else the converted value if
        conversion is enabled.

        :param value: Value to check
        :param auto_convert: Override this type's `auto_convert` setting
        :raises TypeCheckFailure: If the value fails the check and can't be converted
        """
        if self.is_instance(value):
            return value

        if not (self.auto_convert if auto_convert is None else auto_convert):
            raise TypeCheckFailure(
                f"{value!r} ({type(value).__name__}) is not of type {self.display_name}",
                value=value,
            )

        if self.converter is None:
            raise TypeCheckFailure(
                f"{value!r} is not of type {self.display_name} and type has no converter",
                value=value,
            )

        try:
            converted_value = self.converter(value)
        except Exception as e:
            raise TypeCheckFailure(
                f"Failed to convert {value!r} to {self.display_name}: {e}",
                value=value,
            ) from e

        # converted value must pass check, if any
        if self.check and not self.check(converted_value):
            raise TypeCheckFailure(
                f"Converted value {converted_value!r} from {value!r} is not of type {self.display_name}",
                value=value,
            )

        return converted_value


class TypeRegistry:
    """
    Registry of type descriptors by name.
    """

    _types: dict[Hashable, TypeDescriptor]

    def __init__(self, *types: TypeDescriptor):
        self._types = {}
        self.extend(types)

    def __repr__(self) -> str:
        return f"TypeRegistry(types={self.names})"

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, name: Hashable) -> bool:
        return name in self._types

    @property
    def names(self) -> tuple[Hashable, ...]:
        """
        Get names currently registered, in order of registration.
        """
        return tuple(self._types)

    def register(
        self,
        name: Hashable,
        /,
        *,
        check: CheckFuncType | None = None,
        converter: ConverterFuncType | None = None,
        auto_convert: bool = False,
    ) -> TypeDescriptor:
        """
        Register a type, replacing any type registered under the same name.
        """
        type_ = TypeDescriptor(
            name, check=check, converter=converter, auto_convert=auto_convert
        )
        self._types[name] = type_
        return type_

    def extend(self, types: Iterable[TypeDescriptor]):
        """
        Register multiple type descriptors.
        """
        for type_ in types:
            self._types[type_.name] = type_

    def find(self, name: Hashable, /) -> TypeDescriptor:
        """
        Find type by name.

        :raises UnsupportedType: If no type is registered under the name
        """
        try:
            return self._types[name]
        except (KeyError, TypeError):
            raise UnsupportedType(f"Unknown type: {name}") from None

    def copy(self) -> TypeRegistry:
        return TypeRegistry(*self._types.values())


def _is_str(obj: Any) -> bool:
    return isinstance(obj, str)


def _is_int(obj: Any) -> bool:
    # bool is a subclass of int but is not considered an integer here
    return isinstance(obj, int) and not isinstance(obj, bool)


def _is_bool(obj: Any) -> bool:
    return obj is True or obj is False


def _array_check(item_check: CheckFuncType) -> CheckFuncType:
    def check(obj: Any) -> bool:
        return isinstance(obj, (list, tuple)) and all(item_check(o) for o in obj)

    return check


BUILTIN_TYPES: tuple[TypeDescriptor, ...] = (
    *(TypeDescriptor(n, check=_is_str, converter=str) for n in (str, "String")),
    *(TypeDescriptor(n, check=_is_int, converter=int) for n in (int, "Integer")),
    TypeDescriptor("Boolean", check=_is_bool, converter=bool),
    TypeDescriptor("ArrayOfString", check=_array_check(_is_str)),
    TypeDescriptor("ArrayOfInteger", check=_array_check(_is_int)),
)
"""
Types installed in every fresh configuration.
"""
