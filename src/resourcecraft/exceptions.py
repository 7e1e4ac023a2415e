"""
Exception classes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

if TYPE_CHECKING:
    from .resource.base import Resource

__all__ = [
    "ResourceError",
    "ConfigurationError",
    "UnsupportedBackend",
    "InferenceError",
    "SchemaConstructionError",
    "UnsupportedType",
    "ResolutionError",
    "TypeCheckFailure",
    "AttributeEvaluationError",
]

type PathType = tuple[str | int, ...]
"""
Field names and collection indices leading to the value being resolved.
"""


def format_path(path: PathType) -> str:
    """
    Format path tuple using dot notation for fields and brackets for indices.

    Examples:

    - `('articles', 1, 'title') -> "articles[1].title"`
    - `('user', 'name') -> "user.name"`
    - `(0, 'id') -> "[0].id"`
    - `() -> "<root>"`
    """
    if not path:
        return "<root>"
    parts: list[str] = []
    for i, segment in enumerate(path):
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        else:
            prefix = "." if i != 0 else ""
            parts.append(f"{prefix}{segment}")
    return "".join(parts)


class ResourceError(Exception):
    """
    Base class for all errors raised by this package.
    """


class ConfigurationError(ResourceError):
    """
    Invalid backend, encoder, inflector or key transform.
    """


class UnsupportedBackend(ConfigurationError):
    """
    Encoder backend name is not known.
    """


class InferenceError(ResourceError):
    """
    Resource class or key could not be inferred from a name.
    """


class SchemaConstructionError(ResourceError, ValueError):
    """
    Resource declarations are inconsistent or incomplete.
    """


class UnsupportedType(ResourceError, LookupError):
    """
    Type name was not registered.
    """


class ResolutionError(ResourceError):
    """
    Error encountered while resolving an object against a resource, located by the
    path of the offending field.
    """

    path: PathType
    """
    Path from the top-level object to the offending field.
    """

    resource_cls: type[Resource] | None
    """
    Resource class declaring the offending field.
    """

    def __init__(
        self,
        message: str,
        /,
        *,
        path: PathType = (),
        resource_cls: type[Resource] | None = None,
    ):
        self.message = message
        self.path = path
        self.resource_cls = resource_cls
        super().__init__(self.__format())

    def __format(self) -> str:
        return f"{format_path(self.path)}: {self.message}"

    @property
    def location(self) -> str:
        """
        Path formatted as dot notation.
        """
        return format_path(self.path)

    def _locate(self, path: PathType, resource_cls: type[Resource] | None) -> Self:
        """
        Copy this error at the given location, keeping the original cause.
        """
        error = self._copy(path=path, resource_cls=resource_cls)
        error.__cause__ = self.__cause__
        return error

    def _copy(
        self, *, path: PathType, resource_cls: type[Resource] | None
    ) -> Self:
        return type(self)(self.message, path=path, resource_cls=resource_cls)


class TypeCheckFailure(ResolutionError, TypeError):
    """
    Value failed the check of its bound type and could not be converted.
    """

    value: Any
    """
    The offending value.
    """

    def __init__(
        self,
        message: str,
        /,
        *,
        value: Any = None,
        path: PathType = (),
        resource_cls: type[Resource] | None = None,
    ):
        self.value = value
        super().__init__(message, path=path, resource_cls=resource_cls)

    def _copy(
        self, *, path: PathType, resource_cls: type[Resource] | None
    ) -> Self:
        return type(self)(
            self.message, value=self.value, path=path, resource_cls=resource_cls
        )


class AttributeEvaluationError(ResolutionError):
    """
    Accessor of an attribute or association raised; the original exception is
    available as `__cause__`.
    """
