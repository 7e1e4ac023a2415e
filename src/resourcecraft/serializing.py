"""
Top-level serialization entry points.
"""

from __future__ import annotations

import types
from collections.abc import Mapping
from typing import Any

from ._utils import materialize
from .config import Config
from .config import config as default_config
from .exceptions import InferenceError
from .inferring import infer_resource_class, resolve_resource
from .resource.associations import ResourceBodyType
from .resource.base import Resource, RootKeyType
from .typedefs import JsonType, is_collection

__all__ = [
    "resource_class",
    "resource_for",
    "to_dict",
    "hashify",
    "serialize",
]

type ResourceRefType = type[Resource] | str | ResourceBodyType
"""
Resource class, registered name or import path, or inline body.
"""


def resource_class(
    body: ResourceBodyType | None = None, /, *, name: str = "AnonymousResource"
) -> type[Resource]:
    """
    Create an anonymous resource class, passing it to `body` to declare its fields:

    ```python
    resource_cls = resource_class(
        lambda r: (
            r.attributes("id"),
            r.many("articles", lambda a: a.attributes("title")),
        )
    )
    ```

    Each invocation creates a distinct class which is not registered for inference.

    :param body: Function declaring fields on the class
    :param name: Class name
    """

    def exec_body(ns: dict[str, Any]):
        ns["__module__"] = getattr(body, "__module__", None) or __name__
        ns["__qualname__"] = name

    resource_cls = types.new_class(name, (Resource,), {"register": False}, exec_body)
    if body is not None:
        body(resource_cls)
    resource_cls.build()
    return resource_cls


def resource_for(
    obj: Any, resource: ResourceRefType | None = None, /, *, config: Config | None = None
) -> type[Resource]:
    """
    Get resource class from a reference, or infer it from the object's class name
    (or the first element's for a collection).

    :raises InferenceError: If the resource can't be inferred
    """
    if resource is None:
        return infer_resource_class(_get_class_name(obj), config=config)
    if isinstance(resource, (type, str)):
        return resolve_resource(resource)
    if callable(resource):
        return resource_class(resource)
    raise TypeError(
        f"Resource must be a Resource subclass, a name, or a body function, got {resource!r}"
    )


def to_dict(
    obj: Any,
    resource: ResourceRefType | None = None,
    /,
    *,
    root_key: RootKeyType = None,
    params: Mapping[str, Any] | None = None,
    config: Config | None = None,
) -> JsonType:
    """
    Resolve object to a mapping, or a list of mappings if it's a collection.

    :param obj: Object or collection to resolve
    :param resource: Resource class or name, or body of an inline resource; if \
    `None`, inferred from the object's class name
    :param root_key: Root key overriding the resource's config: `False` to not \
    wrap, `True` to infer, or the key itself
    :param params: Parameters accessible by the resource
    :param config: Configuration to use instead of the default one
    """
    config_ = config or default_config
    obj = materialize(obj)
    resource_cls = resource_for(obj, resource, config=config_)
    return resource_cls(obj, params=params, config=config_).to_dict(
        root_key=root_key
    )


hashify = to_dict


def serialize(
    obj: Any,
    resource: ResourceRefType | None = None,
    /,
    *,
    root_key: RootKeyType = None,
    params: Mapping[str, Any] | None = None,
    config: Config | None = None,
) -> str:
    """
    Resolve object and encode it as JSON text using the configured encoder.

    Takes the same parameters as `to_dict()`.
    """
    config_ = config or default_config
    obj = materialize(obj)
    resource_cls = resource_for(obj, resource, config=config_)
    return resource_cls(obj, params=params, config=config_).serialize(
        root_key=root_key
    )


def _get_class_name(obj: Any) -> str:
    if not is_collection(obj):
        return type(obj).__name__
    for element in obj:
        return type(element).__name__
    raise InferenceError("Cannot infer resource from an empty collection")
