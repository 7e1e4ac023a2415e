"""
Registry of resource classes by name and inference of resource classes from names.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

from .exceptions import InferenceError, SchemaConstructionError
from .inflecting import require_method

if TYPE_CHECKING:
    from .config import Config
    from .resource.base import Resource

__all__ = [
    "RESOURCE_SUFFIXES",
    "ResourceRegistry",
    "registry",
    "register_resource",
    "lookup_resource",
    "resolve_resource",
    "infer_resource_class",
    "get_namespace",
]

logger = logging.getLogger(__name__)

RESOURCE_SUFFIXES = ("Resource", "Serializer")
"""
Class name suffixes tried in order when inferring a resource class.
"""


class ResourceRegistry:
    """
    Mapping of names to resource classes, populated as resource classes are created.

    Each class is registered under its bare name, its qualified name (including
    enclosing classes), and its module-qualified name; a later class registered
    under the same name replaces the earlier one.
    """

    _resources: dict[str, type[Resource]]

    def __init__(self):
        self._resources = {}

    def __repr__(self) -> str:
        return f"ResourceRegistry(resources={tuple(self._resources)})"

    def __contains__(self, name: str) -> bool:
        return name in self._resources

    def register(self, resource_cls: type[Resource], /, *names: str):
        """
        Register resource class under its own names and any additional aliases.
        """
        all_names = (
            resource_cls.__name__,
            resource_cls.__qualname__,
            f"{resource_cls.__module__}.{resource_cls.__qualname__}",
            *names,
        )
        for name in all_names:
            self._resources[name] = resource_cls

    def lookup(self, name: str, /, *, nesting: str | None = None) -> type[Resource] | None:
        """
        Look up resource class by name, first within the namespace if given, then
        globally.
        """
        if nesting:
            if resource_cls := self._resources.get(f"{nesting}.{name}"):
                return resource_cls
        return self._resources.get(name)

    def clear(self):
        self._resources.clear()


registry = ResourceRegistry()
"""
Default registry of named resource classes.
"""


def register_resource(resource_cls: type[Resource], /, *names: str):
    """
    Register a resource class under additional names.
    """
    registry.register(resource_cls, *names)


def lookup_resource(name: str, /, *, nesting: str | None = None) -> type[Resource] | None:
    return registry.lookup(name, nesting=nesting)


def resolve_resource(ref: Any, /, *, nesting: str | None = None) -> type[Resource]:
    """
    Get resource class from a class, a registered name, or a dotted import path.

    :raises SchemaConstructionError: If the reference can't be resolved
    """
    from .resource.base import Resource

    if isinstance(ref, type):
        if not issubclass(ref, Resource):
            raise SchemaConstructionError(f"{ref} is not a Resource subclass")
        return ref

    if not isinstance(ref, str):
        raise SchemaConstructionError(
            f"Resource must be a Resource subclass or its name, got {ref!r}"
        )

    if resource_cls := registry.lookup(ref, nesting=nesting):
        return resource_cls

    # fall back to import path, e.g. "app.resources.UserResource"
    module_name, _, attr_name = ref.rpartition(".")
    if module_name:
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            pass
        else:
            obj = getattr(module, attr_name, None)
            if isinstance(obj, type) and issubclass(obj, Resource):
                return obj

    raise SchemaConstructionError(f"Resource not found: {ref}")


def infer_resource_class(
    name: str, /, *, nesting: str | None = None, config: Config | None = None
) -> type[Resource]:
    """
    Infer resource class from a name like an association name or an object's class
    name: `"articles"` resolves to `ArticleResource`, or `ArticleSerializer` if the
    former is not found.

    :param name: Name to classify using the inflector
    :param nesting: Namespace to search first, e.g. `"app.resources"` or an enclosing \
    class path
    :param config: Configuration providing the inflector, or the default one
    :raises InferenceError: If there's no inflector or no resource class is found
    """
    from .config import config as default_config

    config_ = config or default_config
    classify = require_method(config_.inflector, "classify")
    classified = classify(name)

    candidates = [f"{classified}{suffix}" for suffix in RESOURCE_SUFFIXES]
    for candidate in candidates:
        if resource_cls := registry.lookup(candidate, nesting=nesting):
            logger.debug("Inferred %s from name %s", resource_cls, name)
            return resource_cls

    raise InferenceError(
        "Could not infer resource from name {}: none of {} found{}".format(
            repr(name),
            ", ".join(candidates),
            f" in {nesting}" if nesting else "",
        )
    )


def get_namespace(cls: type) -> str:
    """
    Get namespace enclosing the class: its module path plus any enclosing classes.
    """
    qualname = cls.__qualname__
    enclosing = qualname.rpartition(".")[0] if "<locals>" not in qualname else ""
    return f"{cls.__module__}.{enclosing}" if enclosing else cls.__module__
