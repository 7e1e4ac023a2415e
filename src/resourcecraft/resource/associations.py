"""
Associations which resolve nested objects with their own resources.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Literal

from .._utils import count_positional_params, fetch_value
from ..exceptions import SchemaConstructionError
from ..inferring import get_namespace, infer_resource_class, resolve_resource
from ..typedefs import is_collection
from .fields import AccessorType, BaseField
from .frame import ResolutionFrame

if TYPE_CHECKING:
    from ..config import Config
    from .base import Resource

__all__ = [
    "ArityType",
    "ResourceBodyType",
    "Association",
    "One",
    "Many",
]

logger = logging.getLogger(__name__)

type ArityType = Literal["one", "many"]

type ResourceBodyType = Callable[[type[Resource]], Any]
"""
Function declaring fields on a fresh anonymous resource class passed to it.
"""

type FilterFuncType = Callable[[Any], bool] | Callable[[Any, Any], bool]
"""
Predicate taking an element, or an element and the owning object.
"""


class Association(BaseField):
    """
    Base class for `One` and `Many`.

    The nested resource is determined when the owning resource is built, in order of
    precedence:

    1. Explicit resource class or name
    2. Inline body, creating an anonymous resource
    3. Inference from the field name, if an inflector is configured
    """

    arity: ArityType

    resource: type[Resource] | str | None
    """
    Resource passed by user, possibly by name.
    """

    body: ResourceBodyType | None
    """
    Inline definition of the nested resource.
    """

    nesting: str | None
    """
    Namespace in which to infer the nested resource.
    """

    source: str | Callable[[Any], Any] | None
    """
    Name to fetch from the object if different from the field name, or a function
    taking the object.
    """

    __resource_cls: type[Resource] | None

    def __init__(
        self,
        resource: type[Resource] | str | ResourceBodyType | None = None,
        /,
        *,
        name: str | None = None,
        condition: FilterFuncType | None = None,
        nesting: str | None = None,
        body: ResourceBodyType | None = None,
        key: str | None = None,
        source: str | Callable[[Any], Any] | None = None,
    ):
        super().__init__(name=name, key=key, condition=condition)

        # a callable which isn't a class is an inline body
        if callable(resource) and not isinstance(resource, type):
            if body is not None:
                raise SchemaConstructionError(
                    "Cannot pass inline body both positionally and by keyword"
                )
            resource, body = None, resource

        self.resource = resource
        self.body = body
        self.nesting = nesting
        self.source = source
        self.__resource_cls = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name}, resource={self.__resource_cls or self.resource})"

    @property
    def resource_cls(self) -> type[Resource]:
        """
        Nested resource class, available once the owning resource is built.
        """
        assert self.__resource_cls is not None, f"Association {self.name} is not bound"
        return self.__resource_cls

    def bind(self, owner: type[Resource], *, config: Config | None = None):
        super().bind(owner, config=config)
        self.__resource_cls = self.__get_resource_cls(owner, config)
        logger.debug(
            "Bound %s.%s to %s", owner.__name__, self.name, self.__resource_cls
        )

    def _create_accessor(self) -> AccessorType:
        source = self.source
        if callable(source):
            return lambda _, obj: source(obj)

        source_name = source or self.name
        assert source_name is not None
        return lambda _, obj: fetch_value(obj, source_name)

    def _resolve_item(
        self, resource: Resource, obj: Any, frame: ResolutionFrame
    ) -> Any:
        """
        Resolve a single nested object with the nested resource.
        """
        if obj is None:
            return None
        nested = self.resource_cls(obj, params=resource.params, config=frame.config)
        return nested._resolve_object(obj, frame)

    def __get_resource_cls(
        self, owner: type[Resource], config: Config | None
    ) -> type[Resource]:
        from ..config import config as default_config
        from ..serializing import resource_class

        config_ = config or default_config
        nesting = self.nesting or get_namespace(owner)

        if self.resource is not None:
            return resolve_resource(self.resource, nesting=nesting)
        elif self.body is not None:
            return resource_class(self.body, name=f"{owner.__name__}_{self.name}")
        elif config_.inferring:
            assert self.name is not None
            return infer_resource_class(self.name, nesting=nesting, config=config_)
        else:
            raise SchemaConstructionError(
                f"Association {owner.__name__}.{self.name}: when inference is disabled, either resource or body is required"
            )


class One(Association):
    """
    Association with a single nested object.
    """

    arity = "one"

    def __init__(
        self,
        resource: type[Resource] | str | ResourceBodyType | None = None,
        /,
        *,
        name: str | None = None,
        condition: FilterFuncType | None = None,
        nesting: str | None = None,
        body: ResourceBodyType | None = None,
        key: str | None = None,
        source: str | Callable[[Any], Any] | None = None,
    ):
        if condition is not None:
            raise SchemaConstructionError(
                "Condition is only supported for associations with many objects"
            )
        super().__init__(
            resource, name=name, nesting=nesting, body=body, key=key, source=source
        )

    def resolve(self, resource: Resource, obj: Any, frame: ResolutionFrame) -> Any:
        value = self._fetch(resource, obj)
        return self._resolve_item(resource, value, frame)


class Many(Association):
    """
    Association with a collection of nested objects, optionally filtered by
    condition.
    """

    arity = "many"

    __condition_arity: int

    def __init__(
        self,
        resource: type[Resource] | str | ResourceBodyType | None = None,
        /,
        *,
        name: str | None = None,
        condition: FilterFuncType | None = None,
        nesting: str | None = None,
        body: ResourceBodyType | None = None,
        key: str | None = None,
        source: str | Callable[[Any], Any] | None = None,
    ):
        super().__init__(
            resource,
            name=name,
            condition=condition,
            nesting=nesting,
            body=body,
            key=key,
            source=source,
        )
        self.__condition_arity = (
            count_positional_params(condition) if condition else 0
        )

    def resolve(
        self, resource: Resource, obj: Any, frame: ResolutionFrame
    ) -> list[Any] | None:
        value = self._fetch(resource, obj)
        if value is None:
            return None
        if not is_collection(value):
            raise TypeError(
                f"Association {self.name} expects a collection, got {type(value).__name__}"
            )

        elements = self.__filter(value, obj)
        return [
            self._resolve_item(resource, element, frame.recurse(i))
            for i, element in enumerate(elements)
        ]

    def __filter(self, value: Iterable[Any], obj: Any) -> list[Any]:
        if not (condition := self.condition):
            return list(value)
        if self.__condition_arity >= 2:
            return [e for e in value if condition(e, obj)]
        return [e for e in value if condition(e)]
