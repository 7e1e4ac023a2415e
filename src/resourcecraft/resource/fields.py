"""
Field descriptors declared on resources.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Any, Literal, overload

from .._utils import count_positional_params, fetch_value
from ..exceptions import SchemaConstructionError, TypeCheckFailure
from ..types import TypeDescriptor
from .frame import ResolutionFrame

if TYPE_CHECKING:
    from ..config import Config
    from .base import Resource

__all__ = [
    "FieldKindType",
    "BaseField",
    "Attribute",
    "attribute",
]

type FieldKindType = Literal["simple", "computed", "conditional"]
"""
Kind of attribute:

- `"simple"`: Value fetched from the object by name
- `"computed"`: Value returned by a function or resource method
- `"conditional"`: Included only when its condition holds
"""

type AccessorType = Callable[[Resource, Any], Any]
"""
Function fetching a field's raw value, invoked with the resolving resource and the
object.
"""

type ConditionFuncType = Callable[[Any], bool] | Callable[[Any, Any], bool]
"""
Predicate taking the object, or the object and the field's value.
"""


class BaseField(ABC):
    """
    Base class for attributes and associations.
    """

    name: str | None
    """
    Field name, set upon assignment in class body if not passed.
    """

    key: str | None
    """
    Output key if different from the name, before key transformation.
    """

    condition: Callable[..., bool] | None
    """
    Optional predicate determining whether the field is included.
    """

    _accessor: AccessorType | None = None
    """
    Accessor resolved when the owning resource is built.
    """

    _owner: type[Resource] | None = None
    """
    Resource class which declared this field.
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        key: str | None = None,
        condition: Callable[..., bool] | None = None,
    ):
        self.name = name
        self.key = key
        self.condition = condition

    def __set_name__(self, owner: type, name: str):
        if self.name is None:
            self.name = name

    @property
    def output_name(self) -> str:
        """
        Name used for the output key before transformation.
        """
        assert self.name is not None
        return self.key or self.name

    @property
    def is_bound(self) -> bool:
        return self._accessor is not None

    def bind(self, owner: type[Resource], *, config: Config | None = None):
        """
        Resolve accessor and any other declaration-dependent state; invoked once when
        the owning resource is built.
        """
        if self.name is None:
            raise SchemaConstructionError(f"Field {self} declared without a name")
        self._owner = owner
        self._accessor = self._create_accessor()

    @abstractmethod
    def resolve(self, resource: Resource, obj: Any, frame: ResolutionFrame) -> Any:
        """
        Get this field's value for the object, recursing for nested resources.
        """

    @abstractmethod
    def _create_accessor(self) -> AccessorType:
        ...

    def _fetch(self, resource: Resource, obj: Any) -> Any:
        assert self._accessor is not None, f"Field {self.name} is not bound"
        return self._accessor(resource, obj)


class Attribute(BaseField):
    """
    Attribute fetched from the object by name, computed by a function, and
    optionally type-checked.
    """

    source: str | Callable[[Any], Any] | None
    """
    Name to fetch from the object if different from the field name, or a function
    taking the object.
    """

    type: Hashable | TypeDescriptor | None
    """
    Name of registered type, or type descriptor, to check the value against.
    """

    auto_convert: bool | None
    """
    Override of the type's `auto_convert` setting.
    """

    _method: Callable[[Any, Any], Any] | None
    """
    Resource method computing the value, if declared with `@attribute`.
    """

    __condition_arity: int

    def __init__(
        self,
        source: str | Callable[[Any], Any] | None = None,
        /,
        *,
        name: str | None = None,
        type: Hashable | TypeDescriptor | None = None,
        auto_convert: bool | None = None,
        condition: ConditionFuncType | None = None,
        key: str | None = None,
    ):
        super().__init__(name=name, key=key, condition=condition)
        self.source = source
        self.type = type
        self.auto_convert = auto_convert
        self._method = None
        self.__condition_arity = (
            count_positional_params(condition) if condition else 0
        )

    def __repr__(self) -> str:
        attrs = [f"name={self.name}", f"kind={self.kind}"]
        if self.type is not None:
            attrs.append(f"type={self.type}")
        return f"Attribute({', '.join(attrs)})"

    @property
    def kind(self) -> FieldKindType:
        if self.condition:
            return "conditional"
        if self._method or callable(self.source):
            return "computed"
        return "simple"

    def check_condition(self, resource: Resource, obj: Any) -> bool:
        """
        Evaluate a condition taking only the object; invoked before fetching.
        """
        if self.condition and self.__condition_arity < 2:
            return bool(self.condition(obj))
        return True

    def check_value_condition(self, resource: Resource, obj: Any, value: Any) -> bool:
        """
        Evaluate a condition taking the object and value; invoked after fetching.
        """
        if self.condition and self.__condition_arity >= 2:
            return bool(self.condition(obj, value))
        return True

    def resolve(self, resource: Resource, obj: Any, frame: ResolutionFrame) -> Any:
        return self._fetch(resource, obj)

    def check_type(self, value: Any, frame: ResolutionFrame) -> Any:
        """
        Check value against bound type, converting it if enabled.

        :raises TypeCheckFailure: If the value fails the check
        :raises UnsupportedType: If the type is not registered
        """
        if self.type is None:
            return value

        type_ = (
            self.type
            if isinstance(self.type, TypeDescriptor)
            else frame.config.find_type(self.type)
        )
        try:
            return type_.check_value(value, auto_convert=self.auto_convert)
        except TypeCheckFailure as e:
            raise e._locate(frame.path, self._owner)

    def _create_accessor(self) -> AccessorType:
        if method := self._method:
            return lambda resource, obj: method(resource, obj)

        source = self.source
        if callable(source):
            return lambda _, obj: source(obj)

        source_name = source or self.name
        assert source_name is not None
        return lambda _, obj: fetch_value(obj, source_name)


@overload
def attribute(func: Callable[[Any, Any], Any], /) -> Attribute: ...


@overload
def attribute(
    *,
    type: Hashable | TypeDescriptor | None = None,
    auto_convert: bool | None = None,
    condition: ConditionFuncType | None = None,
    key: str | None = None,
) -> Callable[[Callable[[Any, Any], Any]], Attribute]: ...


def attribute(
    func: Callable[[Any, Any], Any] | None = None,
    /,
    *,
    type: Hashable | TypeDescriptor | None = None,
    auto_convert: bool | None = None,
    condition: ConditionFuncType | None = None,
    key: str | None = None,
) -> Attribute | Callable[[Callable[[Any, Any], Any]], Attribute]:
    """
    Decorator to declare a computed attribute from a resource method taking the
    object, e.g.:

    ```python
    class UserResource(Resource):
        @attribute
        def full_name(self, user: User) -> str:
            return f"{user.first_name} {user.last_name}"
    ```
    """

    def decorator(func: Callable[[Any, Any], Any]) -> Attribute:
        attr = Attribute(
            name=func.__name__,
            type=type,
            auto_convert=auto_convert,
            condition=condition,
            key=key,
        )
        attr._method = func
        return attr

    if func is not None:
        return decorator(func)
    return decorator
