"""
Base resource class: declarative schema plus resolution of objects against it.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from .._utils import materialize
from ..config import Config, validate_on_error
from ..config import config as default_config
from ..exceptions import (
    AttributeEvaluationError,
    ConfigurationError,
    ResolutionError,
    ResourceError,
    SchemaConstructionError,
)
from ..inferring import RESOURCE_SUFFIXES, registry
from ..inflecting import KEY_TRANSFORMS, require_method, transform_key
from ..typedefs import (
    SKIP,
    JsonType,
    KeyTransformType,
    KeyType,
    OnErrorType,
    OnNilType,
    SkipSentinel,
    is_collection,
)
from ..types import TypeDescriptor
from .associations import Many, One, ResourceBodyType
from .fields import Attribute, BaseField, ConditionFuncType
from .frame import ResolutionFrame

if TYPE_CHECKING:
    from .associations import FilterFuncType

__all__ = [
    "ResourceConfig",
    "Resource",
]

logger = logging.getLogger(__name__)

type RootKeyType = str | bool | None
"""
Root key setting:

- `None`: Defer to the next level of configuration
- `False`: Don't wrap
- `True`: Infer from the resource or object class name
- `str`: Use as-is
"""

type TypedAttributeType = Hashable | tuple[Hashable, bool]
"""
Type name, or type name with `auto_convert` setting.
"""


@dataclass(kw_only=True)
class ResourceConfig:
    """
    Configures resource.
    """

    root_key: RootKeyType = None
    """
    Key under which a single object is wrapped.
    """

    root_key_for_collection: RootKeyType = None
    """
    Key under which a collection is wrapped; if `None`, an inferred `root_key` is
    pluralized and a static one is reused.
    """

    transform_keys: KeyTransformType | None = None
    """
    Key case transformation applied by the inflector:

    - `"camel"`: `"first_name"` -> `"FirstName"`
    - `"lower_camel"`: `"first_name"` -> `"firstName"`
    - `"dash"`: `"first_name"` -> `"first-name"`
    - `"snake"`: `"firstName"` -> `"first_name"`
    """

    transform_root_key: bool = True
    """
    Whether to also transform the root key.
    """

    on_error: OnErrorType | None = None
    """
    Policy for accessors which raise; if `None`, use the global policy.
    """

    on_nil: OnNilType = None
    """
    Policy for `None` values; if `None`, use the global policy.
    """

    def __post_init__(self):
        if self.transform_keys is not None and self.transform_keys not in KEY_TRANSFORMS:
            raise ConfigurationError(f"Unknown transform type: {self.transform_keys}")
        if self.on_error is not None:
            validate_on_error(self.on_error)


class Resource:
    """
    Base class for resources: subclass and declare attributes and associations to
    define how objects are resolved to JSON-serializable mappings.

    Fields are declared in the class body:

    ```python
    class UserResource(Resource):
        resource_config = ResourceConfig(root_key=True)

        id = Attribute()
        name = Attribute(type="String")
        articles = Many(ArticleResource)

        @attribute
        def display_name(self, user: User) -> str:
            return user.name.title()
    ```

    Or by class methods, which is also how inline resources are declared:

    ```python
    UserResource.attributes("id", name="String")
    UserResource.many("articles", ArticleResource)
    ```

    Output keys follow declaration order, with a subclass's fields following its
    parent's.
    """

    resource_config: ClassVar[ResourceConfig | None] = None
    """
    Set on subclass to configure this resource.
    """

    object: Any
    """
    Object or collection being resolved.
    """

    params: Mapping[str, Any]
    """
    User-defined parameters, accessible from computed attributes and propagated to
    nested resources.
    """

    config: Config
    """
    Global configuration in effect.
    """

    __built: bool = False
    """
    Whether build has completed for this class.
    """

    __anonymous: bool = False
    """
    Whether this class was created from an inline definition.
    """

    __declared: list[BaseField]
    """
    Fields declared on this class, in order of declaration.
    """

    __fields: MappingProxyType[str, BaseField]
    """
    Mapping of field names to fields including inherited ones.

    Only set during build.
    """

    __resource_config: ResourceConfig
    """
    Config from user or default.
    """

    def __init_subclass__(cls, *, register: bool = True, **kwargs):
        super().__init_subclass__(**kwargs)

        # reset built state in case a parent resource was already built
        cls.__built = False
        cls.__anonymous = not register
        cls.__declared = []

        for attr_name, value in list(cls.__dict__.items()):
            if not isinstance(value, BaseField):
                continue
            if hasattr(Resource, attr_name):
                raise SchemaConstructionError(
                    f"Field '{attr_name}' of {cls.__name__} shadows Resource.{attr_name}; "
                    f"declare it with {cls.__name__}.attributes('{attr_name}') or "
                    f"Attribute('{attr_name}', name=...) under another class attribute"
                )
            cls.__declared.append(value)

        if register:
            registry.register(cls)

    def __init__(
        self,
        obj: Any,
        /,
        *,
        params: Mapping[str, Any] | None = None,
        config: Config | None = None,
    ):
        self.object = materialize(obj)
        self.params = params if params is not None else {}
        self.config = config or default_config

    def __repr__(self) -> str:
        return f"{type(self).__name__}(object={self.object!r})"

    @classmethod
    def resource_fields(cls) -> MappingProxyType[str, BaseField]:
        """
        Get fields of this resource by name, building it if needed.
        """
        cls.build()
        return cls.__fields

    @classmethod
    def get_resource_config(cls) -> ResourceConfig:
        cls.build()
        return cls.__resource_config

    @classmethod
    def is_built(cls) -> bool:
        return cls.__built

    @classmethod
    def is_anonymous(cls) -> bool:
        return cls.__anonymous

    @classmethod
    def build(cls, *, config: Config | None = None):
        """
        Build this resource, after which no more fields can be declared:

        - Collect inherited and declared fields
        - Resolve accessors
        - Resolve nested resources of associations, which may be inferred

        Invoked automatically upon first use.
        """
        if cls.__built:
            return

        fields: dict[str, BaseField] = {}

        # inherit fields from parent resources
        for base in reversed(cls.__bases__):
            if issubclass(base, Resource) and base is not Resource:
                base.build(config=config)
                fields.update(base.resource_fields())

        for field in cls.__declared:
            assert field.name is not None
            field.bind(cls, config=config)
            fields[field.name] = field

        # output keys must be unique even if names differ
        output_names: dict[str, str] = {}
        for name, field in fields.items():
            if (other := output_names.get(field.output_name)) is not None:
                raise SchemaConstructionError(
                    f"Fields '{other}' and '{name}' of {cls.__name__} have the same output key '{field.output_name}'"
                )
            output_names[field.output_name] = name

        cls.__fields = MappingProxyType(fields)
        cls.__resource_config = cls.resource_config or ResourceConfig()
        cls.__built = True

        logger.debug("Built %s with fields %s", cls.__name__, tuple(fields))

    @classmethod
    def configure(cls, **kwargs: Any):
        """
        Update this resource's config, e.g. for inline resources:

        ```python
        resource_class(lambda r: r.configure(root_key="user"))
        ```
        """
        cls.__check_not_built()
        current = cls.resource_config or ResourceConfig()
        cls.resource_config = dataclasses.replace(current, **kwargs)

    @classmethod
    def attributes(cls, *names: str, **typed: TypedAttributeType):
        """
        Declare simple attributes by name, optionally bound to types:

        ```python
        r.attributes("id", "title", age=("Integer", True), name="String")
        ```
        """
        for name in names:
            cls.__declare(Attribute(name=name))
        for name, type_spec in typed.items():
            type_, auto_convert = (
                type_spec if isinstance(type_spec, tuple) else (type_spec, None)
            )
            cls.__declare(Attribute(name=name, type=type_, auto_convert=auto_convert))

    @classmethod
    def attribute(
        cls,
        name: str,
        func: str | Callable[[Any], Any] | None = None,
        /,
        *,
        type: Hashable | TypeDescriptor | None = None,
        auto_convert: bool | None = None,
        condition: ConditionFuncType | None = None,
        key: str | None = None,
    ):
        """
        Declare an attribute, optionally computed by a function taking the object or
        fetched by another name.
        """
        cls.__declare(
            Attribute(
                func,
                name=name,
                type=type,
                auto_convert=auto_convert,
                condition=condition,
                key=key,
            )
        )

    @classmethod
    def one(
        cls,
        name: str,
        resource: type[Resource] | str | ResourceBodyType | None = None,
        /,
        *,
        nesting: str | None = None,
        body: ResourceBodyType | None = None,
        key: str | None = None,
        source: str | Callable[[Any], Any] | None = None,
    ):
        """
        Declare an association with a single nested object.
        """
        cls.__declare(
            One(resource, name=name, nesting=nesting, body=body, key=key, source=source)
        )

    @classmethod
    def many(
        cls,
        name: str,
        resource: type[Resource] | str | ResourceBodyType | None = None,
        /,
        *,
        condition: FilterFuncType | None = None,
        nesting: str | None = None,
        body: ResourceBodyType | None = None,
        key: str | None = None,
        source: str | Callable[[Any], Any] | None = None,
    ):
        """
        Declare an association with a collection of nested objects.
        """
        cls.__declare(
            Many(
                resource,
                name=name,
                condition=condition,
                nesting=nesting,
                body=body,
                key=key,
                source=source,
            )
        )

    def to_dict(self, *, root_key: RootKeyType = None) -> JsonType:
        """
        Resolve object to a mapping, or a list of mappings if the object is a
        collection, wrapped under the root key if any.

        :param root_key: Root key taking precedence over this resource's config: \
        `False` to not wrap, `True` to infer, or the key itself
        """
        frame = ResolutionFrame(config=self.config)
        resolved = self._resolve(self.object, frame)

        if (key := self.__get_root_key(root_key)) is not None:
            return {key: resolved}
        return resolved

    def serialize(self, *, root_key: RootKeyType = None) -> str:
        """
        Resolve object and encode it as JSON text.
        """
        return self.config.encoder(self.to_dict(root_key=root_key))

    def _resolve(self, obj: Any, frame: ResolutionFrame) -> JsonType:
        """
        Resolve object or each element of collection.
        """
        if is_collection(obj):
            return [self._resolve_object(o, frame.recurse(i)) for i, o in enumerate(obj)]
        return self._resolve_object(obj, frame)

    def _resolve_object(self, obj: Any, frame: ResolutionFrame) -> JsonType:
        """
        Resolve a single object to a mapping, evaluating fields in declaration order.
        """
        cls = type(self)
        cls.build(config=frame.config)

        if obj is None:
            return None

        values: dict[KeyType, JsonType] = {}
        for field in cls.__fields.values():
            key = self.__get_key(field.output_name, frame.config)
            value = self.__resolve_field(obj, field, key, frame)
            if value is not SKIP:
                values[key] = value

        return values

    def __resolve_field(
        self, obj: Any, field: BaseField, key: KeyType, frame: ResolutionFrame
    ) -> JsonType | SkipSentinel:
        """
        Resolve field with error and nil policies applied.
        """
        field_frame = frame.recurse(field.output_name)

        if isinstance(field, Attribute) and not field.check_condition(self, obj):
            return SKIP

        try:
            value = field.resolve(self, obj, field_frame)

            if isinstance(field, Attribute):
                if not field.check_value_condition(self, obj, value):
                    return SKIP
                value = field.check_type(value, field_frame)
        except ResolutionError as e:
            # type check failure or error from nested resource, already located
            return self.__handle_error(e, e, obj, key, frame.config)
        except ResourceError:
            raise
        except Exception as e:
            error = AttributeEvaluationError(
                f"{type(e).__name__}: {e}",
                path=field_frame.path,
                resource_cls=type(self),
            )
            error.__cause__ = e
            return self.__handle_error(error, e, obj, key, frame.config)

        if value is None:
            return self.__handle_nil(obj, key, frame.config)

        return value

    def __handle_error(
        self,
        error: ResolutionError,
        exc: Exception,
        obj: Any,
        key: KeyType,
        config: Config,
    ) -> Any:
        """
        Apply error policy, returning the value to use or `SKIP`.
        """
        policy = self.__resource_config.on_error or config.on_error

        match policy:
            case "raise":
                raise error
            case "nullify":
                return None
            case "ignore":
                return SKIP
            case _:
                assert callable(policy)
                return policy(exc, obj, key, type(self))

    def __handle_nil(self, obj: Any, key: KeyType, config: Config) -> Any:
        policy = self.__resource_config.on_nil
        if policy is None:
            policy = config.on_nil
        if policy is None:
            return None
        return policy(obj, key) if callable(policy) else policy

    def __get_key(self, name: str, config: Config) -> KeyType:
        transformed = transform_key(
            name, self.__resource_config.transform_keys, config.inflector
        )
        key = config.regularize_key(transformed)
        assert key is not None
        return key

    def __get_root_key(self, root_key: RootKeyType) -> KeyType | None:
        """
        Get root key from the argument, falling back to this resource's config.

        A key passed as argument is used verbatim; configured and inferred keys are
        transformed if enabled.
        """
        resource_config = type(self).get_resource_config()
        collection = is_collection(self.object)

        if root_key is None:
            key = resource_config.root_key
            if collection and resource_config.root_key_for_collection is not None:
                key = resource_config.root_key_for_collection
        else:
            key = root_key

        if key is None or key is False:
            return None

        if key is True:
            key = self.__infer_root_key(collection)
            if key is None:
                return None
        elif root_key is not None:
            return self.config.regularize_key(key)

        if resource_config.transform_root_key:
            key = transform_key(
                key, resource_config.transform_keys, self.config.inflector
            )

        return self.config.regularize_key(key)

    def __infer_root_key(self, collection: bool) -> str | None:
        """
        Infer root key from the resource class name, or for an inline resource the
        object class name.

        Returns `None` for an inline resource given an empty collection, which has
        no class name to infer from.
        """
        cls = type(self)
        inflector = self.config.inflector
        underscore = require_method(inflector, "underscore")

        if cls.__anonymous:
            name = self.__get_object_class_name(collection)
            if name is None:
                logger.debug(
                    "No root key inferred for %s: empty collection", cls.__name__
                )
                return None
        else:
            name = require_method(inflector, "demodulize")(cls.__qualname__)
            for suffix in RESOURCE_SUFFIXES:
                if name.endswith(suffix) and name != suffix:
                    name = name.removesuffix(suffix)
                    break

        key = underscore(name)
        if collection:
            key = require_method(inflector, "pluralize")(key)
        return key

    def __get_object_class_name(self, collection: bool) -> str | None:
        if not collection:
            return type(self.object).__name__
        for element in self.object:
            return type(element).__name__
        return None

    @classmethod
    def __declare(cls, field: BaseField):
        cls.__check_not_built()
        if any(f.name == field.name for f in cls.__declared):
            raise SchemaConstructionError(
                f"Field '{field.name}' declared more than once on {cls.__name__}"
            )
        cls.__declared.append(field)

    @classmethod
    def __check_not_built(cls):
        if cls.__built:
            raise SchemaConstructionError(
                f"Resource {cls.__name__} is already built; fields can't be declared"
            )
