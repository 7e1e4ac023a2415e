"""
Serialize objects to JSON according to declarative resources.
"""

from .config import Config, config
from .exceptions import (
    AttributeEvaluationError,
    ConfigurationError,
    InferenceError,
    ResolutionError,
    ResourceError,
    SchemaConstructionError,
    TypeCheckFailure,
    UnsupportedBackend,
    UnsupportedType,
)
from .inferring import infer_resource_class, register_resource
from .resource import (
    Attribute,
    Many,
    One,
    Resource,
    ResourceConfig,
    attribute,
)
from .serializing import hashify, resource_class, serialize, to_dict
from .typedefs import SKIP, Symbol
from .types import TypeDescriptor, TypeRegistry

__all__ = [
    "Config",
    "config",
    "Resource",
    "ResourceConfig",
    "Attribute",
    "attribute",
    "One",
    "Many",
    "serialize",
    "to_dict",
    "hashify",
    "resource_class",
    "infer_resource_class",
    "register_resource",
    "TypeDescriptor",
    "TypeRegistry",
    "Symbol",
    "SKIP",
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
