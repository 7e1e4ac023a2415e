"""
Declarative resources which resolve objects to JSON-serializable mappings.
"""

from .associations import Association, Many, One
from .base import Resource, ResourceConfig
from .fields import Attribute, BaseField, attribute
from .frame import ResolutionFrame

__all__ = [
    "Resource",
    "ResourceConfig",
    "BaseField",
    "Attribute",
    "attribute",
    "Association",
    "One",
    "Many",
    "ResolutionFrame",
]
