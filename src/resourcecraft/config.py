"""
Process-wide configuration consumed by resources.

Configuration is plain mutable state without synchronization: treat it as read-only
while resources are being resolved on other threads.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import Any

from .encoding import EncoderType, default_encoder, get_encoder, validate_encoder
from .exceptions import ConfigurationError
from .inflecting import inflector_from
from .typedefs import KeyCasingType, KeyType, OnErrorType, OnNilType, Symbol
from .types import (
    BUILTIN_TYPES,
    CheckFuncType,
    ConverterFuncType,
    TypeDescriptor,
    TypeRegistry,
)

__all__ = [
    "Config",
    "config",
]

logger = logging.getLogger(__name__)

ON_ERROR_POLICIES = ("raise", "nullify", "ignore")


class Config:
    """
    Encoder, inflector, key casing, type registry and default error/nil policies.

    A default instance is available as `resourcecraft.config`; resources use it
    unless another instance is passed.
    """

    __backend: str | None
    __encoder: EncoderType
    __inflector: Any | None
    __key_casing: KeyCasingType
    __on_error: OnErrorType
    __on_nil: OnNilType
    __types: TypeRegistry

    def __init__(self):
        self.reset()

    def __repr__(self) -> str:
        return "{}(backend={}, inflector={}, key_casing={})".format(
            type(self).__name__, self.__backend, self.__inflector, self.__key_casing
        )

    @property
    def backend(self) -> str | None:
        """
        Name of the encoder backend: `"json"`, `"orjson"`, `"ujson"`, or `"custom"` if
        an encoder was set directly.
        """
        return self.__backend

    @backend.setter
    def backend(self, backend: str | None):
        self.__encoder = get_encoder(backend)
        self.__backend = backend

    @property
    def encoder(self) -> EncoderType:
        """
        Function which encodes a resolved mapping into JSON text.
        """
        return self.__encoder

    @encoder.setter
    def encoder(self, encoder: EncoderType):
        self.__encoder = validate_encoder(encoder)
        self.__backend = "custom"

    @property
    def inflector(self) -> Any | None:
        """
        Inflector used for key transformation and name inference; inference is
        disabled when `None`.
        """
        return self.__inflector

    @inflector.setter
    def inflector(self, inflector: str | Any | None):
        self.__inflector = inflector_from(inflector)
        logger.debug("Set inflector: %s", self.__inflector)

    @property
    def inferring(self) -> bool:
        """
        Whether resource classes and root keys can be inferred.
        """
        return self.__inflector is not None

    @property
    def key_casing(self) -> KeyCasingType:
        return self.__key_casing

    @key_casing.setter
    def key_casing(self, key_casing: KeyCasingType):
        if key_casing not in ("stringify", "symbolize"):
            raise ConfigurationError(f"Invalid key casing: {key_casing}")
        self.__key_casing = key_casing

    def symbolize_keys(self):
        self.__key_casing = "symbolize"

    def stringify_keys(self):
        self.__key_casing = "stringify"

    def regularize_key(self, key: str | None) -> KeyType | None:
        """
        Convert key to `Symbol` or `str` based on key casing; returns `None` if key
        is `None`.
        """
        if key is None:
            return None
        return Symbol(key) if self.__key_casing == "symbolize" else str(key)

    @property
    def on_error(self) -> OnErrorType:
        """
        Default policy for accessors which raise, used by resources which don't set
        their own.
        """
        return self.__on_error

    @on_error.setter
    def on_error(self, on_error: OnErrorType):
        self.__on_error = validate_on_error(on_error)

    @property
    def on_nil(self) -> OnNilType:
        """
        Default policy for `None` values, used by resources which don't set their own.
        """
        return self.__on_nil

    @on_nil.setter
    def on_nil(self, on_nil: OnNilType):
        self.__on_nil = on_nil

    @property
    def types(self) -> TypeRegistry:
        return self.__types

    def register_type(
        self,
        name: Hashable,
        /,
        *,
        check: CheckFuncType | None = None,
        converter: ConverterFuncType | None = None,
        auto_convert: bool = False,
    ) -> TypeDescriptor:
        """
        Register a type, used for both builtin and custom types.
        """
        return self.__types.register(
            name, check=check, converter=converter, auto_convert=auto_convert
        )

    def find_type(self, name: Hashable, /) -> TypeDescriptor:
        """
        Find type by name.

        :raises UnsupportedType: If no type is registered under the name
        """
        return self.__types.find(name)

    def reset(self):
        """
        Restore defaults, useful for test cleanup.
        """
        self.__backend = None
        self.__encoder = default_encoder
        self.__inflector = None
        self.__key_casing = "stringify"
        self.__on_error = "raise"
        self.__on_nil = None
        self.__types = TypeRegistry(*BUILTIN_TYPES)


def validate_on_error(on_error: Any) -> OnErrorType:
    """
    Ensure the error policy is a known name or a callable.

    :raises ConfigurationError: If the policy is invalid
    """
    if callable(on_error) or on_error in ON_ERROR_POLICIES:
        return on_error
    raise ConfigurationError(
        f"Invalid on_error policy: {on_error!r}; must be one of {ON_ERROR_POLICIES} or a callable"
    )


config = Config()
"""
Default configuration instance.
"""
