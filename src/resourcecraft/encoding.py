"""
JSON encoder backends which turn a resolved mapping into text.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Callable
from typing import Any

from .exceptions import ConfigurationError, UnsupportedBackend

__all__ = [
    "EncoderType",
    "BACKENDS",
    "default_encoder",
    "get_encoder",
    "validate_encoder",
]

logger = logging.getLogger(__name__)

type EncoderType = Callable[[Any], str]
"""
Function accepting a resolved mapping and returning JSON text.
"""


def default_encoder(obj: Any) -> str:
    """
    Baseline encoder using the standard library, producing compact UTF-8 output.
    """
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def _try_orjson() -> EncoderType:
    try:
        import orjson
    except ImportError:
        logger.warning(
            "`orjson` is not installed, falling back to default JSON encoder"
        )
        return default_encoder

    def encode(obj: Any) -> str:
        # symbolized keys are str subclasses, rejected without this option
        return orjson.dumps(obj, option=orjson.OPT_NON_STR_KEYS).decode("utf-8")

    return encode


def _try_ujson() -> EncoderType:
    try:
        import ujson
    except ImportError:
        logger.warning("`ujson` is not installed, falling back to default JSON encoder")
        return default_encoder

    def encode(obj: Any) -> str:
        return ujson.dumps(obj, ensure_ascii=False, escape_forward_slashes=False)

    return encode


BACKENDS: dict[str | None, Callable[[], EncoderType]] = {
    None: lambda: default_encoder,
    "default": lambda: default_encoder,
    "json": lambda: default_encoder,
    "orjson": _try_orjson,
    "ujson": _try_ujson,
}
"""
Factories of encoders by backend name.
"""


def get_encoder(backend: str | None) -> EncoderType:
    """
    Get encoder for the named backend, falling back to the default encoder with a
    warning if the backend's library is not installed.

    :raises UnsupportedBackend: If the backend name is not known
    """
    if (factory := BACKENDS.get(backend)) is None:
        raise UnsupportedBackend(
            f"Unsupported backend, {backend}; must be one of: {', '.join(str(b) for b in BACKENDS)}"
        )
    encoder = factory()
    logger.debug("Selected encoder %s for backend %s", encoder, backend)
    return encoder


def validate_encoder(encoder: Any) -> EncoderType:
    """
    Ensure the encoder is a callable accepting exactly one positional argument.

    :raises ConfigurationError: If the encoder has the wrong shape
    """
    if not callable(encoder):
        raise ConfigurationError(
            f"Encoder must be a callable accepting one argument, got {encoder!r}"
        )

    try:
        sig = inspect.signature(encoder)
    except (TypeError, ValueError):
        # builtins without signature metadata: accept as-is
        return encoder

    positional = [
        p
        for p in sig.parameters.values()
        if p.kind
        in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    required = [
        p
        for p in sig.parameters.values()
        if p.default is inspect.Parameter.empty
        and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]
    if len(positional) != 1 or len(required) > 1:
        raise ConfigurationError(
            f"Encoder must be a callable accepting one argument, got {encoder!r} with signature {sig}"
        )

    return encoder
