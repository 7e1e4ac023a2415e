"""
Inflectors which transform words for key casing and name inference.
"""

from __future__ import annotations

import re
from typing import Any, Protocol, runtime_checkable

import inflection

from .exceptions import ConfigurationError, InferenceError
from .typedefs import KeyTransformType

__all__ = [
    "InflectorProtocol",
    "DefaultInflector",
    "REQUIRED_METHODS",
    "INFERENCE_METHODS",
    "KEY_TRANSFORMS",
    "inflector_from",
    "validate_inflector",
    "require_method",
    "transform_key",
]

REQUIRED_METHODS = ("camelize", "camelize_lower", "dasherize", "classify")
"""
Methods an inflector must implement, checked upon assignment.
"""

INFERENCE_METHODS = ("underscore", "demodulize", "pluralize")
"""
Methods an inflector needs for root key inference, checked upon use.
"""


@runtime_checkable
class InflectorProtocol(Protocol):
    """
    Minimal interface of an inflector.
    """

    def camelize(self, word: str) -> str: ...

    def camelize_lower(self, word: str) -> str: ...

    def dasherize(self, word: str) -> str: ...

    def classify(self, word: str) -> str: ...


class DefaultInflector:
    """
    Inflector backed by the `inflection` library.
    """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def camelize(self, word: str) -> str:
        return inflection.camelize(word, uppercase_first_letter=True)

    def camelize_lower(self, word: str) -> str:
        return inflection.camelize(word, uppercase_first_letter=False)

    def dasherize(self, word: str) -> str:
        return inflection.dasherize(word)

    def underscore(self, word: str) -> str:
        return inflection.underscore(word)

    def pluralize(self, word: str) -> str:
        return inflection.pluralize(word)

    def singularize(self, word: str) -> str:
        return inflection.singularize(word)

    def demodulize(self, path: str) -> str:
        """
        Remove the module and enclosing class path, e.g. `"app.api.UserResource"` ->
        `"UserResource"`.
        """
        return re.split(r"\.|::", path)[-1]

    def classify(self, name: str) -> str:
        """
        Create a class name from a plural name, e.g. `"bank_accounts"` ->
        `"BankAccount"`.
        """
        return self.camelize(self.singularize(self.demodulize(name)))


def validate_inflector(inflector: Any) -> Any:
    """
    Ensure the inflector implements the minimal interface.

    :raises ConfigurationError: If any required method is missing
    """
    if not all(callable(getattr(inflector, m, None)) for m in REQUIRED_METHODS):
        raise ConfigurationError(
            "Given inflector, {} is not valid. It must implement {}.".format(
                repr(inflector), ", ".join(f"`{m}`" for m in REQUIRED_METHODS)
            )
        )
    return inflector


def inflector_from(name_or_inflector: str | Any | None) -> Any | None:
    """
    Get inflector by preset name, or validate the given custom inflector.

    Accepted presets are `"default"` and `"inflection"`.
    """
    match name_or_inflector:
        case None:
            return None
        case "default" | "inflection":
            return DefaultInflector()
        case str():
            raise ConfigurationError(
                f"Unknown inflector preset: {name_or_inflector}; must be one of: default, inflection"
            )
        case _:
            return validate_inflector(name_or_inflector)


def require_method(inflector: Any | None, method: str) -> Any:
    """
    Get method from inflector needed for a specific inference.

    :raises InferenceError: If there's no inflector or it lacks the method
    """
    if inflector is None:
        raise InferenceError(
            "Inference is disabled so the name cannot be inferred. Set inflector before use."
        )
    func = getattr(inflector, method, None)
    if not callable(func):
        raise InferenceError(
            f"Inflector {inflector!r} does not implement `{method}` required for inference"
        )
    return func


KEY_TRANSFORMS: dict[str, str | None] = {
    "camel": "camelize",
    "lower_camel": "camelize_lower",
    "dash": "dasherize",
    "snake": "underscore",
    "none": None,
}
"""
Inflector method applied for each key transform.
"""


def transform_key(
    key: str, transform: KeyTransformType | None, inflector: Any | None
) -> str:
    """
    Transform key casing with inflector.

    :raises ConfigurationError: If the transform is unknown or no inflector is set
    """
    if transform is None:
        return key

    if transform not in KEY_TRANSFORMS:
        raise ConfigurationError(f"Unknown transform type: {transform}")

    if (method := KEY_TRANSFORMS[transform]) is None:
        return key

    if inflector is None:
        raise ConfigurationError(
            "Inflector is None. Set inflector before transforming keys."
        )

    func = getattr(inflector, method, None)
    if not callable(func):
        raise ConfigurationError(
            f"Inflector {inflector!r} does not implement `{method}` required for transform {transform}"
        )
    return func(key)
