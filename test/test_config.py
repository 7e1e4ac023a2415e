"""
Test global configuration.
"""

from pytest import raises

from resourcecraft import config
from resourcecraft.config import Config
from resourcecraft.encoding import default_encoder
from resourcecraft.exceptions import (
    ConfigurationError,
    UnsupportedBackend,
    UnsupportedType,
)
from resourcecraft.inflecting import DefaultInflector
from resourcecraft.typedefs import Symbol


def test_defaults():
    assert config.backend is None
    assert config.encoder is default_encoder
    assert config.inflector is None
    assert not config.inferring
    assert config.key_casing == "stringify"
    assert config.on_error == "raise"
    assert config.on_nil is None
    assert "String" in config.types


def test_backend():
    """
    Test setting backend and rejecting unknown ones.
    """
    config.backend = "json"
    assert config.backend == "json"
    assert config.encoder is default_encoder

    with raises(UnsupportedBackend):
        config.backend = "msgpack"

    # unchanged after failure
    assert config.backend == "json"


def test_encoder():
    """
    Test setting a custom encoder.
    """

    def encode(obj):
        return "encoded"

    config.encoder = encode
    assert config.encoder is encode
    assert config.backend == "custom"

    with raises(ConfigurationError):
        config.encoder = lambda obj, indent: ""  # type: ignore

    assert config.encoder is encode


def test_inflector():
    config.inflector = "default"
    assert isinstance(config.inflector, DefaultInflector)
    assert config.inferring

    config.inflector = None
    assert not config.inferring

    with raises(ConfigurationError):
        config.inflector = "unknown"


def test_key_casing():
    """
    Test symbolized keys compare equal to plain strings.
    """
    assert type(config.regularize_key("name")) is str

    config.symbolize_keys()
    assert config.key_casing == "symbolize"

    key = config.regularize_key("name")
    assert isinstance(key, Symbol)
    assert key == "name"
    assert {key: 1}["name"] == 1
    assert repr(key) == ":name"

    config.stringify_keys()
    assert type(config.regularize_key("name")) is str
    assert config.regularize_key(None) is None

    config.key_casing = "symbolize"
    assert config.key_casing == "symbolize"

    with raises(ConfigurationError):
        config.key_casing = "upcase"  # type: ignore


def test_policies():
    config.on_error = "ignore"
    assert config.on_error == "ignore"

    def handler(exc, obj, key, resource_cls):
        return None

    config.on_error = handler
    assert config.on_error is handler

    with raises(ConfigurationError):
        config.on_error = "explode"  # type: ignore

    config.on_nil = ""
    assert config.on_nil == ""


def test_types():
    """
    Test registering custom types and resetting them.
    """
    email = config.register_type(
        "Email", check=lambda v: isinstance(v, str) and "@" in v
    )
    assert config.find_type("Email") is email

    with raises(UnsupportedType):
        config.find_type("Money")

    config.reset()

    with raises(UnsupportedType):
        config.find_type("Email")


def test_reset():
    config.backend = "json"
    config.inflector = "default"
    config.symbolize_keys()
    config.on_error = "nullify"
    config.on_nil = 0

    config.reset()

    assert config.backend is None
    assert config.inflector is None
    assert config.key_casing == "stringify"
    assert config.on_error == "raise"
    assert config.on_nil is None


def test_instances():
    """
    Test separate instances don't share state.
    """
    other = Config()
    other.inflector = "default"
    other.register_type("Email", check=lambda v: True)

    assert config.inflector is None
    assert "Email" not in config.types
