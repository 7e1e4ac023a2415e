"""
Test encoder backends.
"""

import json
import logging
import sys

from pytest import LogCaptureFixture, MonkeyPatch, importorskip, raises

from resourcecraft.encoding import default_encoder, get_encoder, validate_encoder
from resourcecraft.exceptions import ConfigurationError, UnsupportedBackend
from resourcecraft.typedefs import Symbol


def test_default_encoder():
    """
    Test compact output which keeps non-ASCII characters.
    """
    assert default_encoder({"a": 1, "b": [True, None]}) == '{"a":1,"b":[true,null]}'
    assert default_encoder({"name": "José"}) == '{"name":"José"}'


def test_get_encoder():
    """
    Test selecting encoder by backend name.
    """
    assert get_encoder(None) is default_encoder
    assert get_encoder("default") is default_encoder
    assert get_encoder("json") is default_encoder

    with raises(UnsupportedBackend):
        get_encoder("yaml")

    with raises(ConfigurationError):
        get_encoder("yaml")


def test_orjson():
    """
    Test orjson backend.
    """
    importorskip("orjson")

    encoder = get_encoder("orjson")
    assert encoder is not default_encoder
    assert encoder({"a": [1, 2], "b": "José"}) == '{"a":[1,2],"b":"José"}'


def test_ujson():
    """
    Test ujson backend.
    """
    importorskip("ujson")

    encoder = get_encoder("ujson")
    assert encoder is not default_encoder
    assert json.loads(encoder({"a": [1, 2], "url": "a/b"})) == {
        "a": [1, 2],
        "url": "a/b",
    }


def test_missing_backend(monkeypatch: MonkeyPatch, caplog: LogCaptureFixture):
    """
    Test falling back to default encoder with a warning if the backend's library is
    not installed.
    """
    monkeypatch.setitem(sys.modules, "orjson", None)

    with caplog.at_level(logging.WARNING, logger="resourcecraft.encoding"):
        encoder = get_encoder("orjson")

    assert encoder is default_encoder
    assert "orjson" in caplog.text


def test_symbol_keys():
    """
    Test backends encode symbolized keys like plain strings.
    """
    obj = {Symbol("user"): {Symbol("id"): 1}}

    assert default_encoder(obj) == '{"user":{"id":1}}'

    importorskip("orjson")
    assert get_encoder("orjson")(obj) == '{"user":{"id":1}}'


def test_validate_encoder():
    """
    Test encoders must accept exactly one positional argument.
    """

    def encode(obj):
        return str(obj)

    def encode_with_options(obj, *, indent=None):
        return str(obj)

    assert validate_encoder(encode) is encode
    assert validate_encoder(encode_with_options) is encode_with_options
    assert validate_encoder(json.dumps) is json.dumps

    with raises(ConfigurationError):
        validate_encoder("json")

    with raises(ConfigurationError):
        validate_encoder(lambda: "")

    with raises(ConfigurationError):
        validate_encoder(lambda obj, other: "")
