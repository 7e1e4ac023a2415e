"""
Shared fixtures.
"""

from collections.abc import Generator

from pytest import fixture

from resourcecraft import config


@fixture(autouse=True)
def reset_config() -> Generator[None, None, None]:
    """
    Restore default configuration around each test.
    """
    config.reset()
    yield
    config.reset()
