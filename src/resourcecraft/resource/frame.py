"""
Recursion state passed through resolution.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import PathType, format_path

if TYPE_CHECKING:
    from ..config import Config

__all__ = [
    "ResolutionFrame",
]


class ResolutionFrame:
    """
    Internal recursion state per frame.
    """

    config: Config
    """
    Configuration in effect for this resolution.
    """

    __path: PathType
    """
    Field path at this level in recursion.
    """

    def __init__(self, *, config: Config, path: PathType | None = None):
        self.config = config
        self.__path = path or ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={format_path(self.__path)})"

    @property
    def path(self) -> PathType:
        """
        The current path in the object tree.
        """
        return self.__path

    def recurse(self, segment: str | int, /) -> ResolutionFrame:
        """
        Create frame for a nested field or collection item.
        """
        return ResolutionFrame(config=self.config, path=(*self.__path, segment))
