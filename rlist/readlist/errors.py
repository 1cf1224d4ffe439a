from os import PathLike
from typing import Any

from ..config.errors import ConfigurationError, ReadingListNotConfiguredError

__all__ = [
    "ConfigurationError",
    "PluginError",
    "ReadingListNotAccessibleError",
    "ReadingListNotConfiguredError",
]


class ReadingListNotAccessibleError(PermissionError):
    def __init__(self, path: PathLike[Any] | str) -> None:
        super().__init__()
        self.path = path

    def __str__(self) -> str:
        s = f"reading-list location not accessible: {self.path}"
        if isinstance(self.__cause__, OSError) and self.__cause__.strerror:
            return f"{s} ({self.__cause__.strerror})"
        return s

    def __repr__(self) -> str:
        return f"ReadingListNotAccessibleError({self.path!r})"


class PluginError(Exception):
    """A pluggable strategy or hook could not be resolved, or failed."""

    def __init__(self, kind: str, name: str, reason: str | None = None) -> None:
        super().__init__()
        self.kind = kind
        self.name = name
        self.reason = reason

    def __str__(self) -> str:
        s = f"{self.kind} '{self.name}' failed"
        if self.reason:
            return f"{s}: {self.reason}"
        if self.__cause__ is not None:
            return f"{s}: {self.__cause__!r}"
        return s

    def __repr__(self) -> str:
        return f"PluginError({self.kind!r}, {self.name!r}, {self.reason!r})"
