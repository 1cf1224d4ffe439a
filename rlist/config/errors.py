from os import PathLike
from typing import Any, Sequence


class ConfigurationError(Exception):
    """Base class for errors caused by missing or unusable configuration.

    Subclasses keep their constructor arguments as attributes, in order, and
    render the message from them in ``__str__``."""

    def __repr__(self) -> str:
        args = ", ".join(repr(v) for v in vars(self).values())
        return f"{type(self).__name__}({args})"


class ReadingListNotConfiguredError(ConfigurationError):
    def __str__(self) -> str:
        return "no reading-list location defined"


class InvalidConfigSectionError(ConfigurationError):
    def __init__(self, section: str) -> None:
        super().__init__()
        self.section = section

    def __str__(self) -> str:
        return f"invalid config section: {self.section}"


def _dotted(key: str | Sequence[str] | None) -> str:
    if key is None or isinstance(key, str):
        return str(key)
    return ".".join(key)


class InvalidConfigKeyError(ConfigurationError):
    def __init__(self, key: str | Sequence[str]) -> None:
        super().__init__()
        self.key = key

    def __str__(self) -> str:
        return f"invalid config key: {_dotted(self.key)}"


class InvalidConfigValueTypeError(ConfigurationError, TypeError):
    def __init__(
        self,
        key: str | Sequence[str],
        val: object | None,
        expected: type | Sequence[type],
    ) -> None:
        super().__init__()
        self.key = key
        self.val = val
        self.expected = expected

    def __str__(self) -> str:
        return f"invalid value type for config key {_dotted(self.key)}: {type(self.val)}, expected {self.expected}"


class InvalidConfigValueError(ConfigurationError, ValueError):
    def __init__(
        self,
        key: str | Sequence[str] | None,
        val: object | None,
        reason: str | None = None,
    ) -> None:
        super().__init__()
        self.key = key
        self.val = val
        self.reason = reason

    def __str__(self) -> str:
        s = f"invalid config value for key {_dotted(self.key)}: {self.val!r}"
        return f"{s} ({self.reason})" if self.reason else s


class MalformedConfigFileError(ConfigurationError):
    def __init__(self, path: PathLike[Any] | str) -> None:
        super().__init__()
        self.path = path

    def __str__(self) -> str:
        return f"malformed config file: {self.path}"
