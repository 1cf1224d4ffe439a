"""Sources of bibliographic records.

The reading list only ever needs two things from a record source: the fields
of a record given its key, and the set of known keys (for completion and
listing). Anything providing those satisfies ``RecordDatabase``.

A TOML record database looks like this::

    [smith2020]
    author = "Smith, Jane"
    title = "{On} Reading Lists"
    year = "2020"
    file = "papers/smith2020.pdf"
    doi = "10.1000/xyz123"
"""

import os
import pathlib
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Protocol

from ..config.errors import ConfigurationError
from ..utils.toml import load_toml_file, unwrap_str_table


Record = Mapping[str, str]


class MalformedRecordDatabaseError(ConfigurationError):
    def __init__(self, path: "os.PathLike[Any] | str") -> None:
        super().__init__()
        self.path = path

    def __str__(self) -> str:
        return f"malformed record database: {self.path}"


class RecordDatabase(Protocol):
    """A protocol that defines methods for providing bibliographic records."""

    @property
    def name(self) -> str:
        """A human-readable name of this database, e.g. its file path."""
        ...

    def get(self, key: str) -> Record | None:
        """Returns a read-only view of the record's fields, or None if the
        key is unknown."""
        ...

    def keys(self) -> Iterable[str]: ...


class DictRecordDatabase:
    def __init__(
        self,
        records: Mapping[str, Mapping[str, str]],
        name: str = "<memory>",
    ) -> None:
        self._records = {k: dict(v) for k, v in records.items()}
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def get(self, key: str) -> Record | None:
        r = self._records.get(key)
        return None if r is None else MappingProxyType(r)

    def keys(self) -> Iterable[str]:
        return self._records.keys()

    def __contains__(self, key: str) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)


class TomlRecordDatabase(DictRecordDatabase):
    @classmethod
    def load(cls, path: "os.PathLike[Any] | str") -> "TomlRecordDatabase":
        """Loads records from the TOML file at ``path``. A missing file yields
        an empty database; tables that are not records are skipped."""

        from tomlkit.exceptions import ParseError

        try:
            doc = load_toml_file(path)
        except ParseError as e:
            raise MalformedRecordDatabaseError(path) from e

        records: dict[str, dict[str, str]] = {}
        if doc is not None:
            for key, tbl in doc.items():
                if (fields := unwrap_str_table(tbl)) is not None:
                    records[str(key)] = fields

        return cls(records, str(pathlib.Path(path)))
