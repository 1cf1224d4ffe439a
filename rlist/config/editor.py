from contextlib import AbstractContextManager
import os
import pathlib
from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType
    from typing_extensions import Self

import tomlkit
from tomlkit.exceptions import ParseError
from tomlkit.items import Table

from .errors import MalformedConfigFileError
from .schema import ensure_valid_config_kv, parse_config_key, validate_section

if TYPE_CHECKING:
    from . import GlobalConfig


def _load_document(path: pathlib.Path) -> tomlkit.TOMLDocument:
    try:
        return tomlkit.parse(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return tomlkit.document()
    except ParseError as e:
        raise MalformedConfigFileError(path) from e


class ConfigEditor(AbstractContextManager["ConfigEditor"]):
    """Edits a TOML config file in place, preserving its comments and layout.

    Only the state captured by the last ``stage()`` call is written, and only
    when the ``with`` block exits without an exception."""

    def __init__(self, path: pathlib.Path) -> None:
        self.path = path
        self._doc = _load_document(path)
        self._staged: str | None = None

    @classmethod
    def work_on_user_local_config(cls, gc: "GlobalConfig") -> "Self":
        return cls(gc.local_user_config_file)

    def __enter__(self) -> "Self":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: "TracebackType | None",
    ) -> bool | None:
        if exc_type is None and self._staged is not None:
            self._write(self._staged)
        return None

    def _write(self, content: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(f".{self.path.name}.tmp")
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, self.path)

    def stage(self) -> None:
        self._staged = tomlkit.dumps(self._doc)

    def _table(self, section: str) -> Table | None:
        tbl = self._doc.get(section)
        if tbl is None:
            return None
        if not isinstance(tbl, Table):
            raise MalformedConfigFileError(self.path)
        return tbl

    def set_value(self, key: str | Sequence[str], val: object | None) -> None:
        parsed_key = parse_config_key(key)
        ensure_valid_config_kv(parsed_key, check_val=True, val=val)

        section, leaf = parsed_key
        if (tbl := self._table(section)) is not None:
            tbl[leaf] = val
            return

        new_section = tomlkit.table()
        new_section.append(leaf, val)
        self._doc.append(section, new_section)

    def unset_value(self, key: str | Sequence[str]) -> None:
        parsed_key = parse_config_key(key)
        ensure_valid_config_kv(parsed_key)

        section, leaf = parsed_key
        if (tbl := self._table(section)) is not None and leaf in tbl:
            del tbl[leaf]

    def remove_section(self, section: str) -> None:
        validate_section(section)
        if section in self._doc:
            del self._doc[section]
