from functools import cached_property
import os
import pathlib
import sys
from typing import Any, Final, Iterable, Sequence, TypedDict, TYPE_CHECKING

if TYPE_CHECKING:
    from typing_extensions import NotRequired, Self

    from ..bibdb import RecordDatabase
    from ..log import RListLogger
    from ..readlist.hooks import HookRegistry
    from ..readlist.reading_list import ReadingList
    from ..readlist.store import StoreHandle
    from ..readlist.strategies import Strategies
    from ..utils.global_mode import ProvidesGlobalMode
    from ..utils.xdg_basedir import XDGPathEntry

from . import errors
from . import schema


if sys.platform == "linux":
    PRESET_GLOBAL_CONFIG_LOCATIONS: Final[list[str]] = [
        "/usr/share/rlist/config.toml",
        "/usr/local/share/rlist/config.toml",
    ]
else:
    PRESET_GLOBAL_CONFIG_LOCATIONS: Final[list[str]] = []

DEFAULT_APP_NAME: Final = "rlist"
CONFIG_FILE_NAME: Final = "config.toml"
DEFAULT_TEMPLATE: Final = "* %M %T\n:PROPERTIES:\n%K\n:END:\n%F\n"
DEFAULT_TODO_MARKER: Final = "TODO"
DEFAULT_DONE_MARKER: Final = "DONE"

DEFAULT_TITLE_STRATEGY: Final = "title"
DEFAULT_IDENTIFIER_STRATEGY: Final = "org-custom-id"
DEFAULT_LINK_STRATEGY: Final = "org-file-link"
DEFAULT_REMOVE_ITEM_STRATEGY: Final = "mark-done"
DEFAULT_ITEM_ACTIVE_STRATEGY: Final = "todo-marker"


class GlobalConfigReadingListType(TypedDict):
    file: "NotRequired[str]"
    template: "NotRequired[str]"
    todo_marker: "NotRequired[str]"
    done_marker: "NotRequired[str]"


class GlobalConfigStrategiesType(TypedDict):
    title: "NotRequired[str]"
    identifier: "NotRequired[str]"
    link: "NotRequired[str]"
    remove_item: "NotRequired[str]"
    item_active: "NotRequired[str]"


class GlobalConfigDatabaseType(TypedDict):
    file: "NotRequired[str]"


class GlobalConfigRootType(TypedDict):
    reading_list: "NotRequired[GlobalConfigReadingListType]"
    strategies: "NotRequired[GlobalConfigStrategiesType]"
    database: "NotRequired[GlobalConfigDatabaseType]"


_ATTR_NAMES_BY_KEY: Final[dict[tuple[str, str], str]] = {
    (schema.SECTION_READING_LIST, schema.KEY_READING_LIST_FILE): "reading_list_file",
    (
        schema.SECTION_READING_LIST,
        schema.KEY_READING_LIST_TEMPLATE,
    ): "reading_list_template",
    (schema.SECTION_READING_LIST, schema.KEY_READING_LIST_TODO_MARKER): "todo_marker",
    (schema.SECTION_READING_LIST, schema.KEY_READING_LIST_DONE_MARKER): "done_marker",
    (schema.SECTION_STRATEGIES, schema.KEY_STRATEGIES_TITLE): "title_strategy",
    (
        schema.SECTION_STRATEGIES,
        schema.KEY_STRATEGIES_IDENTIFIER,
    ): "identifier_strategy",
    (schema.SECTION_STRATEGIES, schema.KEY_STRATEGIES_LINK): "link_strategy",
    (
        schema.SECTION_STRATEGIES,
        schema.KEY_STRATEGIES_REMOVE_ITEM,
    ): "remove_item_strategy",
    (
        schema.SECTION_STRATEGIES,
        schema.KEY_STRATEGIES_ITEM_ACTIVE,
    ): "item_active_strategy",
    (schema.SECTION_DATABASE, schema.KEY_DATABASE_FILE): "database_file",
}


# each marker must differ from the other one
_MARKER_COUNTERPARTS: Final = {
    "todo_marker": "done_marker",
    "done_marker": "todo_marker",
}

class GlobalConfig:
    def __init__(self, gm: "ProvidesGlobalMode", logger: "RListLogger") -> None:
        self._gm = gm
        self.logger = logger

        # all defaults
        self.reading_list_file: str | None = None
        self.reading_list_template = DEFAULT_TEMPLATE
        self.todo_marker = DEFAULT_TODO_MARKER
        self.done_marker = DEFAULT_DONE_MARKER

        self.title_strategy = DEFAULT_TITLE_STRATEGY
        self.identifier_strategy = DEFAULT_IDENTIFIER_STRATEGY
        self.link_strategy = DEFAULT_LINK_STRATEGY
        self.remove_item_strategy = DEFAULT_REMOVE_ITEM_STRATEGY
        self.item_active_strategy = DEFAULT_ITEM_ACTIVE_STRATEGY

        self.database_file: str | None = None

        # the store handle opened by open_store(), reused until closed
        self.live_store: "StoreHandle | None" = None

    def _apply_config(self, config_data: GlobalConfigRootType) -> None:
        for section, keys in schema.KNOWN_KEYS.items():
            sect_cfg = config_data.get(section)
            if not sect_cfg:
                continue
            if not isinstance(sect_cfg, dict):
                self.logger.W(
                    f"config section [yellow]{section}[/] is not a table; ignoring"
                )
                continue

            for leaf in keys:
                val = sect_cfg.get(leaf)
                if val is None:
                    continue
                try:
                    self.set_by_key((section, leaf), str(val))
                except errors.ConfigurationError as e:
                    self.logger.W(f"{e}; ignoring")

    def get_by_key(self, key: str | Sequence[str]) -> object:
        attr_name = self._get_attr_name_by_key(key)
        if attr_name is None:
            raise errors.InvalidConfigKeyError(key)
        return getattr(self, attr_name)

    def set_by_key(self, key: str | Sequence[str], value: object) -> None:
        attr_name = self._get_attr_name_by_key(key)
        if attr_name is None:
            raise errors.InvalidConfigKeyError(key)
        schema.ensure_valid_config_kv(key, True, value)
        self._ensure_distinct_markers(key, attr_name, value)
        setattr(self, attr_name, value)
        # these are derived from the settings lazily; drop stale ones
        for derived in ("database", "strategies"):
            self.__dict__.pop(derived, None)

    def _ensure_distinct_markers(
        self,
        key: str | Sequence[str],
        attr_name: str,
        value: object,
    ) -> None:
        other = _MARKER_COUNTERPARTS.get(attr_name)
        if other is not None and value == getattr(self, other):
            raise errors.InvalidConfigValueError(
                key, value, "the todo and done markers must differ"
            )

    @classmethod
    def _get_attr_name_by_key(cls, key: str | Sequence[str]) -> str | None:
        parsed_key = schema.parse_config_key(key)
        if len(parsed_key) != 2:
            return None
        section, leaf = parsed_key
        return _ATTR_NAMES_BY_KEY.get((section, leaf))

    @property
    def argv0(self) -> str:
        return self._gm.argv0

    @property
    def is_debug(self) -> bool:
        return self._gm.is_debug

    @property
    def is_porcelain(self) -> bool:
        return self._gm.is_porcelain

    @property
    def is_cli_autocomplete(self) -> bool:
        return self._gm.is_cli_autocomplete

    @property
    def is_reading_list_disabled(self) -> bool:
        return self.reading_list_file == schema.READING_LIST_DISABLED

    def get_reading_list_path(self) -> pathlib.Path:
        """Returns the configured store location, with ``~`` expanded.

        Raises ``ReadingListNotConfiguredError`` if none is configured."""

        p = self.reading_list_file
        if not p or p == schema.READING_LIST_DISABLED:
            raise errors.ReadingListNotConfiguredError()
        return pathlib.Path(p).expanduser()

    def get_database_path(self) -> pathlib.Path | None:
        if not self.database_file:
            return None
        return pathlib.Path(self.database_file).expanduser()

    @cached_property
    def database(self) -> "RecordDatabase":
        from ..bibdb import DictRecordDatabase, TomlRecordDatabase

        p = self.get_database_path()
        if p is None:
            return DictRecordDatabase({})
        return TomlRecordDatabase.load(p)

    @cached_property
    def strategies(self) -> "Strategies":
        from ..readlist.strategies import Strategies

        return Strategies.from_config(self)

    @cached_property
    def hooks(self) -> "HookRegistry":
        from ..readlist.hooks import HookRegistry

        return HookRegistry()

    @property
    def reading_list_store(self) -> "StoreHandle":
        """The live store handle, opened on first access and reused until
        closed."""

        from ..readlist.store import open_store

        return open_store(self)

    @cached_property
    def reading_list(self) -> "ReadingList":
        from ..readlist.reading_list import ReadingList

        return ReadingList(self)

    def iter_config_files(self) -> "Iterable[XDGPathEntry]":
        """Yields every place a config file may live, from lowest to highest
        precedence, so that existing ones can simply be applied in turn."""

        from ..utils.xdg_basedir import XDGPathEntry, app_config_search_path

        for path in PRESET_GLOBAL_CONFIG_LOCATIONS:
            yield XDGPathEntry(pathlib.Path(path), True)
        for d in app_config_search_path(DEFAULT_APP_NAME):
            yield XDGPathEntry(d.path / CONFIG_FILE_NAME, d.is_global)

    @property
    def local_user_config_file(self) -> pathlib.Path:
        from ..utils.xdg_basedir import config_home

        return config_home() / DEFAULT_APP_NAME / CONFIG_FILE_NAME

    def _try_apply_config_file(self, path: "os.PathLike[Any]") -> bool:
        from tomlkit.exceptions import ParseError

        from ..utils.toml import load_toml_file

        try:
            data: Any = load_toml_file(path)
        except ParseError as e:
            raise errors.MalformedConfigFileError(path) from e
        if data is None:
            return False

        self.logger.D(f"applying config from {path}: {data}")
        self._apply_config(data)
        return True

    @classmethod
    def load_from_config(
        cls,
        gm: "ProvidesGlobalMode",
        logger: "RListLogger",
    ) -> "Self":
        obj = cls(gm, logger)

        applied = [
            e.path for e in obj.iter_config_files() if obj._try_apply_config_file(e.path)
        ]
        if not applied:
            logger.D("no config file found, using defaults")

        # the environment beats every config file
        if p := gm.reading_list_file_override:
            logger.D(f"reading-list location overridden by environment: {p}")
            obj.reading_list_file = p

        return obj
