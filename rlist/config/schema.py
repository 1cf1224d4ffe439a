import re
from typing import Final, Sequence

from .errors import (
    InvalidConfigKeyError,
    InvalidConfigSectionError,
    InvalidConfigValueError,
    InvalidConfigValueTypeError,
)


def parse_config_key(key: str | Sequence[str]) -> list[str]:
    if isinstance(key, str):
        return key.split(".")
    return list(key)


SECTION_READING_LIST: Final = "reading_list"
KEY_READING_LIST_FILE: Final = "file"
KEY_READING_LIST_TEMPLATE: Final = "template"
KEY_READING_LIST_TODO_MARKER: Final = "todo_marker"
KEY_READING_LIST_DONE_MARKER: Final = "done_marker"

SECTION_STRATEGIES: Final = "strategies"
KEY_STRATEGIES_TITLE: Final = "title"
KEY_STRATEGIES_IDENTIFIER: Final = "identifier"
KEY_STRATEGIES_LINK: Final = "link"
KEY_STRATEGIES_REMOVE_ITEM: Final = "remove_item"
KEY_STRATEGIES_ITEM_ACTIVE: Final = "item_active"

SECTION_DATABASE: Final = "database"
KEY_DATABASE_FILE: Final = "file"

READING_LIST_DISABLED: Final = "disabled"
"""Store location value that explicitly turns the reading list off."""

KNOWN_KEYS: Final[dict[str, tuple[str, ...]]] = {
    SECTION_READING_LIST: (
        KEY_READING_LIST_FILE,
        KEY_READING_LIST_TEMPLATE,
        KEY_READING_LIST_TODO_MARKER,
        KEY_READING_LIST_DONE_MARKER,
    ),
    SECTION_STRATEGIES: (
        KEY_STRATEGIES_TITLE,
        KEY_STRATEGIES_IDENTIFIER,
        KEY_STRATEGIES_LINK,
        KEY_STRATEGIES_REMOVE_ITEM,
        KEY_STRATEGIES_ITEM_ACTIVE,
    ),
    SECTION_DATABASE: (KEY_DATABASE_FILE,),
}

# either a built-in strategy name, or a "module:attribute" reference
STRATEGY_REF_RE: Final = re.compile(
    r"^(?:[a-z][a-z0-9-]*|[A-Za-z_][\w.]*:[A-Za-z_][\w.]*)$"
)
MARKER_RE: Final = re.compile(r"^\S+$")


def validate_section(section: str) -> None:
    if section not in KNOWN_KEYS:
        raise InvalidConfigSectionError(section)


def get_expected_type_for_config_key(key: str | Sequence[str]) -> type:
    parsed_key = parse_config_key(key)
    if len(parsed_key) != 2:
        # for now there's no nested config option
        raise InvalidConfigKeyError(key)

    section, sel = parsed_key
    if sel not in KNOWN_KEYS.get(section, ()):
        raise InvalidConfigKeyError(key)

    # every option currently takes a string
    return str


def ensure_valid_config_kv(
    key: str | Sequence[str],
    check_val: bool = False,
    val: object | None = None,
) -> None:
    parsed_key = parse_config_key(key)
    expected_type = get_expected_type_for_config_key(parsed_key)
    if not check_val:
        return

    if not isinstance(val, expected_type):
        raise InvalidConfigValueTypeError(key, val, expected_type)

    section, sel = parsed_key
    if section == SECTION_READING_LIST:
        return _extra_validate_section_reading_list_kv(key, sel, val)
    elif section == SECTION_STRATEGIES:
        return _extra_validate_section_strategies_kv(key, val)


def _extra_validate_section_reading_list_kv(
    key: str | Sequence[str],
    sel: str,
    val: object | None,
) -> None:
    # value type is already ensured earlier
    assert isinstance(val, str)

    if sel in (KEY_READING_LIST_TODO_MARKER, KEY_READING_LIST_DONE_MARKER):
        if MARKER_RE.match(val) is None:
            raise InvalidConfigValueError(
                key, val, "markers must be a single non-empty word"
            )
    elif sel == KEY_READING_LIST_TEMPLATE:
        # entries rendered without their identifier could never be found again
        if "%K" not in val:
            raise InvalidConfigValueError(
                key, val, "template must contain the %K placeholder"
            )
    elif sel == KEY_READING_LIST_FILE:
        if not val:
            raise InvalidConfigValueError(key, val, "path must not be empty")


def _extra_validate_section_strategies_kv(
    key: str | Sequence[str],
    val: object | None,
) -> None:
    assert isinstance(val, str)
    if STRATEGY_REF_RE.match(val) is None:
        raise InvalidConfigValueError(
            key,
            val,
            "expected a built-in strategy name or a 'module:attribute' reference",
        )


def encode_value(v: object) -> str:
    """Encodes the given config value into a string representation suitable for
    display."""

    if isinstance(v, str):
        return v
    raise NotImplementedError(f"invalid type for config value: {type(v)}")


def decode_value(key: str | Sequence[str], val: str) -> object:
    """Decodes the given string representation of a config value into a Python
    value, directed by type information implied by the config key."""

    expected_type = get_expected_type_for_config_key(key)
    if expected_type is str:
        # allow typing "\n" on the command line for multi-line templates
        if parse_config_key(key) == [SECTION_READING_LIST, KEY_READING_LIST_TEMPLATE]:
            return val.replace("\\n", "\n")
        return val
    raise NotImplementedError(f"unhandled type for config value: {expected_type}")
