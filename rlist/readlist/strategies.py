"""Pluggable pieces of reading-list behavior.

Five strategies shape how entries look and how they are retired:

========== ================================ =================================
strategy   signature                        built-ins
========== ================================ =================================
title      ``(key, db) -> str``             ``title``, ``author-year-title``
identifier ``(key) -> str``                 ``org-custom-id``, ``plain``
link       ``(key, db) -> str``             ``org-file-link``, ``none``
remove     ``(cursor) -> None``             ``mark-done``, ``delete``
is-active  ``(cursor) -> bool``             ``todo-marker``
========== ================================ =================================

Each may be configured as a built-in name, or as ``module:attribute`` naming
any importable callable of the right signature.
"""

from dataclasses import dataclass
import functools
import importlib
import os
import re
from typing import Callable, Final, Mapping, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from ..bibdb import RecordDatabase
    from ..config import GlobalConfig
    from .store import StoreHandle

from .errors import PluginError


@dataclass
class ItemCursor:
    """Position inside a located entry, handed to remove and is-active
    strategies. ``pos`` is the offset right after the entry's identifier."""

    store: "StoreHandle"
    pos: int
    todo_marker: str
    done_marker: str
    start: int = 0
    """Earliest offset the entry may begin at: the end of the previous
    entry's identifier, or 0 for the first entry."""
    has_heading: bool = True
    """Whether entries open with their own heading line."""


TitleFn = Callable[[str, "RecordDatabase"], str]
IdentifierFn = Callable[[str], str]
LinkFn = Callable[[str, "RecordDatabase"], str]
RemoveItemFn = Callable[[ItemCursor], None]
ItemActiveFn = Callable[[ItemCursor], bool]

KIND_TITLE: Final = "title strategy"
KIND_IDENTIFIER: Final = "identifier strategy"
KIND_LINK: Final = "link strategy"
KIND_REMOVE_ITEM: Final = "remove-item strategy"
KIND_ITEM_ACTIVE: Final = "item-active strategy"


# --- entry geometry ---------------------------------------------------------

HEADING_RE: Final = re.compile(r"^(\*+)[ \t]+(\S*)", re.MULTILINE)


def find_heading(text: str, pos: int, start: int = 0) -> re.Match[str] | None:
    """Returns the last heading line starting within ``[start, pos)``."""

    last = None
    for m in HEADING_RE.finditer(text, start, pos):
        last = m
    return last


def entry_heading(cursor: ItemCursor) -> re.Match[str] | None:
    """Returns the heading line opening the entry at ``cursor``, if entries
    have one and it lies after the previous entry."""

    if not cursor.has_heading:
        return None
    return find_heading(cursor.store.text, cursor.pos, cursor.start)


def find_entry_end(text: str, pos: int) -> int:
    """Returns the offset of the first heading line after ``pos``, or the end
    of ``text``."""

    m = HEADING_RE.search(text, pos)
    return len(text) if m is None else m.start()


def find_marker(cursor: ItemCursor) -> tuple[int, int, str] | None:
    """Locates the completion marker of the entry at ``cursor``, as
    ``(start, end, token)``.

    Entries opening with a heading line carry their marker as the heading's
    first word. Otherwise the nearest marker word before the cursor is used,
    never looking back past the previous entry."""

    if h := entry_heading(cursor):
        return h.start(2), h.end(2), h.group(2)

    markers = "|".join(
        re.escape(m) for m in (cursor.todo_marker, cursor.done_marker)
    )
    marker_re = re.compile(rf"(?<!\S)(?:{markers})(?!\S)")
    last = None
    for m in marker_re.finditer(cursor.store.text, cursor.start, cursor.pos):
        last = m
    if last is None:
        return None
    return last.start(), last.end(), last.group(0)


# --- built-in strategies ----------------------------------------------------

_BRACES_RE: Final = re.compile(r"[{}]")
_WS_RE: Final = re.compile(r"\s+")


def _clean_field(s: str) -> str:
    return _WS_RE.sub(" ", _BRACES_RE.sub("", s)).strip()


def title_plain(key: str, db: "RecordDatabase") -> str:
    rec = db.get(key)
    if rec is None:
        return key
    return _clean_field(rec.get("title", "")) or key


def title_author_year(key: str, db: "RecordDatabase") -> str:
    rec = db.get(key)
    if rec is None:
        return key

    title = _clean_field(rec.get("title", "")) or key
    authors = [
        _clean_field(a)
        for a in rec.get("author", rec.get("editor", "")).split(" and ")
        if a.strip()
    ]
    year = _clean_field(rec.get("year", rec.get("date", "")))[:4]

    lead = "; ".join(authors)
    if year:
        lead = f"{lead} ({year})" if lead else f"({year})"
    return f"{lead}: {title}" if lead else title


def identifier_org_custom_id(key: str) -> str:
    return f":Custom_id: {key}"


def identifier_plain(key: str) -> str:
    return key


def link_org_file(key: str, db: "RecordDatabase") -> str:
    rec = db.get(key)
    if rec is None:
        return ""
    # multiple files are separated by ";", the first one wins
    files = [f.strip() for f in rec.get("file", "").split(";") if f.strip()]
    if not files:
        return ""
    return f"[[file:{files[0]}][{os.path.basename(files[0])}]]"


def link_none(key: str, db: "RecordDatabase") -> str:
    return ""


def remove_mark_done(cursor: ItemCursor) -> None:
    """Flips the entry's marker to the done marker, leaving the rest of the
    entry as it is."""

    store = cursor.store
    found = find_marker(cursor)
    if found is None:
        raise RuntimeError("no completion marker found for the entry")

    start, end, token = found
    if token == cursor.done_marker:
        return
    if token == cursor.todo_marker:
        store.replace(start, end, cursor.done_marker)
        return

    # a heading without any marker: prepend one, the way org-mode would
    store.insert(start, f"{cursor.done_marker} ")


def remove_delete(cursor: ItemCursor) -> None:
    """Deletes the whole entry, from its heading line up to the next heading
    line. An entry without a heading is deleted only when it fits on one line
    together with its marker."""

    store = cursor.store
    text = store.text
    if h := entry_heading(cursor):
        store.delete(h.start(), find_entry_end(text, cursor.pos))
        return

    line_start = text.rfind("\n", 0, cursor.pos) + 1
    found = find_marker(cursor)
    if line_start < cursor.start or found is None or found[0] < line_start:
        raise RuntimeError("cannot tell where the entry starts")

    line_end = text.find("\n", cursor.pos)
    store.delete(line_start, len(text) if line_end < 0 else line_end + 1)


def item_active_todo_marker(cursor: ItemCursor) -> bool:
    found = find_marker(cursor)
    return found is not None and found[2] == cursor.todo_marker


BUILTIN_TITLE: Final[dict[str, TitleFn]] = {
    "title": title_plain,
    "author-year-title": title_author_year,
}
BUILTIN_IDENTIFIER: Final[dict[str, IdentifierFn]] = {
    "org-custom-id": identifier_org_custom_id,
    "plain": identifier_plain,
}
BUILTIN_LINK: Final[dict[str, LinkFn]] = {
    "org-file-link": link_org_file,
    "none": link_none,
}
BUILTIN_REMOVE_ITEM: Final[dict[str, RemoveItemFn]] = {
    "mark-done": remove_mark_done,
    "delete": remove_delete,
}
BUILTIN_ITEM_ACTIVE: Final[dict[str, ItemActiveFn]] = {
    "todo-marker": item_active_todo_marker,
}


# --- resolution -------------------------------------------------------------

F = TypeVar("F", bound=Callable[..., object])


def _import_ref(kind: str, ref: str) -> object:
    mod_name, _, attr_path = ref.partition(":")
    try:
        obj: object = importlib.import_module(mod_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
    except (ImportError, AttributeError) as e:
        raise PluginError(kind, ref, f"cannot import: {e}") from e
    return obj


def resolve_strategy(kind: str, ref: str, builtins: Mapping[str, F]) -> F:
    """Resolves a built-in strategy name or ``module:attribute`` reference
    into a callable. Raises ``PluginError`` if that fails."""

    if ":" not in ref:
        try:
            return builtins[ref]
        except KeyError:
            known = ", ".join(sorted(builtins))
            raise PluginError(kind, ref, f"unknown built-in (known: {known})")

    obj = _import_ref(kind, ref)
    if not callable(obj):
        raise PluginError(kind, ref, "not callable")
    return obj  # type: ignore[return-value]


def guarded(kind: str, name: str, fn: F) -> F:
    """Wraps ``fn`` so that any exception it raises surfaces as a
    ``PluginError``."""

    @functools.wraps(fn)
    def _wrapped(*args: object, **kwargs: object) -> object:
        try:
            return fn(*args, **kwargs)
        except PluginError:
            raise
        except Exception as e:
            raise PluginError(kind, name) from e

    return _wrapped  # type: ignore[return-value]


def _nonempty_identifier(name: str, fn: IdentifierFn) -> IdentifierFn:
    def _checked(key: str) -> str:
        ident = fn(key)
        if not isinstance(ident, str) or not ident:
            raise PluginError(
                KIND_IDENTIFIER, name, f"returned {ident!r} for key '{key}'"
            )
        return ident

    return _checked


@dataclass(frozen=True)
class Strategies:
    title: TitleFn
    identifier: IdentifierFn
    link: LinkFn
    remove_item: RemoveItemFn
    item_active: ItemActiveFn

    @classmethod
    def resolve(
        cls,
        title: str,
        identifier: str,
        link: str,
        remove_item: str,
        item_active: str,
    ) -> "Strategies":
        ident_fn = resolve_strategy(KIND_IDENTIFIER, identifier, BUILTIN_IDENTIFIER)
        return cls(
            title=guarded(
                KIND_TITLE,
                title,
                resolve_strategy(KIND_TITLE, title, BUILTIN_TITLE),
            ),
            identifier=guarded(
                KIND_IDENTIFIER,
                identifier,
                _nonempty_identifier(identifier, ident_fn),
            ),
            link=guarded(
                KIND_LINK,
                link,
                resolve_strategy(KIND_LINK, link, BUILTIN_LINK),
            ),
            remove_item=guarded(
                KIND_REMOVE_ITEM,
                remove_item,
                resolve_strategy(KIND_REMOVE_ITEM, remove_item, BUILTIN_REMOVE_ITEM),
            ),
            item_active=guarded(
                KIND_ITEM_ACTIVE,
                item_active,
                resolve_strategy(KIND_ITEM_ACTIVE, item_active, BUILTIN_ITEM_ACTIVE),
            ),
        )

    @classmethod
    def defaults(cls) -> "Strategies":
        from .. import config

        return cls.resolve(
            config.DEFAULT_TITLE_STRATEGY,
            config.DEFAULT_IDENTIFIER_STRATEGY,
            config.DEFAULT_LINK_STRATEGY,
            config.DEFAULT_REMOVE_ITEM_STRATEGY,
            config.DEFAULT_ITEM_ACTIVE_STRATEGY,
        )

    @classmethod
    def from_config(cls, gc: "GlobalConfig") -> "Strategies":
        return cls.resolve(
            gc.title_strategy,
            gc.identifier_strategy,
            gc.link_strategy,
            gc.remove_item_strategy,
            gc.item_active_strategy,
        )
