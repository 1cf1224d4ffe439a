from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Iterable

    from ..bibdb import RecordDatabase
    from ..config import GlobalConfig
    from .store import StoreHandle
    from .strategies import Strategies

from ..config.errors import ConfigurationError
from ..utils.porcelain import PorcelainEntity, PorcelainEntityType
from .errors import ReadingListNotAccessibleError
from .hooks import HookEvent
from .locate import iter_located_keys, locate
from .strategies import HEADING_RE, ItemCursor, entry_heading
from .template import render


class PorcelainReadingListItemV1(PorcelainEntity):
    key: str
    is_done: bool
    heading: str | None


@dataclass
class ReadingListItem:
    key: str
    pos: int
    is_done: bool
    heading: str | None

    def to_porcelain(self) -> PorcelainReadingListItemV1:
        return {
            "ty": PorcelainEntityType.ReadingListItemV1,
            "key": self.key,
            "is_done": self.is_done,
            "heading": self.heading,
        }


class ReadingList:
    """Idempotent operations on the configured reading list.

    Every operation locates the entry afresh by scanning the store, so edits
    made to the buffer in between are always respected."""

    def __init__(self, gc: "GlobalConfig") -> None:
        self._gc = gc

    @property
    def store(self) -> "StoreHandle":
        return self._gc.reading_list_store

    @property
    def strategies(self) -> "Strategies":
        return self._gc.strategies

    @property
    def database(self) -> "RecordDatabase":
        return self._gc.database

    @property
    def entries_have_heading(self) -> bool:
        return HEADING_RE.match(self._gc.reading_list_template) is not None

    def _cursor(self, pos: int, start: int | None = None) -> ItemCursor:
        if start is None:
            start = self._previous_entry_end(pos)
        return ItemCursor(
            self.store,
            pos,
            self._gc.todo_marker,
            self._gc.done_marker,
            start,
            self.entries_have_heading,
        )

    def _iter_located(self) -> "Iterable[tuple[str, int]]":
        return iter_located_keys(
            self.store.text,
            self.strategies.identifier,
            self.database.keys(),
        )

    def _previous_entry_end(self, pos: int) -> int:
        return max((p for _, p in self._iter_located() if p < pos), default=0)

    def locate(self, key: str) -> int | None:
        return locate(self.store, key, self.strategies.identifier)

    def render(self, key: str) -> str:
        return render(
            key,
            self._gc.reading_list_template,
            self._gc.todo_marker,
            self.strategies,
            self.database,
        )

    def add_item(self, key: str) -> str | None:
        """Adds an entry for ``key`` at the end of the reading list.

        Returns ``key``, or None if the entry was already present."""

        store = self.store
        if self.locate(key) is not None:
            self._gc.logger.D(f"{key} already on the reading list")
            return None

        item = self.render(key)
        text = store.text
        if text and not text.endswith("\n"):
            item = "\n" + item
        store.append(item)
        store.save()

        self._gc.logger.D(f"added {key} to the reading list")
        self._gc.hooks.run(HookEvent.NEW_ITEM, key, self.database)
        return key

    def remove_item(self, key: str) -> str | None:
        """Retires the entry for ``key`` with the configured remove strategy,
        which marks it done by default.

        Returns ``key``, or None if there was no such entry."""

        pos = self.locate(key)
        if pos is None:
            self._gc.logger.D(f"{key} not on the reading list")
            return None

        self.strategies.remove_item(self._cursor(pos))
        self.store.save()

        self._gc.logger.D(f"removed {key} from the reading list")
        self._gc.hooks.run(HookEvent.REMOVE_ITEM, key, self.database)
        return key

    def is_done(self, key: str) -> bool | None:
        """Returns whether the entry for ``key`` is done, or None if there is
        no such entry or the reading list is unavailable."""

        try:
            pos = self.locate(key)
        except (ConfigurationError, ReadingListNotAccessibleError) as e:
            self._gc.logger.D(f"reading list unavailable: {e}")
            return None

        if pos is None:
            return None
        return not self.strategies.item_active(self._cursor(pos))

    def list_items(self) -> list[ReadingListItem]:
        text = self.store.text
        result: list[ReadingListItem] = []
        prev_end = 0
        for key, pos in self._iter_located():
            cursor = self._cursor(pos, prev_end)
            done = not self.strategies.item_active(cursor)
            result.append(ReadingListItem(key, pos, done, _heading_text(text, cursor)))
            prev_end = pos
        return result


def _heading_text(text: str, cursor: ItemCursor) -> str | None:
    h = entry_heading(cursor)
    if h is None:
        return None
    line_end = text.find("\n", h.start())
    line = text[h.start() : line_end if line_end >= 0 else len(text)]
    return line[h.end(1) - h.start() :].strip()
