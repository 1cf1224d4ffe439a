from dataclasses import dataclass
import enum
import sys
from typing import Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from ..bibdb import Record, RecordDatabase

from .errors import PluginError

if sys.version_info >= (3, 11):

    class HookEvent(enum.StrEnum):
        NEW_ITEM = "new-item"
        REMOVE_ITEM = "remove-item"

else:

    class HookEvent(str, enum.Enum):
        NEW_ITEM = "new-item"
        REMOVE_ITEM = "remove-item"


@dataclass(frozen=True)
class ItemEvent:
    """What hook callbacks get to see about the entry that just changed."""

    event: HookEvent
    key: str
    record: "Record | None"
    """Read-only view of the record's fields, if the database knows the key"""
    database: "RecordDatabase"


HookFn = Callable[[ItemEvent], None]


class HookRegistry:
    def __init__(self) -> None:
        self._hooks: dict[HookEvent, list[HookFn]] = {e: [] for e in HookEvent}

    def add(self, event: HookEvent, fn: HookFn) -> None:
        self._hooks[event].append(fn)

    def remove(self, event: HookEvent, fn: HookFn) -> None:
        try:
            self._hooks[event].remove(fn)
        except ValueError:
            pass

    def __len__(self) -> int:
        return sum(len(x) for x in self._hooks.values())

    def run(self, event: HookEvent, key: str, db: "RecordDatabase") -> None:
        """Invokes the callbacks registered for ``event`` in registration
        order. The first failing callback aborts the run with a
        ``PluginError``."""

        hooks = self._hooks[event]
        if not hooks:
            return

        ev = ItemEvent(event, key, db.get(key), db)
        for fn in list(hooks):
            try:
                fn(ev)
            except Exception as e:
                name = getattr(fn, "__qualname__", repr(fn))
                raise PluginError(f"{event} hook", name) from e
