"""Access to the reading-list file.

The whole file is held in memory as one string buffer while a session works
on it. Edits go to the buffer; ``save()`` writes it back to disk. Nothing here
locks the file: one interactive session is assumed to own it at a time, and
the last save wins otherwise.
"""

from contextlib import AbstractContextManager
import os
import pathlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType
    from typing_extensions import Self

    from ..config import GlobalConfig
    from ..log import RListLogger

from .errors import ReadingListNotAccessibleError


def check_store_location(path: pathlib.Path) -> None:
    """Ensures ``path`` is either an existing read-writable file, or can be
    created as one. Raises ``ReadingListNotAccessibleError`` otherwise."""

    if path.exists():
        if not path.is_file() or not os.access(path, os.R_OK | os.W_OK):
            raise ReadingListNotAccessibleError(path)
        return

    parent = path.parent
    if not parent.is_dir() or not os.access(parent, os.W_OK | os.X_OK):
        raise ReadingListNotAccessibleError(path)


class StoreHandle(AbstractContextManager["StoreHandle"]):
    def __init__(
        self,
        path: pathlib.Path,
        logger: "RListLogger | None" = None,
    ) -> None:
        self.path = path
        self._logger = logger
        self._buf: str | None = None
        self._dirty = False
        self._closed = False

    def __enter__(self) -> "Self":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: "TracebackType | None",
    ) -> bool | None:
        self.close()
        return None

    def __repr__(self) -> str:
        return f"<StoreHandle {str(self.path)!r} loaded={self._buf is not None} dirty={self._dirty}>"

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_modified(self) -> bool:
        return self._dirty

    @property
    def text(self) -> str:
        if self._closed:
            raise ValueError("operation on a closed reading-list store")
        if self._buf is None:
            self._buf = self._load()
        return self._buf

    def __len__(self) -> int:
        return len(self.text)

    def _load(self) -> str:
        try:
            # newline="" keeps the file's own line endings intact on save
            with open(self.path, "r", encoding="utf-8", newline="") as fp:
                content = fp.read()
        except FileNotFoundError:
            content = ""

        if self._logger is not None:
            self._logger.D(f"loaded {len(content)} chars from {self.path}")
        return content

    def find(self, needle: str, start: int = 0) -> int | None:
        """Returns the offset of the first literal occurrence of ``needle`` at
        or after ``start``, or None."""

        idx = self.text.find(needle, start)
        return None if idx < 0 else idx

    def replace(self, start: int, end: int, s: str) -> None:
        buf = self.text
        if not 0 <= start <= end <= len(buf):
            raise IndexError(f"invalid buffer range [{start}, {end})")
        self._buf = buf[:start] + s + buf[end:]
        self._dirty = True

    def insert(self, pos: int, s: str) -> None:
        self.replace(pos, pos, s)

    def delete(self, start: int, end: int) -> None:
        self.replace(start, end, "")

    def append(self, s: str) -> int:
        """Appends ``s`` to the buffer, returning the offset it starts at."""

        pos = len(self.text)
        self.insert(pos, s)
        return pos

    def save(self) -> bool:
        """Writes the buffer to disk if it was modified. Returns whether a
        write happened.

        Raises ``ReadingListNotAccessibleError`` if the file cannot be
        written; the buffer and its modified state are left as they were."""

        if not self._dirty or self._buf is None:
            return False

        try:
            with open(self.path, "w", encoding="utf-8", newline="") as fp:
                fp.write(self._buf)
        except OSError as e:
            raise ReadingListNotAccessibleError(self.path) from e
        self._dirty = False

        if self._logger is not None:
            self._logger.D(f"saved {len(self._buf)} chars to {self.path}")
        return True

    def close(self) -> None:
        if self._closed:
            return
        self.save()
        self._closed = True
        self._buf = None


def open_store(gc: "GlobalConfig") -> StoreHandle:
    """Returns the live store handle for the configured reading list, opening
    it if needed.

    Raises ``ReadingListNotConfiguredError`` if no location is configured, and
    ``ReadingListNotAccessibleError`` if the location cannot be read and
    written. Both checks happen before the file's content is touched."""

    path = gc.get_reading_list_path()
    check_store_location(path)

    h = gc.live_store
    if h is not None and not h.closed and h.path == path:
        return h

    gc.logger.D(f"opening reading list at {path}")
    h = StoreHandle(path, gc.logger)
    gc.live_store = h
    return h
