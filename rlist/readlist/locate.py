import re
from typing import Callable, Final, Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from .store import StoreHandle

IDENTIFIER_NAMESPACE: Final = "reading_"
"""Prefix applied to record keys before deriving identifiers, so that a
reading-list entry's identifier never clashes with one used by some other
note file referencing the same record."""

IdentifierFn = Callable[[str], str]


def make_identifier(key: str, identifier_fn: IdentifierFn) -> str:
    return identifier_fn(IDENTIFIER_NAMESPACE + key)


_KEY_CHAR_RE: Final = re.compile(r"[\w-]")


def _continues_key(text: str, ident: str, end: int) -> bool:
    """Whether the identifier match ending at ``end`` is only the prefix of
    some longer key's identifier."""

    return (
        end < len(text)
        and _KEY_CHAR_RE.match(ident[-1]) is not None
        and _KEY_CHAR_RE.match(text[end]) is not None
    )


def locate(
    buf: "str | StoreHandle",
    key: str,
    identifier_fn: IdentifierFn,
) -> int | None:
    """Returns the offset right after the first occurrence of ``key``'s
    identifier in ``buf``, or None if the entry is absent.

    Occurrences running on into more key characters belong to another key
    (``smith2020`` inside ``smith2020b``) and are skipped. The buffer is
    scanned from the start on every call."""

    ident = make_identifier(key, identifier_fn)
    if not ident:
        raise ValueError(f"empty identifier derived for key '{key}'")

    text = buf if isinstance(buf, str) else buf.text
    idx = text.find(ident)
    while idx >= 0:
        end = idx + len(ident)
        if not _continues_key(text, ident, end):
            return end
        idx = text.find(ident, idx + 1)
    return None


_SENTINEL: Final = "\x00rlist-key\x00"


def iter_located_keys(
    text: str,
    identifier_fn: IdentifierFn,
    candidate_keys: Iterable[str] = (),
) -> Iterable[tuple[str, int]]:
    """Yields ``(key, position)`` for every entry found in ``text``, in buffer
    order, with positions as returned by ``locate``.

    Identifiers embedding the namespaced key verbatim are found by pattern;
    otherwise each of ``candidate_keys`` is looked up one by one."""

    probe = make_identifier(_SENTINEL, identifier_fn)
    if probe.count(_SENTINEL) == 1:
        prefix, suffix = probe.split(_SENTINEL)
        key_re = r"\S+?" if suffix else r"\S+"
        pat = re.compile(re.escape(prefix) + f"({key_re})" + re.escape(suffix))
        seen: set[str] = set()
        for m in pat.finditer(text):
            key = m.group(1)
            if key in seen:
                continue
            seen.add(key)
            yield key, m.end()
        return

    found: list[tuple[str, int]] = []
    for key in candidate_keys:
        if (pos := locate(text, key, identifier_fn)) is not None:
            found.append((key, pos))
    found.sort(key=lambda x: x[1])
    yield from found
