"""Rendering of new reading-list entries.

An entry template is free-form text with ``%``-placeholders:

* ``%M``: the todo marker
* ``%T``: the record's title, from the title strategy
* ``%K``: the entry identifier, from the identifier strategy
* ``%F``: a link to the record's file, from the link strategy
* ``%L``: a citation link to the record itself
* ``%D``: a link to the record's DOI, if it has one
* ``%U``: a link to the record's URL, if it has one
* ``%%``: a literal ``%``

Any other placeholder is left as is.
"""

import re
from typing import Final, Mapping, TYPE_CHECKING

if TYPE_CHECKING:
    from ..bibdb import RecordDatabase
    from .strategies import Strategies

from .locate import make_identifier

PLACEHOLDER_RE: Final = re.compile(r"%(.)", re.DOTALL)


def expand_template(template: str, values: Mapping[str, str]) -> str:
    def _sub(m: re.Match[str]) -> str:
        c = m.group(1)
        if c == "%":
            return "%"
        return values.get(c, m.group(0))

    return PLACEHOLDER_RE.sub(_sub, template)


def _org_link(target: str, desc: str | None = None) -> str:
    if desc is None:
        return f"[[{target}]]"
    return f"[[{target}][{desc}]]"


def record_link(key: str, db: "RecordDatabase") -> str:
    return _org_link(f"cite:{key}")


def doi_link(key: str, db: "RecordDatabase") -> str:
    rec = db.get(key)
    if rec is None or not (doi := rec.get("doi", "").strip()):
        return ""
    return _org_link(f"https://doi.org/{doi}", doi)


def url_link(key: str, db: "RecordDatabase") -> str:
    rec = db.get(key)
    if rec is None or not (url := rec.get("url", "").strip()):
        return ""
    return _org_link(url)


def render(
    key: str,
    template: str,
    todo_marker: str,
    strategies: "Strategies",
    db: "RecordDatabase",
) -> str:
    """Renders a new entry for ``key``. Performs no I/O besides whatever the
    strategies do."""

    values = {
        "M": todo_marker,
        "T": strategies.title(key, db),
        "K": make_identifier(key, strategies.identifier),
        "F": strategies.link(key, db),
    }

    # the extra links are only computed when asked for
    extras = {"L": record_link, "D": doi_link, "U": url_link}
    for c, fn in extras.items():
        if f"%{c}" in template:
            values[c] = fn(key, db)

    return expand_template(template, values)
