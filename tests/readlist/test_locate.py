import pytest

from rlist.readlist.locate import iter_located_keys, locate, make_identifier
from rlist.readlist.strategies import identifier_org_custom_id, identifier_plain


BUF = """\
* TODO On Reading Lists
:PROPERTIES:
:Custom_id: reading_smith2020
:END:
* DONE Notes on Notes
:PROPERTIES:
:Custom_id: reading_doe2019
:END:
"""


def test_make_identifier() -> None:
    assert make_identifier("k", identifier_plain) == "reading_k"
    assert (
        make_identifier("smith2020", identifier_org_custom_id)
        == ":Custom_id: reading_smith2020"
    )


def test_locate() -> None:
    ident = ":Custom_id: reading_smith2020"
    pos = locate(BUF, "smith2020", identifier_org_custom_id)
    assert pos == BUF.index(ident) + len(ident)

    assert locate(BUF, "doe2019", identifier_org_custom_id) is not None
    assert locate(BUF, "unknown_key", identifier_org_custom_id) is None
    assert locate("", "smith2020", identifier_org_custom_id) is None


def test_locate_first_match_wins() -> None:
    buf = "reading_a one\nreading_a two\n"
    assert locate(buf, "a", identifier_plain) == len("reading_a")


def test_locate_empty_identifier() -> None:
    with pytest.raises(ValueError):
        locate(BUF, "smith2020", lambda k: "")


def test_iter_located_keys() -> None:
    assert list(iter_located_keys(BUF, identifier_org_custom_id)) == [
        ("smith2020", locate(BUF, "smith2020", identifier_org_custom_id)),
        ("doe2019", locate(BUF, "doe2019", identifier_org_custom_id)),
    ]


def test_iter_located_keys_opaque_identifier() -> None:
    def hashed(k: str) -> str:
        return f"<<{len(k)}>>"

    buf = "x <<10>>\ny <<12>>\n"
    # only candidates can be found when the key is not embedded verbatim
    got = list(iter_located_keys(buf, hashed, ["abcd", "ab"]))
    assert got == [
        ("ab", buf.index("<<10>>") + 6),
        ("abcd", buf.index("<<12>>") + 6),
    ]


def test_locate_skips_longer_keys() -> None:
    buf = ":Custom_id: reading_smith2020b\n:Custom_id: reading_smith2020\n"
    pos = locate(buf, "smith2020", identifier_org_custom_id)
    assert pos == len(buf) - 1
    assert locate(buf, "smith2020b", identifier_org_custom_id) == buf.index("\n")
    for other in ("smith2020b", "smith2020-x", "smith2020_2"):
        buf = f":Custom_id: reading_{other}\n"
        assert locate(buf, "smith2020", identifier_org_custom_id) is None
    # punctuation ends a key
    assert locate("[reading_a]", "a", identifier_plain) == len("[reading_a")
