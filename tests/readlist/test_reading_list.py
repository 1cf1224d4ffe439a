import pathlib

import pytest

from rlist.config import GlobalConfig
from rlist.config.errors import ConfigurationError
from rlist.readlist.errors import PluginError, ReadingListNotAccessibleError
from rlist.readlist.hooks import HookEvent, ItemEvent


SMITH2020_ENTRY = (
    "* TODO On Reading Lists\n"
    ":PROPERTIES:\n"
    ":Custom_id: reading_smith2020\n"
    ":END:\n"
    "[[file:papers/smith2020.pdf][smith2020.pdf]]\n"
)


def _content(p: pathlib.Path) -> str:
    return p.read_text(encoding="utf-8")


def test_add_item(rlist_config: GlobalConfig, reading_list_file: pathlib.Path) -> None:
    reading_list_file.write_text("", encoding="utf-8")
    rl = rlist_config.reading_list
    assert rl.add_item("smith2020") == "smith2020"
    # written out right away
    assert _content(reading_list_file) == SMITH2020_ENTRY

    pos = rl.locate("smith2020")
    assert pos is not None
    assert 0 < pos < len(SMITH2020_ENTRY)
    assert rl.is_done("smith2020") is False


def test_add_item_idempotent(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    rl = rlist_config.reading_list
    assert rl.add_item("smith2020") == "smith2020"
    assert rl.add_item("smith2020") is None
    assert _content(reading_list_file) == SMITH2020_ENTRY


def test_add_item_keeps_existing_content(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    reading_list_file.write_text("#+TITLE: My reading list", encoding="utf-8")
    rlist_config.reading_list.add_item("smith2020")
    assert _content(reading_list_file) == "#+TITLE: My reading list\n" + SMITH2020_ENTRY


def test_add_item_unknown_record(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    rlist_config.reading_list.add_item("nobody")
    assert _content(reading_list_file).startswith("* TODO nobody\n")


def test_remove_item_marks_done(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    rl = rlist_config.reading_list
    rl.add_item("smith2020")
    rl.add_item("doe2019")

    assert rl.remove_item("smith2020") == "smith2020"
    content = _content(reading_list_file)
    assert content.startswith("* DONE On Reading Lists\n")
    assert "* TODO Notes on Notes\n" in content
    assert rl.is_done("smith2020") is True
    assert rl.is_done("doe2019") is False

    # removing again changes nothing
    assert rl.remove_item("smith2020") == "smith2020"
    assert _content(reading_list_file) == content


def test_remove_item_absent(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    assert rlist_config.reading_list.remove_item("smith2020") is None
    assert not reading_list_file.exists()


def test_remove_item_delete_strategy(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    rlist_config.set_by_key("strategies.remove_item", "delete")
    rl = rlist_config.reading_list
    rl.add_item("smith2020")
    rl.add_item("doe2019")

    rl.remove_item("smith2020")
    content = _content(reading_list_file)
    assert "smith2020" not in content
    assert content.startswith("* TODO Notes on Notes\n")
    assert rl.is_done("smith2020") is None
    assert rl.remove_item("smith2020") is None


def test_is_done_unknown(rlist_config: GlobalConfig) -> None:
    rlist_config.reading_list.add_item("smith2020")
    assert rlist_config.reading_list.is_done("unknown_key") is None


def test_is_done_unavailable(rlist_config: GlobalConfig, tmp_path: pathlib.Path) -> None:
    rl = rlist_config.reading_list

    rlist_config.reading_list_file = None
    assert rl.is_done("smith2020") is None

    rlist_config.reading_list_file = str(tmp_path / "missing" / "r.org")
    assert rl.is_done("smith2020") is None


def test_unconfigured(rlist_config: GlobalConfig) -> None:
    rlist_config.reading_list_file = None
    rl = rlist_config.reading_list
    with pytest.raises(ConfigurationError):
        rl.add_item("smith2020")
    with pytest.raises(ConfigurationError):
        rl.remove_item("smith2020")


def test_inaccessible(rlist_config: GlobalConfig, tmp_path: pathlib.Path) -> None:
    rlist_config.reading_list_file = str(tmp_path)
    with pytest.raises(PermissionError):
        rlist_config.reading_list.add_item("smith2020")


def test_custom_template_and_markers(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    rlist_config.set_by_key("reading_list.template", "** %M %T %K\n")
    rlist_config.set_by_key("reading_list.todo_marker", "NEXT")
    rlist_config.set_by_key("reading_list.done_marker", "READ")
    rlist_config.set_by_key("strategies.identifier", "plain")

    rl = rlist_config.reading_list
    rl.add_item("smith2020")
    assert _content(reading_list_file) == "** NEXT On Reading Lists reading_smith2020\n"
    assert rl.is_done("smith2020") is False

    rl.remove_item("smith2020")
    assert _content(reading_list_file) == "** READ On Reading Lists reading_smith2020\n"
    assert rl.is_done("smith2020") is True


def test_hooks(rlist_config: GlobalConfig) -> None:
    events: list[tuple[HookEvent, str, str | None]] = []

    def record(ev: ItemEvent) -> None:
        title = ev.record["title"] if ev.record is not None else None
        events.append((ev.event, ev.key, title))

    rlist_config.hooks.add(HookEvent.NEW_ITEM, record)
    rlist_config.hooks.add(HookEvent.REMOVE_ITEM, record)

    rl = rlist_config.reading_list
    rl.add_item("smith2020")
    rl.add_item("smith2020")
    rl.remove_item("smith2020")
    rl.remove_item("nobody")

    assert events == [
        (HookEvent.NEW_ITEM, "smith2020", "{On} Reading Lists"),
        (HookEvent.REMOVE_ITEM, "smith2020", "{On} Reading Lists"),
    ]


def test_failing_hook_after_save(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    def bad(ev: ItemEvent) -> None:
        raise RuntimeError("nope")

    rlist_config.hooks.add(HookEvent.NEW_ITEM, bad)
    with pytest.raises(PluginError):
        rlist_config.reading_list.add_item("smith2020")
    # the entry was saved before the hooks ran
    assert _content(reading_list_file) == SMITH2020_ENTRY


def test_failing_strategy(rlist_config: GlobalConfig) -> None:
    rlist_config.set_by_key("strategies.title", "os:getcwd")
    with pytest.raises(PluginError):
        rlist_config.reading_list.add_item("smith2020")


def test_list_items(rlist_config: GlobalConfig) -> None:
    rl = rlist_config.reading_list
    assert rl.list_items() == []

    rl.add_item("smith2020")
    rl.add_item("doe2019")
    rl.remove_item("doe2019")

    items = rl.list_items()
    assert [(x.key, x.is_done, x.heading) for x in items] == [
        ("smith2020", False, "TODO On Reading Lists"),
        ("doe2019", True, "DONE Notes on Notes"),
    ]
    assert items[0].to_porcelain()["key"] == "smith2020"


def test_heading_less_entries_under_existing_heading(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    reading_list_file.write_text("* Papers\n", encoding="utf-8")
    rlist_config.set_by_key("reading_list.template", "- %M %T %K\n")
    rl = rlist_config.reading_list

    rl.add_item("smith2020")
    assert rl.is_done("smith2020") is False

    rl.remove_item("smith2020")
    # the user's own heading is not the entry's
    assert _content(reading_list_file) == (
        "* Papers\n- DONE On Reading Lists :Custom_id: reading_smith2020\n"
    )
    assert rl.is_done("smith2020") is True
    assert [(x.key, x.is_done, x.heading) for x in rl.list_items()] == [
        ("smith2020", True, None),
    ]


def test_delete_heading_less_entry(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    reading_list_file.write_text("* Papers\nmy notes\n", encoding="utf-8")
    rlist_config.set_by_key("reading_list.template", "- %M %T %K\n")
    rlist_config.set_by_key("strategies.remove_item", "delete")
    rl = rlist_config.reading_list
    rl.add_item("smith2020")
    rl.add_item("doe2019")

    assert rl.remove_item("doe2019") == "doe2019"
    assert _content(reading_list_file) == (
        "* Papers\nmy notes\n- TODO On Reading Lists :Custom_id: reading_smith2020\n"
    )
    assert rl.is_done("smith2020") is False


def test_delete_refuses_entry_without_bounds(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
) -> None:
    reading_list_file.write_text("* Papers\n", encoding="utf-8")
    rlist_config.set_by_key("reading_list.template", "- %M %T\n  %K\n")
    rlist_config.set_by_key("strategies.remove_item", "delete")
    rl = rlist_config.reading_list
    rl.add_item("smith2020")
    before = _content(reading_list_file)

    with pytest.raises(PluginError):
        rl.remove_item("smith2020")
    assert _content(reading_list_file) == before
    assert rl.store.text == before


def test_keys_sharing_a_prefix(rlist_config: GlobalConfig) -> None:
    rl = rlist_config.reading_list
    rl.add_item("smith2020b")
    assert rl.locate("smith2020") is None
    assert rl.is_done("smith2020") is None

    assert rl.add_item("smith2020") == "smith2020"
    rl.remove_item("smith2020b")
    assert rl.is_done("smith2020b") is True
    assert rl.is_done("smith2020") is False


def test_failed_save_keeps_buffer(
    rlist_config: GlobalConfig,
    reading_list_file: pathlib.Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    reading_list_file.write_text("#+TITLE: Reading\n", encoding="utf-8")
    rl = rlist_config.reading_list
    store = rl.store
    assert store.text == "#+TITLE: Reading\n"

    # the file stops being writable after its location was checked
    monkeypatch.setattr("rlist.readlist.store.check_store_location", lambda p: None)
    reading_list_file.unlink()
    reading_list_file.mkdir()

    with pytest.raises(ReadingListNotAccessibleError):
        rl.add_item("smith2020")
    assert store.is_modified
    assert store.text == "#+TITLE: Reading\n" + SMITH2020_ENTRY

    reading_list_file.rmdir()
    assert store.save()
    assert _content(reading_list_file) == "#+TITLE: Reading\n" + SMITH2020_ENTRY
