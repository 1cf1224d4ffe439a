import os
import shlex
import subprocess

from rich import box
from rich.markup import escape
from rich.table import Table

from ..config import GlobalConfig
from ..log import RListLogger, humanize_list
from ..utils.porcelain import PorcelainEntity, PorcelainEntityType
from .reading_list import ReadingListItem
from .store import check_store_location, open_store


class PorcelainItemStatusV1(PorcelainEntity):
    key: str
    status: str


STATUS_TODO = "todo"
STATUS_DONE = "done"
STATUS_UNTRACKED = "not tracked"


def do_add(cfg: GlobalConfig, keys: list[str]) -> int:
    logger = cfg.logger
    rl = cfg.reading_list
    db = cfg.database

    unknown = [k for k in keys if db.get(k) is None]
    if unknown and cfg.get_database_path() is not None:
        logger.W(
            f"not in the record database [yellow]{escape(db.name)}[/]: {humanize_list(unknown, item_color='yellow')}"
        )

    added: list[str] = []
    present: list[str] = []
    for k in keys:
        if rl.add_item(k) is None:
            present.append(k)
        else:
            added.append(k)

    if added:
        logger.I(f"added to the reading list: {humanize_list(added, item_color='green')}")
    if present:
        logger.I(
            f"already on the reading list: {humanize_list(present, item_color='yellow')}"
        )
    return 0


def do_remove(cfg: GlobalConfig, keys: list[str]) -> int:
    logger = cfg.logger
    rl = cfg.reading_list

    removed: list[str] = []
    absent: list[str] = []
    for k in keys:
        if rl.remove_item(k) is None:
            absent.append(k)
        else:
            removed.append(k)

    if removed:
        logger.I(
            f"removed from the reading list: {humanize_list(removed, item_color='green')}"
        )
    if absent:
        logger.I(f"not on the reading list: {humanize_list(absent, item_color='yellow')}")
    return 0


def _status_str(is_done: bool | None) -> str:
    if is_done is None:
        return STATUS_UNTRACKED
    return STATUS_DONE if is_done else STATUS_TODO


def _status_to_porcelain(key: str, status: str) -> PorcelainItemStatusV1:
    return {
        "ty": PorcelainEntityType.ItemStatusV1,
        "key": key,
        "status": status,
    }


def do_status(cfg: GlobalConfig, keys: list[str]) -> int:
    # is_done() reports an unusable store the same as an untracked key, so
    # surface configuration problems here first
    open_store(cfg)

    rl = cfg.reading_list
    statuses = {k: _status_str(rl.is_done(k)) for k in keys}
    ret = 1 if any(s == STATUS_UNTRACKED for s in statuses.values()) else 0

    if cfg.is_porcelain:
        cfg.logger.porcelain_stdout.emit_all(
            _status_to_porcelain(k, s) for k, s in statuses.items()
        )
        return ret

    colors = {STATUS_TODO: "yellow", STATUS_DONE: "green", STATUS_UNTRACKED: "red"}
    for k, s in statuses.items():
        cfg.logger.stdout(f"{escape(k)}: [{colors[s]}]{s}[/]")
    return ret


def print_items(logger: RListLogger, items: list[ReadingListItem]) -> None:
    tbl = Table(box=box.SIMPLE, show_edge=False)
    tbl.add_column("Key")
    tbl.add_column("Status")
    tbl.add_column("Entry")

    for it in items:
        status = "[green]done[/]" if it.is_done else "[bold yellow]todo[/]"
        tbl.add_row(escape(it.key), status, escape(it.heading or ""))

    logger.stdout(tbl)


def do_list(cfg: GlobalConfig, only_done: bool | None) -> int:
    logger = cfg.logger
    items = cfg.reading_list.list_items()
    if only_done is not None:
        items = [x for x in items if x.is_done == only_done]

    if cfg.is_porcelain:
        logger.porcelain_stdout.emit_all(it.to_porcelain() for it in items)
        return 0

    if not items:
        logger.stdout("  (no entry)")
        return 0

    print_items(logger, items)

    n_done = sum(1 for x in items if x.is_done)
    logger.stdout(f"\n{len(items) - n_done} to read, {n_done} done")
    return 0


DEFAULT_EDITOR = "vi"


def editor_argv(path: str) -> list[str]:
    editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR
    return [*shlex.split(editor), path]


def do_open(cfg: GlobalConfig) -> int:
    path = cfg.get_reading_list_path()
    check_store_location(path)

    argv = editor_argv(str(path))
    cfg.logger.D(f"running {argv}")
    try:
        retcode = subprocess.call(argv)
    except FileNotFoundError:
        cfg.logger.F(f"editor [yellow]{escape(argv[0])}[/] not found")
        cfg.logger.I("set [yellow]$VISUAL[/] or [yellow]$EDITOR[/] to choose another")
        return 1

    if retcode != 0:
        cfg.logger.W(f"editor command '{escape(' '.join(argv))}' returned {retcode}")
    return retcode
