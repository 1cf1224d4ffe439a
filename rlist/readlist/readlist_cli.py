import argparse
from typing import TYPE_CHECKING

from ..cli.cmd import RootCommand
from ..cli.completer import add_record_keys_argument

if TYPE_CHECKING:
    from ..config import GlobalConfig


class AddCommand(
    RootCommand,
    cmd="add",
    help="Add records to the reading list",
):
    @classmethod
    def configure_args(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        add_record_keys_argument(gc, p, "Key(s) of the record(s) to add")

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from .ops import do_add

        keys: list[str] = args.key
        return do_add(cfg, keys)


class RemoveCommand(
    RootCommand,
    cmd="remove",
    aliases=["rm"],
    help="Remove records from the reading list",
    description="Retires reading-list entries with the configured remove strategy. By default entries are marked as done rather than deleted.",
):
    @classmethod
    def configure_args(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        add_record_keys_argument(
            gc, p, "Key(s) of the record(s) to remove", tracked_only=True
        )

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from .ops import do_remove

        keys: list[str] = args.key
        return do_remove(cfg, keys)


class StatusCommand(
    RootCommand,
    cmd="status",
    help="Show whether records are on the reading list and done",
):
    @classmethod
    def configure_args(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        add_record_keys_argument(
            gc, p, "Key(s) of the record(s) to query", tracked_only=True
        )

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from .ops import do_status

        keys: list[str] = args.key
        return do_status(cfg, keys)


class ListCommand(
    RootCommand,
    cmd="list",
    aliases=["ls"],
    help="List entries on the reading list",
):
    @classmethod
    def configure_args(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        g = p.add_mutually_exclusive_group()
        g.add_argument(
            "--todo",
            action="store_const",
            dest="only_done",
            const=False,
            help="Only list entries not yet done",
        )
        g.add_argument(
            "--done",
            action="store_const",
            dest="only_done",
            const=True,
            help="Only list entries already done",
        )

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from .ops import do_list

        only_done: bool | None = args.only_done
        return do_list(cfg, only_done)


class OpenCommand(
    RootCommand,
    cmd="open",
    help="Open the reading list in a text editor",
    description="Opens the reading-list file with $VISUAL or $EDITOR, falling back to vi.",
):
    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from .ops import do_open

        return do_open(cfg)
