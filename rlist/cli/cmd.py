import argparse
from typing import Callable, ClassVar, TYPE_CHECKING

from . import RLIST_ENTRYPOINT_NAME

if TYPE_CHECKING:
    from ..config import GlobalConfig

    CLIEntrypoint = Callable[["GlobalConfig", argparse.Namespace], int]


class BaseCommand:
    """Node of the CLI command tree.

    Subclassing a command class with a ``cmd`` name attaches the subclass as
    a subcommand of the class it directly derives from. A command either has
    a ``main`` or subcommands; a bare group prints its help when invoked."""

    cmd: ClassVar[str | None]
    children: "ClassVar[list[type[BaseCommand]]]"

    has_subcommands: ClassVar[bool]
    is_subcommand_required: ClassVar[bool]
    has_main: ClassVar[bool]

    aliases: ClassVar[list[str]]
    description: ClassVar[str | None]
    help: ClassVar[str | None]
    prog: ClassVar[str | None]

    def __init_subclass__(
        cls,
        cmd: str | None,
        *,
        has_subcommands: bool = False,
        is_subcommand_required: bool = False,
        has_main: bool | None = None,
        aliases: list[str] | None = None,
        description: str | None = None,
        help: str | None = None,
        prog: str | None = None,
        **kwargs: object,
    ) -> None:
        super().__init_subclass__(**kwargs)

        cls.cmd = cmd
        cls.children = []
        cls.has_subcommands = has_subcommands
        cls.is_subcommand_required = is_subcommand_required
        cls.has_main = not has_subcommands if has_main is None else has_main
        cls.aliases = aliases or []
        cls.description = description
        cls.help = help
        cls.prog = prog

        if cmd is not None:
            parent = cls.__mro__[1]
            assert issubclass(parent, BaseCommand)
            parent.children.append(cls)

    @classmethod
    def configure_args(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        """Adds this command's own arguments to ``p``."""
        pass

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        raise NotImplementedError

    @classmethod
    def build_argparse(cls, gc: "GlobalConfig") -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog=cls.prog, description=cls.description)
        cls._setup_parser(gc, p)
        return p

    @classmethod
    def _setup_parser(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        cls.configure_args(gc, p)
        p.set_defaults(func=cls.main if cls.has_main else _print_help_of(p))

        if not cls.has_subcommands:
            return

        sp = p.add_subparsers(title="subcommands", required=cls.is_subcommand_required)
        for child in cls.children:
            assert child.cmd is not None
            child_p = sp.add_parser(
                child.cmd,
                aliases=child.aliases,
                help=child.help,
                description=child.description or child.help,
            )
            child._setup_parser(gc, child_p)


def _print_help_of(p: argparse.ArgumentParser) -> "CLIEntrypoint":
    def _print_help(gc: "GlobalConfig", args: argparse.Namespace) -> int:
        p.print_help()
        return 0

    return _print_help


class RootCommand(
    BaseCommand,
    cmd=None,
    has_subcommands=True,
    has_main=False,
    prog=RLIST_ENTRYPOINT_NAME,
    description="Keep a reading list of bibliographic records in a plain text file",
):
    @classmethod
    def configure_args(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        from .version_cli import cli_version

        p.add_argument(
            "-V",
            "--version",
            action="store_const",
            dest="func",
            const=cli_version,
            help="Print version information",
        )
        p.add_argument(
            "--porcelain",
            action="store_true",
            help="Give the output in a machine-friendly format if applicable",
        )
