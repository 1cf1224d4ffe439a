import argparse
from typing import TYPE_CHECKING

from .cmd import RootCommand

if TYPE_CHECKING:
    from ..config import GlobalConfig


class ConfigCommand(
    RootCommand,
    cmd="config",
    has_subcommands=True,
    help="Manage rlist's config options",
):
    pass


def _add_key_argument(p: argparse.ArgumentParser, help: str) -> None:
    p.add_argument("key", type=str, help=f"{help}, e.g. reading_list.file")


class ConfigGetCommand(
    ConfigCommand,
    cmd="get",
    help="Query the value of a config option",
):
    @classmethod
    def configure_args(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        _add_key_argument(p, "The config option to query")

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from ..config.ops import do_config_get

        return do_config_get(cfg, args.key)


class ConfigListCommand(
    ConfigCommand,
    cmd="list",
    aliases=["ls"],
    help="Show the effective value of every config option",
):
    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from ..config.ops import do_config_list

        return do_config_list(cfg)


class ConfigSetCommand(
    ConfigCommand,
    cmd="set",
    help="Set the value of a config option",
    description="Sets a config option in the user's config file. In reading_list.template, \\n stands for a line break.",
):
    @classmethod
    def configure_args(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        _add_key_argument(p, "The config option to set")
        p.add_argument("value", type=str, help="The value to set the option to")

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from ..config.ops import do_config_set

        return do_config_set(cfg, args.key, args.value)


class ConfigUnsetCommand(
    ConfigCommand,
    cmd="unset",
    help="Unset a config option",
):
    @classmethod
    def configure_args(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        _add_key_argument(p, "The config option to unset")

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from ..config.ops import do_config_unset

        return do_config_unset(cfg, args.key)


class ConfigRemoveSectionCommand(
    ConfigCommand,
    cmd="remove-section",
    help="Remove a section from the config",
):
    @classmethod
    def configure_args(cls, gc: "GlobalConfig", p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "section",
            type=str,
            help="The section to remove, e.g. strategies",
        )

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from ..config.ops import do_config_remove_section

        return do_config_remove_section(cfg, args.section)
