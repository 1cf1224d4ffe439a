import argparse
from typing import TYPE_CHECKING

from .cmd import RootCommand

if TYPE_CHECKING:
    from ..config import GlobalConfig


class VersionCommand(
    RootCommand,
    cmd="version",
    help="Print version information",
):
    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        return cli_version(cfg, args)


def cli_version(cfg: "GlobalConfig", args: argparse.Namespace) -> int:
    from ..version import COPYRIGHT_NOTICE, RLIST_SEMVER

    cfg.logger.stdout(f"rlist {RLIST_SEMVER}\n")
    cfg.logger.stdout(COPYRIGHT_NOTICE)
    return 0
