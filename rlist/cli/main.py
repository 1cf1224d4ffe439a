import sys
from typing import TYPE_CHECKING

from ..config import GlobalConfig
from ..config.errors import ConfigurationError
from ..readlist.errors import PluginError
from ..utils.global_mode import ProvidesGlobalMode

if TYPE_CHECKING:
    from .cmd import CLIEntrypoint


def _report_fatal(gc: GlobalConfig, e: Exception) -> int:
    gc.logger.F(str(e))
    if isinstance(e, ConfigurationError) and gc.reading_list_file is None:
        gc.logger.I("set one with [yellow]rlist config set reading_list.file PATH[/]")
    return 1


def main(gm: ProvidesGlobalMode, gc: GlobalConfig, argv: list[str]) -> int:
    from .cmd import RootCommand
    from . import builtin_commands

    del builtin_commands

    p = RootCommand.build_argparse(gc)

    if gm.is_cli_autocomplete:
        import argcomplete

        argcomplete.autocomplete(p, always_complete_options=True)

    args = p.parse_args(argv[1:])
    gm.is_porcelain = args.porcelain

    gc.logger.D(f"argv[0] = {gm.argv0}, sys.executable = {sys.executable}")
    gc.logger.D(f"args={args}")

    func: "CLIEntrypoint" = args.func
    try:
        ret = func(gc, args)
        # flushes whatever the command left unsaved; not reached on failure
        if (h := gc.live_store) is not None:
            h.close()
        return ret
    except (ConfigurationError, PermissionError, PluginError) as e:
        return _report_fatal(gc, e)
