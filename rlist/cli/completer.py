"""
completers for CLI arguments, only ever invoked under argcomplete
"""

import argparse
from typing import Any, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import GlobalConfig


class DynamicCompleter(Protocol):
    def __call__(
        self,
        prefix: str,
        parsed_args: object,
        **kwargs: Any,
    ) -> list[str]: ...


def record_key_completer_builder(
    cfg: "GlobalConfig",
    tracked_only: bool = False,
) -> DynamicCompleter:
    """Completes record keys from the configured database, or only the keys
    already on the reading list if ``tracked_only``."""

    def f(prefix: str, parsed_args: object, **kwargs: Any) -> list[str]:
        if tracked_only:
            keys = [x.key for x in cfg.reading_list.list_items()]
        else:
            keys = list(cfg.database.keys())
        return sorted(k for k in keys if k.startswith(prefix))

    return f


def add_record_keys_argument(
    gc: "GlobalConfig",
    p: argparse.ArgumentParser,
    help: str,
    tracked_only: bool = False,
) -> argparse.Action:
    a = p.add_argument("key", type=str, nargs="+", help=help)
    if gc.is_cli_autocomplete:
        # argcomplete looks for this attribute on the action
        a.completer = record_key_completer_builder(  # type: ignore[attr-defined]
            gc, tracked_only
        )
    return a
