from typing import Callable, Iterable

from rich.markup import escape

from . import GlobalConfig
from .editor import ConfigEditor
from .errors import InvalidConfigKeyError
from .schema import KNOWN_KEYS, decode_value, encode_value


def iter_effective_values(cfg: GlobalConfig) -> Iterable[tuple[str, str | None]]:
    """Yields ``(dotted key, encoded value or None)`` for every known
    option, in schema order."""

    for section, leaves in KNOWN_KEYS.items():
        for leaf in leaves:
            val = cfg.get_by_key((section, leaf))
            yield f"{section}.{leaf}", None if val is None else encode_value(val)


def do_config_get(cfg: GlobalConfig, key: str) -> int:
    try:
        val = cfg.get_by_key(key)
    except InvalidConfigKeyError as e:
        cfg.logger.F(str(e))
        return 1

    if val is None:
        return 1

    encoded = encode_value(val)
    cfg.logger.stdout(escape(encoded), end="" if encoded.endswith("\n") else "\n")
    return 0


def do_config_list(cfg: GlobalConfig) -> int:
    for key, val in iter_effective_values(cfg):
        if val is None:
            cfg.logger.stdout(f"{key} [dim](unset)[/]")
        else:
            # multi-line templates are shown the way they are set
            cfg.logger.stdout(f"{key} = {escape(repr(val))}")
    return 0


def _edit_user_config(cfg: GlobalConfig, edit: Callable[[ConfigEditor], None]) -> int:
    with ConfigEditor.work_on_user_local_config(cfg) as ed:
        edit(ed)
        ed.stage()

    cfg.logger.D(f"updated {ed.path}")
    return 0


def do_config_set(cfg: GlobalConfig, key: str, val: str) -> int:
    pyval = decode_value(key, val)
    # checked against the effective config before anything is written
    cfg.set_by_key(key, pyval)
    return _edit_user_config(cfg, lambda ed: ed.set_value(key, pyval))


def do_config_unset(cfg: GlobalConfig, key: str) -> int:
    return _edit_user_config(cfg, lambda ed: ed.unset_value(key))


def do_config_remove_section(cfg: GlobalConfig, section: str) -> int:
    return _edit_user_config(cfg, lambda ed: ed.remove_section(section))
