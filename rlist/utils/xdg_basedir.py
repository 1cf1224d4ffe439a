# Only the config-related part of the XDG Base Directory Specification is
# needed here: the reading list itself lives wherever the user points it to.

import os
import pathlib
from typing import Mapping, NamedTuple


class XDGPathEntry(NamedTuple):
    path: pathlib.Path
    is_global: bool


def config_home(env: Mapping[str, str] | None = None) -> pathlib.Path:
    env = os.environ if env is None else env
    if v := env.get("XDG_CONFIG_HOME"):
        return pathlib.Path(v)
    return pathlib.Path.home() / ".config"


def app_config_search_path(
    app_name: str,
    env: Mapping[str, str] | None = None,
) -> list[XDGPathEntry]:
    """Returns the app's config directories, from lowest to highest
    precedence: every ``$XDG_CONFIG_DIRS`` entry, then the user's own."""

    env = os.environ if env is None else env
    dirs_var = env.get("XDG_CONFIG_DIRS") or "/etc/xdg"
    system_dirs = [p for p in dirs_var.split(":") if p]

    # XDG_CONFIG_DIRS lists the most important directory first
    result = [
        XDGPathEntry(pathlib.Path(p) / app_name, True) for p in reversed(system_dirs)
    ]
    result.append(XDGPathEntry(config_home(env) / app_name, False))
    return result
