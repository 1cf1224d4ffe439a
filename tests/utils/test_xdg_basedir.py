import pathlib

from rlist.utils.xdg_basedir import XDGPathEntry, app_config_search_path, config_home


def test_config_home() -> None:
    assert config_home({"XDG_CONFIG_HOME": "/x/cfg"}) == pathlib.Path("/x/cfg")
    assert config_home({"XDG_CONFIG_HOME": ""}) == pathlib.Path.home() / ".config"


def test_app_config_search_path() -> None:
    env = {"XDG_CONFIG_HOME": "/home/u/.config", "XDG_CONFIG_DIRS": "/a:/b"}
    assert app_config_search_path("rlist", env) == [
        XDGPathEntry(pathlib.Path("/b/rlist"), True),
        XDGPathEntry(pathlib.Path("/a/rlist"), True),
        XDGPathEntry(pathlib.Path("/home/u/.config/rlist"), False),
    ]

    p = app_config_search_path("rlist", {"XDG_CONFIG_HOME": "/c"})
    assert p[0] == XDGPathEntry(pathlib.Path("/etc/xdg/rlist"), True)
