import os
from typing import Any

import tomlkit


def load_toml_file(path: "os.PathLike[Any] | str") -> tomlkit.TOMLDocument | None:
    """Parses the TOML file at ``path``, returning None if it does not exist.

    Parse errors are propagated as ``tomlkit.exceptions.ParseError``."""

    try:
        with open(path, "rb") as fp:
            return tomlkit.load(fp)
    except FileNotFoundError:
        return None


def unwrap_str_table(tbl: object) -> dict[str, str] | None:
    """Returns a plain ``str -> str`` copy of a TOML table, or None if ``tbl``
    is not a table. Non-string values are stringified."""

    if not isinstance(tbl, dict):
        return None
    return {str(k): str(v) for k, v in tbl.items()}
