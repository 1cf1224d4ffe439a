"""Process-wide switches decided once at startup, before config is loaded."""

from dataclasses import dataclass
import os
from typing import Final, Mapping, Protocol, Sequence

ENV_DEBUG: Final = "RLIST_DEBUG"
ENV_READING_LIST_FILE: Final = "RLIST_READING_LIST_FILE"
ENV_ARGCOMPLETE: Final = "_ARGCOMPLETE"

PORCELAIN_FLAG: Final = "--porcelain"

TRUTHY_ENV_VAR_VALUES: Final = {"1", "true", "x", "y", "yes"}


def is_env_var_truthy(env: Mapping[str, str], var: str) -> bool:
    if v := env.get(var):
        return v.lower() in TRUTHY_ENV_VAR_VALUES
    return False


class ProvidesGlobalMode(Protocol):
    argv0: str
    is_debug: bool
    is_porcelain: bool
    is_cli_autocomplete: bool
    reading_list_file_override: str | None


@dataclass
class GlobalMode:
    argv0: str = ""
    is_debug: bool = False
    is_porcelain: bool = False
    """Switched on early from argv so that startup logs are already JSON, and
    settled later by the argument parser."""
    is_cli_autocomplete: bool = False
    reading_list_file_override: str | None = None

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        argv: Sequence[str] | None = None,
    ) -> "GlobalMode":
        if env is None:
            env = os.environ
        argv = list(argv or ())

        return cls(
            argv0=argv[0] if argv else "",
            is_debug=is_env_var_truthy(env, ENV_DEBUG),
            # only accepted right after the program name
            is_porcelain=argv[1:2] == [PORCELAIN_FLAG],
            # argcomplete sets this on every completion request
            is_cli_autocomplete=ENV_ARGCOMPLETE in env,
            reading_list_file_override=env.get(ENV_READING_LIST_FILE) or None,
        )
