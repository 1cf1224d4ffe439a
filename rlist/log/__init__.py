import abc
import datetime
from functools import cached_property
import io
import sys
import time
from typing import Any, Final, TextIO, TYPE_CHECKING

if TYPE_CHECKING:
    # too heavy at package import time
    from rich.console import Console, RenderableType
    from rich.text import Text

from ..utils.global_mode import ProvidesGlobalMode
from ..utils.porcelain import PorcelainEntity, PorcelainEntityType, PorcelainOutput


class PorcelainLog(PorcelainEntity):
    t: int
    """Timestamp of the message line in microseconds"""

    lvl: str
    """Log level of the message line (one of D, F, I, W)"""

    msg: str
    """Message content, with console markup rendered away"""


LEVEL_DEBUG: Final = "D"
LEVEL_FATAL: Final = "F"
LEVEL_INFO: Final = "I"
LEVEL_WARN: Final = "W"

_LEVEL_PREFIXES: Final = {
    LEVEL_FATAL: "[bold red]fatal error:[/]",
    LEVEL_INFO: "[bold green]info:[/]",
    LEVEL_WARN: "[bold yellow]warn:[/]",
}


def log_time_formatter(x: datetime.datetime) -> "Text":
    from rich.text import Text

    return Text(f"debug: [{x.isoformat()}]")


def render_plain(message: "RenderableType", *objects: Any, sep: str = " ") -> str:
    from rich.console import Console

    with io.StringIO() as buf:
        Console(file=buf, color_system=None, soft_wrap=True).print(
            message, *objects, sep=sep, end=""
        )
        return buf.getvalue()


class RListLogger(metaclass=abc.ABCMeta):
    """Leveled user-facing output.

    ``D`` is for debugging only, ``I``/``W``/``F`` report progress, problems
    and fatal errors, and ``stdout`` carries a command's actual output."""

    @abc.abstractmethod
    def stdout(
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def log(
        self,
        lvl: str,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def porcelain_stdout(self) -> PorcelainOutput:
        """Where commands emit their porcelain entities."""
        raise NotImplementedError

    def D(self, message: "RenderableType", *objects: Any, sep: str = " ") -> None:
        self.log(LEVEL_DEBUG, message, *objects, sep=sep)

    def F(self, message: "RenderableType", *objects: Any, sep: str = " ") -> None:
        self.log(LEVEL_FATAL, message, *objects, sep=sep)

    def I(  # noqa: E743 # short level names, same as D/W/F
        self, message: "RenderableType", *objects: Any, sep: str = " "
    ) -> None:
        self.log(LEVEL_INFO, message, *objects, sep=sep)

    def W(self, message: "RenderableType", *objects: Any, sep: str = " ") -> None:
        self.log(LEVEL_WARN, message, *objects, sep=sep)


class RListConsoleLogger(RListLogger):
    def __init__(
        self,
        gm: ProvidesGlobalMode,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._gm = gm
        # resolved late so that redirected streams are honored
        self._stdout = stdout
        self._stderr = stderr

    @property
    def _out(self) -> TextIO:
        return sys.stdout if self._stdout is None else self._stdout

    @property
    def _err(self) -> TextIO:
        return sys.stderr if self._stderr is None else self._stderr

    @cached_property
    def _stdout_console(self) -> "Console":
        from rich.console import Console

        return Console(file=self._out, highlight=False, soft_wrap=True)

    @cached_property
    def _stderr_console(self) -> "Console":
        from rich.console import Console

        return Console(
            file=self._err,
            highlight=False,
            log_time_format=log_time_formatter,
            soft_wrap=True,
        )

    @cached_property
    def porcelain_stdout(self) -> PorcelainOutput:
        return PorcelainOutput(self._out)

    @cached_property
    def _porcelain_stderr(self) -> PorcelainOutput:
        return PorcelainOutput(self._err)

    def stdout(
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        self._stdout_console.print(message, *objects, sep=sep, end=end)

    def log(
        self,
        lvl: str,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        if lvl == LEVEL_DEBUG and not self._gm.is_debug:
            return

        if self._gm.is_porcelain:
            obj: PorcelainLog = {
                "ty": PorcelainEntityType.LogV1,
                "t": int(time.time() * 1000000),
                "lvl": lvl,
                "msg": render_plain(message, *objects, sep=sep),
            }
            self._porcelain_stderr.emit(obj)
            return

        if lvl == LEVEL_DEBUG:
            # point the source location at whoever called D()
            self._stderr_console.log(
                message, *objects, sep=sep, end=end, _stack_offset=3
            )
            return

        self._stderr_console.print(
            f"{_LEVEL_PREFIXES[lvl]} {message}",
            *objects,
            sep=sep,
            end=end,
        )


def humanize_list(
    obj: list[str] | set[str],
    *,
    sep: str = ", ",
    item_color: str | None = None,
    empty_prompt: str = "(none)",
) -> str:
    if not obj:
        return empty_prompt
    if item_color is None:
        return sep.join(obj)
    return sep.join(f"[{item_color}]{x}[/]" for x in obj)
