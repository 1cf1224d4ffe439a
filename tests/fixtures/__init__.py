from contextlib import redirect_stderr, redirect_stdout
from dataclasses import dataclass
import io
import os
import pathlib

import pytest

from rlist.cli.main import main as rlist_main
from rlist.config import GlobalConfig
from rlist.log import RListConsoleLogger, RListLogger
from rlist.utils.global_mode import GlobalMode


SAMPLE_RECORDS_TOML = """\
[smith2020]
author = "Smith, Jane"
title = "{On} Reading Lists"
year = "2020"
file = "papers/smith2020.pdf"
doi = "10.1000/xyz123"

[doe2019]
author = "Doe, John and Roe, Richard"
title = "Notes on Notes"
year = "2019"
url = "https://example.org/notes"
"""


@pytest.fixture
def mock_gm() -> GlobalMode:
    return GlobalMode(argv0="rlist")


@pytest.fixture
def rlist_logger(mock_gm: GlobalMode) -> RListLogger:
    """Fixture for creating a RListLogger instance."""
    return RListConsoleLogger(mock_gm)


@pytest.fixture
def records_file(tmp_path: pathlib.Path) -> pathlib.Path:
    p = tmp_path / "records.toml"
    p.write_text(SAMPLE_RECORDS_TOML, encoding="utf-8")
    return p


@pytest.fixture
def reading_list_file(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "reading-list.org"


@pytest.fixture
def rlist_config(
    mock_gm: GlobalMode,
    rlist_logger: RListLogger,
    reading_list_file: pathlib.Path,
    records_file: pathlib.Path,
) -> GlobalConfig:
    """A config with the reading list and record database under a temporary
    directory, and nothing loaded from the user's config files."""

    gc = GlobalConfig(mock_gm, rlist_logger)
    gc.set_by_key("reading_list.file", str(reading_list_file))
    gc.set_by_key("database.file", str(records_file))
    return gc


@dataclass
class CLIRunResult:
    exit_code: int
    stdout: str
    stderr: str


class IntegrationTestHarness:
    def __init__(
        self,
        env: dict[str, str],
        config_dir: pathlib.Path,
        reading_list_file: pathlib.Path,
    ) -> None:
        self._env = env
        self.config_dir = config_dir
        self.reading_list_file = reading_list_file

    def __call__(self, *args: str) -> CLIRunResult:
        return self.run(*args)

    def run(self, *args: str) -> CLIRunResult:
        argv = ["rlist", *args]
        stdout_io = io.StringIO()
        stderr_io = io.StringIO()
        with redirect_stdout(stdout_io), redirect_stderr(stderr_io):
            gm = GlobalMode.from_env(self._env, argv)
            logger = RListConsoleLogger(gm, stdout=stdout_io, stderr=stderr_io)
            gc = GlobalConfig.load_from_config(gm, logger)
            exit_code = rlist_main(gm, gc, argv)
        return CLIRunResult(exit_code, stdout_io.getvalue(), stderr_io.getvalue())

    @property
    def user_config_file(self) -> pathlib.Path:
        return self.config_dir / "rlist" / "config.toml"

    def write_user_config(self, content: str) -> None:
        self.user_config_file.parent.mkdir(parents=True, exist_ok=True)
        self.user_config_file.write_text(content, encoding="utf-8")


@pytest.fixture
def rlist_cli_runner(
    tmp_path: pathlib.Path,
    monkeypatch: pytest.MonkeyPatch,
) -> IntegrationTestHarness:
    base_dir = tmp_path / "integration-env"
    home_dir = base_dir / "home"
    config_dir = base_dir / "config"
    data_dir = base_dir / "data"

    for p in (home_dir, config_dir, data_dir):
        p.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    # keep system-wide config out of the way
    monkeypatch.setenv("XDG_CONFIG_DIRS", str(base_dir / "no-such-dir"))
    monkeypatch.delenv("RLIST_READING_LIST_FILE", raising=False)
    monkeypatch.delenv("RLIST_DEBUG", raising=False)
    monkeypatch.delenv("_ARGCOMPLETE", raising=False)

    records = data_dir / "records.toml"
    records.write_text(SAMPLE_RECORDS_TOML, encoding="utf-8")
    reading_list = data_dir / "reading-list.org"

    harness = IntegrationTestHarness(
        env=dict(os.environ),
        config_dir=config_dir,
        reading_list_file=reading_list,
    )
    harness.write_user_config(
        f'[reading_list]\nfile = "{reading_list}"\n\n[database]\nfile = "{records}"\n'
    )
    return harness
