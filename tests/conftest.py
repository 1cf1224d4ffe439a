# Shared fixtures live in tests.fixtures; importing them here makes them
# available to every test module.
from tests.fixtures import (  # noqa: F401
    mock_gm,
    reading_list_file,
    records_file,
    rlist_cli_runner,
    rlist_config,
    rlist_logger,
)
