#!/usr/bin/env python3

import sys

from rlist.utils.global_mode import GlobalMode


def entrypoint() -> None:
    gm = GlobalMode.from_env(argv=sys.argv)

    # NOTE: importing rich through rlist.log is comparatively slow, so the
    # heavier modules are only imported from here on
    from rlist.config import GlobalConfig
    from rlist.config.errors import MalformedConfigFileError
    from rlist.cli.main import main
    from rlist.log import RListConsoleLogger

    logger = RListConsoleLogger(gm)
    if not sys.argv:
        logger.F("no argv?")
        sys.exit(1)

    try:
        gc = GlobalConfig.load_from_config(gm, logger)
    except MalformedConfigFileError as e:
        logger.F(str(e))
        sys.exit(1)

    sys.exit(main(gm, gc, sys.argv))


if __name__ == "__main__":
    entrypoint()
