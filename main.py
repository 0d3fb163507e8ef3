#!/usr/bin/env python3
"""
Entry point for the photo mirror tool.
"""

import logging
import sys

from photomirror.config import load_config
from photomirror.errors import PhotoMirrorError
from photomirror.log_setup import setup_logging
from photomirror.syncer import PhotoMirror

log = logging.getLogger("photomirror")


def main(argv=None) -> int:
    try:
        config = load_config(argv)
    except PhotoMirrorError as e:
        setup_logging()
        log.error("%s", e)
        return 1

    setup_logging(config["log_level"], config["log_file"])

    mirror = PhotoMirror(config)
    try:
        # Login, scan, download new/changed, then remove orphans
        stats = mirror.run()
    except PhotoMirrorError as e:
        log.error("%s", e)
        return 1

    log.info(stats.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
