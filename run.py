#!/usr/bin/env python
"""Development server with hot reload and DEBUG logs for treedrop itself."""

import logging

from treedrop import main

if __name__ in {"__main__", "__mp_main__"}:
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
    # Drag decisions and reorders log at DEBUG under the treedrop namespace
    logging.getLogger("treedrop").setLevel(logging.DEBUG)
    logging.getLogger("watchfiles").setLevel(logging.WARNING)
    main()
