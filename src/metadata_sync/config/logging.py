"""Logging setup for the command line."""

from __future__ import annotations

import logging

# Request lines from these libraries only show up with --verbose.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    ``verbose`` lowers the level to DEBUG, which also logs every metadata
    command and HTTP request. ``force`` replaces handlers installed earlier.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
