"""Logging setup for CLI entry points."""

from __future__ import annotations

import logging

# httpx logs every request line at INFO, which drowns out save traces.
NOISY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Initialise the root logger with a terse CLI format.

    ``verbose`` switches to DEBUG and leaves the HTTP client loggers alone;
    otherwise those are raised to WARNING. Pass ``force=True`` to reconfigure
    during tests.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    if not verbose:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
