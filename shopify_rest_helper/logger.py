"""Logging helpers.

The client logs through any :class:`logging.Logger`. ``leveled_logger``
builds one that mirrors the usual CLI convention: errors and warnings on
stderr, info and debug on stdout.
"""
from __future__ import annotations

import logging
import sys
from typing import IO, Optional

LOGGER_NAME = "shopify_rest_helper"

_FORMAT = "[%(levelname)s] %(message)s"


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def leveled_logger(
    level: int = logging.ERROR,
    stdout: Optional[IO[str]] = None,
    stderr: Optional[IO[str]] = None,
    name: str = f"{LOGGER_NAME}.leveled",
) -> logging.Logger:
    """Return a logger writing ERROR/WARNING to ``stderr`` and INFO/DEBUG to ``stdout``.

    Calling it again with the same ``name`` replaces the previous handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = logging.Formatter(_FORMAT)

    err = logging.StreamHandler(stderr if stderr is not None else sys.stderr)
    err.setLevel(logging.WARNING)
    err.setFormatter(formatter)

    out = logging.StreamHandler(stdout if stdout is not None else sys.stdout)
    out.addFilter(_BelowWarning())
    out.setFormatter(formatter)

    logger.addHandler(err)
    logger.addHandler(out)
    return logger
