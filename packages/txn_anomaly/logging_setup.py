"""Logging for ``txn_anomaly``.

Library modules log through ``get_logger("txn_anomaly.<module>")`` and never
attach handlers. The package logger carries a ``NullHandler`` from import
time, so embedding applications see nothing until they opt in.

Levels used across the package:

- ``ERROR``: a batch was rejected (missing required columns).
- ``INFO``: one line per scored batch with its status counts, and exports.
- ``DEBUG``: degraded fields, i.e. cells that were coerced instead of failing
  the batch (amount → ``0``, unparseable date, malformed quoting).

Every record is stamped with the label of the batch being processed
(:func:`batch_context`), so degraded-field lines from the parser and the
scorer can be traced to the file they came from. Outside a batch the label
is ``"-"``.

``configure_logging`` installs the package's single stream handler and
returns it; ``reset_logging`` removes it again so a host (or a test) can
reconfigure.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import IO

PACKAGE_LOGGER = "txn_anomaly"
LEVEL_ENV_VAR = "TXN_ANOMALY_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(batch)s] %(message)s"

_batch_label: ContextVar[str] = ContextVar("txn_anomaly_batch", default="-")
_handler: logging.Handler | None = None

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class BatchLabelFilter(logging.Filter):
    """Stamp ``record.batch`` with the label of the current batch."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.batch = _batch_label.get()
        return True


@contextmanager
def batch_context(label: str) -> Iterator[None]:
    """Label every log record emitted inside the block with ``label``."""

    token = _batch_label.set(label)
    try:
        yield
    finally:
        _batch_label.reset(token)


def resolve_level(level: int | str | None = None) -> int:
    """Level from ``level``, else ``TXN_ANOMALY_LOG_LEVEL``, else ``INFO``.

    Unknown names fall back to ``INFO`` rather than failing the CLI.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Attach the package's stream handler; later calls return the same one.

    ``stream`` defaults to ``sys.stderr`` as it is at call time.
    """

    global _handler
    if _handler is not None:
        return _handler

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler.addFilter(BatchLabelFilter())

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _handler = handler
    return handler


def reset_logging() -> None:
    """Detach the handler installed by :func:`configure_logging`, if any."""

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler.close()
        _handler = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Logger under the package namespace (``"parser"`` → ``"txn_anomaly.parser"``)."""

    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


__all__ = [
    "DEFAULT_FORMAT",
    "LEVEL_ENV_VAR",
    "PACKAGE_LOGGER",
    "BatchLabelFilter",
    "batch_context",
    "configure_logging",
    "get_logger",
    "reset_logging",
    "resolve_level",
]
