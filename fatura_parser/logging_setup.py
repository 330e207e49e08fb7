"""Logging for ``fatura_parser``.

The parsers run inside other programs (an upload service, the CLI), so the
package stays silent until an entry point calls :func:`configure_logging`.
Until then the ``fatura_parser`` logger only carries a ``NullHandler``.

Parsers and the exporter never attach their own handlers. They call
``get_logger("fatura_parser.<module>")`` and rely on the host application
(or the CLI) to configure output.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "fatura_parser"
LOG_LEVEL_ENV = "FATURA_PARSER_LOG_LEVEL"
_CONFIGURED = False

DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV)
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Send ``fatura_parser`` records to ``stream`` (stderr by default).

    ``level`` falls back to ``FATURA_PARSER_LOG_LEVEL``, then WARNING; unknown
    level names also mean WARNING. Later calls are no-ops until
    :func:`reset_logging`.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def reset_logging() -> None:
    """Drop handlers installed by :func:`configure_logging` (used by tests)."""

    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, keeping the package silent if unconfigured."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "reset_logging"]
