"""Format detection and dispatch to the statement adapters.

Detection strategy, first match wins:

1. An OFX signature (``<OFX>`` or ``OFXHEADER``) anywhere in the text.
2. A CSV header on the first non-blank line (a ``data`` column, optionally quoted,
   followed by ``,`` or ``;``).
3. An Itaú name marker anywhere in the text.
4. Fallback to the Itaú PDF-text adapter, which yields an empty statement for
   text it does not understand.

OFX and CSV signatures are checked first because they are structural, while
issuer names can appear in any free text.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from enum import StrEnum

from ..logging_setup import get_logger
from ..models import Statement
from .adapters.delimited_csv import parse_csv
from .adapters.itau_pdf_text import parse_pdf_layout
from .adapters.ofx_sgml import parse_ofx

logger = get_logger("fatura_parser.ingest.utils")

OFX_MARKERS: tuple[str, ...] = ("<OFX>", "OFXHEADER")
ITAU_MARKERS: tuple[str, ...] = ("Itaú", "itau", "ITAÚ", "Cartões")
CSV_HEADER_RE = re.compile(r'^\s*\ufeff?\s*"?data"?\s*[,;]')


class StatementFormat(StrEnum):
    OFX = "ofx"
    CSV = "csv"
    PDF = "pdf"


_PARSERS: dict[StatementFormat, Callable[[str], Statement]] = {
    StatementFormat.OFX: parse_ofx,
    StatementFormat.CSV: parse_csv,
    StatementFormat.PDF: parse_pdf_layout,
}


def _first_non_blank_line(text: str) -> str:
    return next((ln for ln in text.splitlines() if ln.strip()), "")


def detect_format(text: str) -> StatementFormat:
    """Sniff ``text`` and return the format whose adapter should parse it."""

    if any(marker in text for marker in OFX_MARKERS):
        return StatementFormat.OFX
    if CSV_HEADER_RE.match(_first_non_blank_line(text).lower()):
        return StatementFormat.CSV
    if not any(marker in text for marker in ITAU_MARKERS):
        logger.debug("no format signature found; falling back to the Itaú adapter")
    return StatementFormat.PDF


def parse_statement(text: str, *, forced_format: StatementFormat | str | None = None) -> Statement:
    """Parse statement text in any supported format.

    Never fails for unrecognized input: unknown text goes through the Itaú
    adapter and typically produces a statement without transactions.
    ``forced_format`` skips detection when the caller already knows the
    format (e.g. from the file extension).
    """

    if not isinstance(text, str):
        raise TypeError(f"expected statement text as str, got {type(text).__name__}")

    fmt = StatementFormat(forced_format) if forced_format else detect_format(text)
    statement = _PARSERS[fmt](text)
    logger.info(
        "parsed %s statement: bank=%s transactions=%d",
        fmt.value,
        statement.bank_name,
        len(statement.transactions),
    )
    return statement


# Name used by upload handlers.
detect_and_parse = parse_statement


__all__ = ["StatementFormat", "detect_and_parse", "detect_format", "parse_statement"]
