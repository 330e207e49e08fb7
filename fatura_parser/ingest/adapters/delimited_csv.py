"""Adapter for ad-hoc CSV statement exports (e.g. Itaú "Lançamentos" CSV).

Contract
--------
- The first non-blank line is the header. The delimiter is ``;`` when the
  header contains ``;`` and no ``,``; otherwise ``,``.
- Header cells are matched accent- and case-insensitively. Required columns:
  ``data``, ``lancamento`` and ``valor``.
- Rows are read with the stdlib :mod:`csv` module, so quoted cells may hold
  the delimiter.

Failure mode
------------
A header without the required columns yields an empty statement instead of
raising: the file is "not this format" and the caller decides what to tell the
user. The mismatch is logged at WARNING so it can be told apart from a CSV
whose rows were all filtered out.
"""

from __future__ import annotations

import csv
import re
from collections.abc import Iterator, Sequence
from io import StringIO
from typing import NamedTuple

from ...categories import detect_category
from ...logging_setup import get_logger
from ...models import Statement, Transaction, sum_amounts
from ...normalizers import clean_description, parse_flexible_amount, strip_accents

logger = get_logger("fatura_parser.ingest.adapters.delimited_csv")

BANK_NAME = "CSV"

REQUIRED_HEADERS: tuple[str, str, str] = ("data", "lancamento", "valor")

# Refund and payment rows, matched on the accent-stripped lower-cased text.
IGNORED_DESCRIPTIONS: tuple[str, ...] = ("pagamento", "estorno", "devolucao")

DATE_DASH_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_SLASH_RE = re.compile(r"^\d{2}/\d{2}(/\d{4})?$")


class _Columns(NamedTuple):
    date: int
    description: int
    amount: int


def _normalize_header(cell: str) -> str:
    return strip_accents(cell.lstrip("\ufeff")).lower().strip()


def _locate_columns(header: Sequence[str]) -> _Columns | None:
    normalized = [_normalize_header(c) for c in header]
    try:
        return _Columns(*(normalized.index(name) for name in REQUIRED_HEADERS))
    except ValueError:
        return None


def _format_date(raw: str) -> str:
    s = raw.strip()
    if DATE_DASH_RE.match(s):
        _year, month, day = s.split("-")
        return f"{day}/{month}"
    if DATE_SLASH_RE.match(s):
        day, month = s.split("/")[:2]
        return f"{day}/{month}"
    return s


def _detect_delimiter(header_line: str) -> str:
    return ";" if ";" in header_line and "," not in header_line else ","


def _read_rows(text: str, delimiter: str) -> Iterator[list[str]]:
    # newline="" lets csv see bare \r record terminators.
    with StringIO(text, newline="") as f:
        for row in csv.reader(f, delimiter=delimiter):
            cells = [c.strip() for c in row]
            # Skip blank lines (all values empty)
            if any(cells):
                yield cells


def _row_to_transaction(row: Sequence[str], cols: _Columns) -> Transaction | None:
    raw_date = row[cols.date]
    raw_description = row[cols.description]
    raw_amount = row[cols.amount]
    if not raw_date or not raw_description or not raw_amount:
        return None

    folded = strip_accents(raw_description).lower()
    if any(word in folded for word in IGNORED_DESCRIPTIONS):
        return None

    amount = parse_flexible_amount(raw_amount)
    if amount is None:
        logger.debug("skipping CSV row with unparseable amount: %r", raw_amount)
        return None

    description = clean_description(raw_description)
    return Transaction(
        date=_format_date(raw_date),
        description=description,
        category=detect_category(description),
        amount=abs(amount),
        city="",
    )


def parse_csv(text: str) -> Statement:
    """Parse a delimited statement export into a :class:`~fatura_parser.models.Statement`.

    ``total_amount`` is always the sum of the parsed rows; CSV exports carry
    no authoritative total.
    """

    if not isinstance(text, str):
        raise TypeError(f"expected statement text as str, got {type(text).__name__}")

    header_line = next((ln for ln in text.splitlines() if ln.strip()), None)
    if header_line is None:
        return Statement(bank_name=BANK_NAME)

    rows = _read_rows(text, _detect_delimiter(header_line))
    header = next(rows, None)
    cols = _locate_columns(header) if header is not None else None
    if cols is None:
        logger.warning(
            "CSV header mismatch: expected columns %s, got %r",
            ", ".join(REQUIRED_HEADERS),
            header,
        )
        return Statement(bank_name=BANK_NAME)

    transactions: list[Transaction] = []
    for row in rows:
        if len(row) < len(header):
            continue
        tx = _row_to_transaction(row, cols)
        if tx is not None:
            transactions.append(tx)

    logger.debug("csv: %d transactions", len(transactions))
    return Statement(
        bank_name=BANK_NAME,
        total_amount=sum_amounts(transactions),
        transactions=tuple(transactions),
    )


__all__ = ["BANK_NAME", "IGNORED_DESCRIPTIONS", "REQUIRED_HEADERS", "parse_csv"]
