"""Adapter for text extracted from Itaú credit-card statement PDFs.

The extracted text is scanned line by line (trimmed, blank lines dropped) in
two independent passes:

1. Metadata: card number, due date, card holder and the statement total.
2. Transactions: only lines inside a "Lançamentos" section are considered.
   A transaction line looks like::

       18/11 AMAZON BRSAO P 03/03 206,33

   i.e. ``DD/MM``, a description (optionally ending in an ``NN/NN``
   installment label) and a Brazilian-formatted amount. The line right after
   it usually carries the issuer's category and the merchant city, separated
   by two or more spaces::

       SAUDE  PORTO ALEGRE

   That detail line is consumed together with its transaction.

Lines that do not match are skipped silently; the parser never raises for
data problems.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from ...categories import detect_category, infer_category
from ...logging_setup import get_logger
from ...models import Statement, Transaction, sum_amounts
from ...normalizers import clean_description, format_city, parse_amount

logger = get_logger("fatura_parser.ingest.adapters.itau_pdf_text")

BANK_NAME = "Itaú"

# Metadata labels
CARD_PREFIX = "Cartão"
CARD_MASK = "XXXX"
DUE_DATE_PREFIX = "Vencimento:"
CARD_HOLDER_PREFIX = "Titular"
TOTAL_LABEL = "Total desta fatura"
TOTAL_LABEL_ALT = "O total da sua fatura é:"

# Transaction section
SECTION_START_MARKERS: tuple[str, ...] = ("Lançamentos:", "Lançamentos no cartão")
SECTION_END_MARKERS: tuple[str, ...] = ("Total dos lançamentos", "Caso você pague")
TABLE_HEADERS: frozenset[str] = frozenset({"DATA ESTABELECIMENTO VALOR EM R$", "DATA VALOR EM R$"})
# A detail line never starts with one of these.
DETAIL_STOP_PREFIXES: tuple[str, ...] = ("Lançamentos", "Total", "Caso")

TRANSACTION_LINE_RE = re.compile(r"^(\d{2}/\d{2})\s+(.+?)\s+([\d.,]+)$")
INSTALLMENT_RE = re.compile(r"\s+(\d{2}/\d{2})$")
DATE_PREFIX_RE = re.compile(r"^\d{2}/\d{2}\s")
DETAIL_SPLIT_RE = re.compile(r"\s{2,}")


class _LineCursor:
    """Explicit cursor over the document lines with one-line lookahead."""

    __slots__ = ("_lines", "pos")

    def __init__(self, lines: Sequence[str]) -> None:
        self._lines = lines
        self.pos = 0

    def __bool__(self) -> bool:
        return self.pos < len(self._lines)

    @property
    def current(self) -> str:
        return self._lines[self.pos]

    def peek(self, offset: int = 1) -> str | None:
        i = self.pos + offset
        return self._lines[i] if i < len(self._lines) else None

    def advance(self, n: int = 1) -> None:
        self.pos += n


def _split_lines(text: str) -> list[str]:
    return [s for s in (line.strip() for line in text.splitlines()) if s]


# ---------------------------------------------------------------------------
# Metadata pass
# ---------------------------------------------------------------------------


def _total_from(line: str, label: str, next_line: str | None) -> Decimal | None:
    inline = line[len(label) :].strip()
    if inline:
        value = parse_amount(inline)
        if value is not None:
            return value
    if next_line is None:
        return None
    return parse_amount(next_line)


def _scan_metadata(lines: Sequence[str]) -> dict[str, Any]:
    meta: dict[str, Any] = {"card_number": "", "due_date": "", "card_holder": "", "total": None}
    for i, line in enumerate(lines):
        next_line = lines[i + 1] if i + 1 < len(lines) else None
        if line.startswith(CARD_PREFIX) and CARD_MASK in line:
            meta["card_number"] = line.replace(CARD_PREFIX, "", 1).strip()
        if line.startswith(DUE_DATE_PREFIX):
            meta["due_date"] = line.replace(DUE_DATE_PREFIX, "", 1).strip()
        if line.startswith(CARD_HOLDER_PREFIX):
            meta["card_holder"] = line.replace(CARD_HOLDER_PREFIX, "", 1).strip()
        if line == TOTAL_LABEL or line.startswith(TOTAL_LABEL_ALT):
            label = TOTAL_LABEL if line == TOTAL_LABEL else TOTAL_LABEL_ALT
            value = _total_from(line, label, next_line)
            if value is not None:
                meta["total"] = value
    return meta


# ---------------------------------------------------------------------------
# Transaction pass
# ---------------------------------------------------------------------------


def _read_detail_line(next_line: str | None, description: str) -> tuple[str, str, int]:
    """Resolve ``(category, city, lines_consumed)`` from the line after a transaction.

    With several fields the first is the category hint and the last the
    city; a single field serves as both.
    """

    if (
        next_line is None
        or DATE_PREFIX_RE.match(next_line)
        or next_line.startswith(DETAIL_STOP_PREFIXES)
    ):
        return detect_category(description), "", 0

    parts = DETAIL_SPLIT_RE.split(next_line)
    hint = parts[0]
    city = parts[-1]
    return infer_category(hint, description), city, 1


def _parse_transaction(cursor: _LineCursor) -> Transaction | None:
    m = TRANSACTION_LINE_RE.match(cursor.current)
    if not m:
        return None
    date, raw_desc, raw_amount = m.groups()
    amount = parse_amount(raw_amount)
    if amount is None:
        logger.debug("skipping line with unparseable amount: %r", cursor.current)
        return None

    description = raw_desc.strip()
    installment: str | None = None
    im = INSTALLMENT_RE.search(description)
    if im:
        installment = im.group(1)
        description = description[: im.start()].strip()

    category, city, consumed = _read_detail_line(cursor.peek(), description)
    cursor.advance(consumed)

    return Transaction(
        date=date,
        description=clean_description(description),
        category=category,
        amount=amount,
        city=format_city(city),
        installment=installment,
    )


def _scan_transactions(lines: Sequence[str]) -> list[Transaction]:
    # Layouts without any section marker are scanned as a single section.
    in_section = not any(line.startswith(SECTION_START_MARKERS) for line in lines)
    transactions: list[Transaction] = []

    cursor = _LineCursor(lines)
    while cursor:
        line = cursor.current
        if line.startswith(SECTION_START_MARKERS):
            in_section = True
        elif line.startswith(SECTION_END_MARKERS):
            in_section = False
        elif in_section and line not in TABLE_HEADERS:
            tx = _parse_transaction(cursor)
            if tx is not None:
                transactions.append(tx)
        cursor.advance()
    return transactions


def parse_pdf_layout(text: str) -> Statement:
    """Parse Itaú statement text into a :class:`~fatura_parser.models.Statement`.

    ``total_amount`` is the figure printed next to the total label; when the
    text has none it falls back to the sum of the parsed transactions.
    """

    if not isinstance(text, str):
        raise TypeError(f"expected statement text as str, got {type(text).__name__}")

    lines = _split_lines(text)
    meta = _scan_metadata(lines)
    transactions = tuple(_scan_transactions(lines))
    total = meta["total"] if meta["total"] is not None else sum_amounts(transactions)

    logger.debug(
        "itau: %d lines, %d transactions, total=%s", len(lines), len(transactions), total
    )
    return Statement(
        bank_name=BANK_NAME,
        card_holder=meta["card_holder"],
        card_number=meta["card_number"],
        due_date=meta["due_date"],
        total_amount=total,
        transactions=transactions,
    )


__all__ = ["BANK_NAME", "parse_pdf_layout"]
