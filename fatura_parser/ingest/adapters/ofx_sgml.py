"""Adapter for OFX 1.x (SGML) statement exports.

Each ``<STMTTRN>...</STMTTRN>`` block becomes one transaction when it carries
``TRNAMT``, ``DTPOSTED`` and ``MEMO``. Element values are read up to the next
tag or line break, so both closed (``<MEMO>x</MEMO>``) and the unclosed SGML
form (``<MEMO>x``) are accepted.

Account-level adjustments (payments received, late-payment credits, fees and
similar) are recognized by memo and excluded; they are not purchases.
"""

from __future__ import annotations

import html
import re

from ...categories import detect_category
from ...logging_setup import get_logger
from ...models import Statement, Transaction, sum_amounts
from ...normalizers import clean_description, parse_flexible_amount

logger = get_logger("fatura_parser.ingest.adapters.ofx_sgml")

FALLBACK_BANK_NAME = "Nubank"

IGNORED_MEMOS: tuple[str, ...] = (
    "Pagamento recebido",
    "Crédito de atraso",
    "Saldo em atraso",
    "Ajuste a crédito",
    "Encerramento de dívida",
    "Encargos",
)

STMTTRN_RE = re.compile(r"<STMTTRN>(.*?)</STMTTRN>", re.DOTALL | re.IGNORECASE)
DTPOSTED_RE = re.compile(r"<DTPOSTED>\s*(\d{8})", re.IGNORECASE)


def _tag_value(content: str, tag: str) -> str | None:
    """Return the trimmed value of the first ``<tag>`` in ``content``."""

    m = re.search(rf"<{tag}>([^<\r\n]*)", content, re.IGNORECASE)
    return m.group(1).strip() if m else None


def _is_ignored(memo: str) -> bool:
    return any(phrase in memo for phrase in IGNORED_MEMOS)


def _parse_block(block: str) -> Transaction | None:
    raw_amount = _tag_value(block, "TRNAMT")
    posted = DTPOSTED_RE.search(block)
    memo = _tag_value(block, "MEMO")
    if raw_amount is None or posted is None or memo is None:
        logger.debug("dropping STMTTRN block missing TRNAMT/DTPOSTED/MEMO")
        return None

    memo = html.unescape(memo)
    if _is_ignored(memo):
        return None

    amount = parse_flexible_amount(raw_amount)
    if amount is None:
        logger.debug("dropping STMTTRN block with unparseable amount: %r", raw_amount)
        return None

    ymd = posted.group(1)
    return Transaction(
        date=f"{ymd[6:8]}/{ymd[4:6]}",
        description=clean_description(memo),
        category=detect_category(memo),
        amount=abs(amount),
        city="",
    )


def parse_ofx(text: str) -> Statement:
    """Parse OFX/SGML text into a :class:`~fatura_parser.models.Statement`.

    ``bank_name`` comes from ``<ORG>`` (``"Nubank"`` when absent),
    ``card_number`` from ``<ACCTID>`` and ``total_amount`` from ``<BALAMT>``
    as an absolute value, falling back to the transaction sum.
    """

    if not isinstance(text, str):
        raise TypeError(f"expected statement text as str, got {type(text).__name__}")

    transactions: list[Transaction] = []
    for m in STMTTRN_RE.finditer(text):
        tx = _parse_block(m.group(1))
        if tx is not None:
            transactions.append(tx)

    org = _tag_value(text, "ORG")
    acctid = _tag_value(text, "ACCTID")
    balamt_raw = _tag_value(text, "BALAMT")
    balamt = parse_flexible_amount(balamt_raw) if balamt_raw else None
    total = abs(balamt) if balamt is not None else sum_amounts(transactions)

    logger.debug("ofx: %d transactions, total=%s", len(transactions), total)
    return Statement(
        bank_name=html.unescape(org) if org else FALLBACK_BANK_NAME,
        card_holder="",
        card_number=acctid or "",
        due_date="",
        total_amount=total,
        transactions=tuple(transactions),
    )


__all__ = ["FALLBACK_BANK_NAME", "IGNORED_MEMOS", "parse_ofx"]
