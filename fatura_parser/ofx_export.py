"""Serialize a :class:`~fatura_parser.models.Statement` as OFX 1.0.2 (SGML).

The output layout is fixed so financial software importers see the same
structure for every statement:

- the SGML header block, a blank line, then ``<OFX>``
- a sign-on response (status + language)
- one credit-card statement response: currency, account id, the transaction
  list and the ledger balance
- the ``<FI><ORG>`` footer

Transactions carry no year, so one is inferred from ``due_date``
(``DD/MM/YYYY``) or taken from the current date. Amounts are written as
debits (negative, two decimals). ``FITID`` is the posted date followed by the
4-digit zero-padded position of the transaction, unique within one export.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from .logging_setup import get_logger
from .models import Statement, Transaction

logger = get_logger("fatura_parser.ofx_export")

OFX_HEADER: tuple[str, ...] = (
    "OFXHEADER:100",
    "DATA:OFXSGML",
    "VERSION:102",
    "SECURITY:NONE",
    "ENCODING:UTF-8",
    "CHARSET:1252",
    "COMPRESSION:NONE",
    "OLDFILEUID:NONE",
    "NEWFILEUID:NONE",
)

_STATUS_OK = "<STATUS><CODE>0</CODE><SEVERITY>INFO</SEVERITY></STATUS>"


def infer_year(due_date: str, *, today: date | None = None) -> int:
    """Return the year of a ``DD/MM/YYYY`` due date, else the current year."""

    parts = due_date.split("/") if due_date else []
    if len(parts) == 3:
        try:
            return int(parts[2])
        except ValueError:
            pass
    return (today or date.today()).year


def to_ofx_date(date_ddmm: str, year: int) -> str:
    """Join a ``DD/MM`` label with ``year`` into ``YYYYMMDD``."""

    parts = date_ddmm.strip().split("/")
    if len(parts) >= 2 and parts[0].isdigit() and parts[1].isdigit():
        return f"{year}{parts[1].zfill(2)}{parts[0].zfill(2)}"
    # CSV dates in unknown shapes are passed through by the parser.
    logger.warning("unrecognized transaction date %r; exporting as 01/01", date_ddmm)
    return f"{year}0101"


def fit_id(date_ofx: str, index: int) -> str:
    return f"{date_ofx}{index:04d}"


def _fmt_debit(amount: Decimal) -> str:
    q = abs(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    # No "-0.00" for zero amounts.
    return f"{-q:.2f}" if q else f"{q:.2f}"


def _escape(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _transaction_block(tx: Transaction, index: int, year: int) -> str:
    date_ofx = to_ofx_date(tx.date, year)
    return "\n".join(
        (
            "<STMTTRN>",
            "<TRNTYPE>DEBIT</TRNTYPE>",
            f"<DTPOSTED>{date_ofx}</DTPOSTED>",
            f"<TRNAMT>{_fmt_debit(tx.amount)}</TRNAMT>",
            f"<FITID>{fit_id(date_ofx, index)}</FITID>",
            f"<MEMO>{_escape(tx.description)}</MEMO>",
            "</STMTTRN>",
        )
    )


def export_ofx(statement: Statement, *, today: date | None = None) -> str:
    """Return ``statement`` as OFX/SGML text.

    Parameters
    ----------
    statement:
        Any parsed statement; no exportability checks are made and an empty
        transaction list produces an empty ``<BANKTRANLIST>``.
    today:
        Reference date for the year fallback (defaults to ``date.today()``).
    """

    year = infer_year(statement.due_date, today=today)
    transactions = "\n".join(
        _transaction_block(tx, i, year) for i, tx in enumerate(statement.transactions)
    )

    body = (
        "<OFX>",
        "<SIGNONMSGSRSV1>",
        "<SONRS>",
        _STATUS_OK,
        "<LANGUAGE>POR</LANGUAGE>",
        "</SONRS>",
        "</SIGNONMSGSRSV1>",
        "<CREDITCARDMSGSRSV1>",
        "<CCSTMTTRNRS>",
        "<TRNUID>1</TRNUID>",
        _STATUS_OK,
        "<CCSTMTRS>",
        "<CURDEF>BRL</CURDEF>",
        "<CCACCTFROM>",
        f"<ACCTID>{_escape(statement.card_number)}</ACCTID>",
        "</CCACCTFROM>",
        "<BANKTRANLIST>",
        transactions,
        "</BANKTRANLIST>",
        "<LEDGERBAL>",
        f"<BALAMT>{_fmt_debit(statement.total_amount)}</BALAMT>",
        "</LEDGERBAL>",
        "</CCSTMTRS>",
        "</CCSTMTTRNRS>",
        "</CREDITCARDMSGSRSV1>",
        f"<FI><ORG>{_escape(statement.bank_name)}</ORG></FI>",
        "</OFX>",
    )

    logger.debug(
        "exporting %d transactions as OFX (year=%d)", len(statement.transactions), year
    )
    return "\n".join(OFX_HEADER) + "\n\n" + "\n".join(body) + "\n"


__all__ = ["OFX_HEADER", "export_ofx", "fit_id", "infer_year", "to_ofx_date"]
