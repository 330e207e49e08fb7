"""Canonical statement models shared by every parser and the OFX exporter.

Each parser returns a :class:`Statement` holding its :class:`Transaction`
rows in document order. Both records are frozen ``dataclass`` instances with
explicit field order; they are built once per parse call and never mutated.

Field conventions
-----------------
- ``date``: ``DD/MM`` label. Statements do not carry a per-row year; the
  exporter infers one from ``due_date`` when it needs a calendar date.
- ``amount``: non-negative :class:`~decimal.Decimal`. Direction (debit) is
  implicit and only reinstated when exporting.
- ``city``: title-cased merchant city, ``""`` when the source has none.
- ``installment``: ``NN/NN`` (current/total) or ``None``.
- Statement metadata (``bank_name``, ``card_holder``, ``card_number``,
  ``due_date``) is ``""`` when the source format does not carry it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single spend line from a statement."""

    date: str
    description: str
    category: str
    amount: Decimal
    city: str = ""
    installment: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "date": self.date,
            "description": self.description,
            "category": self.category,
            "amount": _fmt_amount(self.amount),
            "city": self.city,
        }
        if self.installment:
            out["installment"] = self.installment
        return out


@dataclass(frozen=True, slots=True)
class Statement:
    """A normalized statement: metadata plus its ordered transactions.

    ``total_amount`` is the authoritative figure read from the source when
    the format has one (Itaú "Total desta fatura", OFX ``<BALAMT>``) and the
    sum of ``transactions`` otherwise.
    """

    bank_name: str = ""
    card_holder: str = ""
    card_number: str = ""
    due_date: str = ""
    total_amount: Decimal = Decimal("0")
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.transactions

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire shape served to statement viewers."""

        return {
            "bankName": self.bank_name,
            "cardHolder": self.card_holder,
            "cardNumber": self.card_number,
            "dueDate": self.due_date,
            "totalAmount": _fmt_amount(self.total_amount),
            "transactions": [tx.to_dict() for tx in self.transactions],
        }


def sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    """Sum transaction amounts, returning ``Decimal("0")`` for no rows."""

    return sum((tx.amount for tx in transactions), Decimal("0"))


def _fmt_amount(d: Decimal) -> str:
    # Two decimals, ASCII dot; avoids scientific notation from str(Decimal).
    return f"{d:.2f}"


__all__ = ["Statement", "Transaction", "sum_amounts"]
