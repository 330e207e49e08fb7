"""Display helpers for parsed statements.

These only read a :class:`~fatura_parser.models.Statement`; nothing here
changes parse results. Dates are ``DD/MM`` labels without a year, so grouping
works on the day number alone.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from .models import Transaction


class DayGroup(NamedTuple):
    day: str
    transactions: tuple[Transaction, ...]

    @property
    def total(self) -> Decimal:
        return sum((tx.amount for tx in self.transactions), Decimal("0"))


def _day_number(day: str) -> int:
    try:
        return int(day)
    except ValueError:
        return -1


def group_by_day(transactions: Iterable[Transaction]) -> list[DayGroup]:
    """Group transactions by the ``DD`` part of their date, latest day first.

    Document order is kept inside each group.
    """

    groups: dict[str, list[Transaction]] = {}
    for tx in transactions:
        groups.setdefault(tx.date.split("/")[0], []).append(tx)
    ordered = sorted(groups.items(), key=lambda kv: _day_number(kv[0]), reverse=True)
    return [DayGroup(day, tuple(txs)) for day, txs in ordered]


def category_totals(transactions: Iterable[Transaction]) -> list[tuple[str, Decimal]]:
    """Return ``(category, total)`` pairs, largest total first."""

    totals: dict[str, Decimal] = {}
    for tx in transactions:
        totals[tx.category] = totals.get(tx.category, Decimal("0")) + tx.amount
    return sorted(totals.items(), key=lambda kv: kv[1], reverse=True)


def format_brl(amount: Decimal | int | float) -> str:
    """Format ``amount`` as Brazilian reais, e.g. ``R$ 1.942,97``."""

    q = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    grouped = f"{abs(q):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"-R$ {grouped}" if q < 0 else f"R$ {grouped}"


__all__ = ["DayGroup", "category_totals", "format_brl", "group_by_day"]
