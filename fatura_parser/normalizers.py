"""Amount and text normalization shared by the statement parsers.

Amounts follow Brazilian conventions (``1.234,56``). Parsing never raises on
bad input: the helpers return ``None`` and callers skip the offending record
instead of aborting the whole document.
"""

from __future__ import annotations

import re
import unicodedata
from decimal import Decimal, InvalidOperation

# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

# Currency symbol and any whitespace (\s also covers NBSP from PDF extraction).
_CURRENCY_RE = re.compile(r"[R$\s]")
_NUMERIC_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def _to_decimal(s: str) -> Decimal | None:
    if not _NUMERIC_RE.fullmatch(s):
        return None
    try:
        return Decimal(s)
    except InvalidOperation:
        return None


def parse_amount(raw: str) -> Decimal | None:
    """Parse a Brazilian-formatted amount such as ``"R$ 1.234,56"``.

    ``.`` is always a thousands separator and the first ``,`` the decimal
    separator. Returns ``None`` when the residue is not a number.
    """

    s = _CURRENCY_RE.sub("", raw).replace(".", "").replace(",", ".", 1)
    return _to_decimal(s)


def parse_flexible_amount(raw: str) -> Decimal | None:
    """Parse an amount whose separator style is decided per value.

    - both ``.`` and ``,`` present: ``.`` groups thousands, ``,`` is decimal
    - only ``,``: decimal comma
    - only ``.``: decimal point, kept as-is
    """

    s = _CURRENCY_RE.sub("", raw)
    if not s:
        return None
    has_comma = "," in s
    has_dot = "." in s
    if has_comma and has_dot:
        s = s.replace(".", "").replace(",", ".", 1)
    elif has_comma:
        s = s.replace(",", ".", 1)
    return _to_decimal(s)


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

_TRAILING_BR_RE = re.compile(r"BR$")
# Glue letters left by PDF text extraction after the merchant name.
_ARTIFACT_RES = (
    re.compile(r"(?<=[A-Z]) ?B$"),
    re.compile(r"(?<=[A-Z]) ?P$"),
)
_WS_RE = re.compile(r"\s+")


def clean_description(raw: str) -> str:
    """Strip trailing city-code artifacts and collapse whitespace."""

    s = _TRAILING_BR_RE.sub("", raw)
    for pattern in _ARTIFACT_RES:
        s = pattern.sub("", s)
    return _WS_RE.sub(" ", s).strip()


def format_city(raw: str) -> str:
    """Title-case a city name and strip a trailing ``BR`` country code."""

    if not raw:
        return ""
    s = _TRAILING_BR_RE.sub("", raw)
    return " ".join(w[:1].upper() + w[1:].lower() for w in s.split(" ")).strip()


def strip_accents(raw: str) -> str:
    """Return ``raw`` without combining marks (``"Lançamento"`` → ``"Lancamento"``)."""

    decomposed = unicodedata.normalize("NFD", raw)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


__all__ = [
    "clean_description",
    "format_city",
    "parse_amount",
    "parse_flexible_amount",
    "strip_accents",
]
