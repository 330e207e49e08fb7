"""Public interface for the ``fatura_parser`` package.

This module exposes the parsing/export entry points and the canonical models
as the stable import surface. There is no runtime logic here, only symbol
re-exports.
"""

from .categories import (
    CATEGORIES,
    category_color,
    category_icon,
    detect_category,
    infer_category,
)
from .ingest.adapters.delimited_csv import parse_csv
from .ingest.adapters.itau_pdf_text import parse_pdf_layout
from .ingest.adapters.ofx_sgml import parse_ofx
from .ingest.utils import StatementFormat, detect_and_parse, detect_format, parse_statement
from .models import Statement, Transaction
from .normalizers import clean_description, format_city, parse_amount, parse_flexible_amount
from .ofx_export import export_ofx

__all__ = [
    # Parsing / export
    "detect_and_parse",
    "detect_format",
    "export_ofx",
    "parse_csv",
    "parse_ofx",
    "parse_pdf_layout",
    "parse_statement",
    "StatementFormat",
    # Models
    "Statement",
    "Transaction",
    # Classification
    "CATEGORIES",
    "category_color",
    "category_icon",
    "detect_category",
    "infer_category",
    # Normalization
    "clean_description",
    "format_city",
    "parse_amount",
    "parse_flexible_amount",
]
