"""Statement ingestion: format detection and per-format adapters."""

from .utils import StatementFormat, detect_and_parse, detect_format, parse_statement

__all__ = ["StatementFormat", "detect_and_parse", "detect_format", "parse_statement"]
