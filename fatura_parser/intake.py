"""File intake: validation, text extraction and the upload error taxonomy.

The parsers only accept text. This module sits in front of them for callers
that start from a file (the CLI, an upload endpoint): it checks size and type,
turns a PDF into text with ``pdfplumber``, decodes text formats, dispatches to
:func:`~fatura_parser.ingest.utils.parse_statement`, and reports "nothing
found" as an error the user can act on.

Error messages are the user-facing Portuguese strings shown by the upload
screen.
"""

from __future__ import annotations

import io
import os
from os import PathLike
from pathlib import Path

from .ingest.utils import StatementFormat, parse_statement
from .logging_setup import get_logger
from .models import Statement

logger = get_logger("fatura_parser.intake")

MAX_FILE_BYTES_ENV = "FATURA_PARSER_MAX_FILE_BYTES"
DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024

# ".txt" holds text already extracted from a statement PDF.
SUPPORTED_EXTENSIONS: tuple[str, ...] = (".pdf", ".ofx", ".csv", ".txt")
PDF_MIME_TYPES: tuple[str, ...] = ("application/pdf",)
OFX_MIME_TYPES: tuple[str, ...] = ("text/ofx", "application/x-ofx")
CSV_MIME_TYPES: tuple[str, ...] = ("text/csv", "application/csv")
TEXT_MIME_TYPES: tuple[str, ...] = ("text/plain",)


# ---------------------------
# Errors
# ---------------------------


class IntakeError(Exception):
    """Base class for failures a user can act on (bad file, nothing found)."""


class FileTooLarge(IntakeError):
    def __init__(self, limit_bytes: int) -> None:
        mb = limit_bytes / (1024 * 1024)
        super().__init__(f"Arquivo muito grande. O limite é {mb:g} MB.")
        self.limit_bytes = limit_bytes


class UnsupportedFileType(IntakeError):
    def __init__(self) -> None:
        super().__init__("Formato inválido. Envie um arquivo PDF, OFX ou CSV.")


class EmptyFileContent(IntakeError):
    def __init__(self) -> None:
        super().__init__("Não foi possível extrair o conteúdo do arquivo.")


class NoTransactionsFound(IntakeError):
    def __init__(self) -> None:
        super().__init__(
            "Nenhum lançamento encontrado no arquivo. "
            "Verifique se é uma fatura ou extrato válido."
        )


# ---------------------------
# Validation
# ---------------------------


def resolve_max_file_bytes() -> int:
    """Resolve the upload size limit.

    Honors ``FATURA_PARSER_MAX_FILE_BYTES`` when it holds a positive integer;
    otherwise 10 MiB.
    """

    env_val = os.getenv(MAX_FILE_BYTES_ENV)
    try:
        limit = int(env_val) if env_val else None
    except ValueError:
        logger.warning("ignoring invalid %s=%r", MAX_FILE_BYTES_ENV, env_val)
        limit = None
    return limit if limit and limit > 0 else DEFAULT_MAX_FILE_BYTES


def is_file_size_valid(size: int, *, limit: int | None = None) -> bool:
    return size <= (limit if limit is not None else resolve_max_file_bytes())


def has_valid_extension(filename: str) -> bool:
    return filename.lower().endswith(SUPPORTED_EXTENSIONS)


def is_pdf_file(filename: str, mime_type: str | None = None) -> bool:
    return filename.lower().endswith(".pdf") or mime_type in PDF_MIME_TYPES


def is_ofx_file(filename: str, mime_type: str | None = None) -> bool:
    return filename.lower().endswith(".ofx") or mime_type in OFX_MIME_TYPES


def is_csv_file(filename: str, mime_type: str | None = None) -> bool:
    return filename.lower().endswith(".csv") or mime_type in CSV_MIME_TYPES


def is_text_file(filename: str, mime_type: str | None = None) -> bool:
    return filename.lower().endswith(".txt") or mime_type in TEXT_MIME_TYPES


def is_supported_file(filename: str, mime_type: str | None = None) -> bool:
    return (
        is_pdf_file(filename, mime_type)
        or is_ofx_file(filename, mime_type)
        or is_csv_file(filename, mime_type)
        or is_text_file(filename, mime_type)
    )


# ---------------------------
# Text extraction
# ---------------------------


def extract_pdf_text(data: bytes) -> str:
    """Return the text of every PDF page, one page per chunk, ``\\n``-joined."""

    import pdfplumber  # deferred: only PDF uploads need it

    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return "".join((page.extract_text() or "") + "\n" for page in pdf.pages)


def decode_text(data: bytes) -> str:
    """Decode a text export, accepting a UTF-8 BOM and legacy cp1252 files."""

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("payload is not UTF-8; decoding as cp1252")
        return data.decode("cp1252", errors="replace")


def declared_format(filename: str, mime_type: str | None = None) -> StatementFormat | None:
    """Return the format an OFX or CSV upload declares by extension or MIME type.

    PDF and plain-text uploads return ``None``: their text is sniffed.
    """

    if is_pdf_file(filename, mime_type) or is_text_file(filename, mime_type):
        return None
    if is_ofx_file(filename, mime_type):
        return StatementFormat.OFX
    if is_csv_file(filename, mime_type):
        return StatementFormat.CSV
    return None


def extract_text(data: bytes, *, filename: str, mime_type: str | None = None) -> str:
    if is_pdf_file(filename, mime_type):
        return extract_pdf_text(data)
    return decode_text(data)


# ---------------------------
# Entry points
# ---------------------------


def statement_from_upload(
    data: bytes,
    *,
    filename: str,
    mime_type: str | None = None,
    forced_format: StatementFormat | str | None = None,
) -> Statement:
    """Validate an uploaded payload and parse it into a statement.

    An OFX or CSV file is parsed as that format unless ``forced_format`` says
    otherwise; other text is sniffed.

    Raises
    ------
    FileTooLarge, UnsupportedFileType, EmptyFileContent, NoTransactionsFound
        For problems the user can fix by sending another file.
    """

    if not is_file_size_valid(len(data)):
        raise FileTooLarge(resolve_max_file_bytes())
    if not is_supported_file(filename, mime_type):
        raise UnsupportedFileType()

    text = extract_text(data, filename=filename, mime_type=mime_type)
    if not text.strip():
        raise EmptyFileContent()

    statement = parse_statement(
        text, forced_format=forced_format or declared_format(filename, mime_type)
    )
    if statement.is_empty:
        raise NoTransactionsFound()
    return statement


def load_statement(
    path: str | PathLike[str], *, forced_format: StatementFormat | str | None = None
) -> Statement:
    """Read ``path`` from disk and parse it (see :func:`statement_from_upload`).

    ``FileNotFoundError`` and ``PermissionError`` propagate unchanged.
    """

    p = Path(path)
    size = p.stat().st_size
    if not is_file_size_valid(size):
        raise FileTooLarge(resolve_max_file_bytes())
    return statement_from_upload(p.read_bytes(), filename=p.name, forced_format=forced_format)


__all__ = [
    "EmptyFileContent",
    "FileTooLarge",
    "IntakeError",
    "NoTransactionsFound",
    "SUPPORTED_EXTENSIONS",
    "UnsupportedFileType",
    "declared_format",
    "decode_text",
    "extract_pdf_text",
    "extract_text",
    "has_valid_extension",
    "is_csv_file",
    "is_file_size_valid",
    "is_ofx_file",
    "is_pdf_file",
    "is_supported_file",
    "is_text_file",
    "load_statement",
    "resolve_max_file_bytes",
    "statement_from_upload",
]
