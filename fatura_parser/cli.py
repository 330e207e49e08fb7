"""CLI for the ``fatura_parser`` package.

This module exposes callable command handlers (``cmd_parse``,
``cmd_export_ofx``) and a Typer-based console interface. Environment
variables (``FATURA_PARSER_LOG_LEVEL``, ``FATURA_PARSER_MAX_FILE_BYTES``) may
come from a local ``.env`` loaded with ``python-dotenv`` before any command
runs. Parsing and export logic lives in :mod:`fatura_parser.ingest` and
:mod:`fatura_parser.ofx_export`.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.models import OptionInfo

from .categories import category_icon
from .intake import IntakeError, load_statement
from .logging_setup import configure_logging, get_logger
from .models import Statement, Transaction
from .presentation import category_totals, format_brl, group_by_day

logger = get_logger("fatura_parser.cli")

DEFAULT_OFX_FILENAME = "fatura.ofx"


class FormatChoice(StrEnum):
    AUTO = "auto"
    PDF = "pdf"
    OFX = "ofx"
    CSV = "csv"


# ---- Small module-level helpers used by CLI commands -------------------------


def _forced(fmt: FormatChoice | str) -> str | None:
    value = FormatChoice(fmt)
    return None if value is FormatChoice.AUTO else value.value


def _load(path: str, fmt: FormatChoice | str) -> Statement | None:
    """Load and parse ``path``, printing a one-line error on failure."""

    try:
        return load_statement(path, forced_format=_forced(fmt))
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
    except PermissionError:
        print(f"Error: Permission denied: {path}", file=sys.stderr)
    except IntakeError as e:
        print(f"Error: {e}", file=sys.stderr)
    return None


def _transactions_table(transactions: Sequence[Transaction]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Data")
    table.add_column("Descrição")
    table.add_column("Categoria")
    table.add_column("Cidade")
    table.add_column("Parcela")
    table.add_column("Valor", justify="right")
    for tx in transactions:
        table.add_row(
            tx.date,
            tx.description,
            f"{category_icon(tx.category)} {tx.category}",
            tx.city,
            tx.installment or "",
            format_brl(tx.amount),
        )
    return table


def render_statement(statement: Statement, console: Console) -> None:
    """Print statement metadata, per-category totals and one table per day.

    Days run latest first, each headed by its total.
    """

    console.print(f"[bold]{statement.bank_name}[/bold] {statement.card_number}".rstrip())
    if statement.card_holder:
        console.print(f"Titular: {statement.card_holder}")
    if statement.due_date:
        console.print(f"Vencimento: {statement.due_date}")
    console.print(f"Total da fatura: {format_brl(statement.total_amount)}")
    console.print(f"Lançamentos: {len(statement.transactions)}")

    for category, total in category_totals(statement.transactions):
        console.print(f"  {category_icon(category)} {category}: {format_brl(total)}")

    for group in group_by_day(statement.transactions):
        console.print()
        console.print(f"[bold]Dia {group.day}[/bold]  {format_brl(group.total)}")
        console.print(_transactions_table(group.transactions))


def cmd_parse(path: str, *, fmt: FormatChoice | str = FormatChoice.AUTO, as_json: bool = False) -> int:
    """Parse a statement file and print it to stdout.

    With ``as_json`` the output is the camelCase wire shape
    (:meth:`Statement.to_dict`); otherwise a ``rich`` table.

    Returns ``0`` on success and ``1`` when the file cannot be read, is not a
    supported type, or holds no transactions.
    """

    statement = _load(path, fmt)
    if statement is None:
        return 1

    if as_json:
        print(json.dumps(statement.to_dict(), ensure_ascii=False, indent=2))
    else:
        render_statement(statement, Console())
    return 0


def cmd_export_ofx(
    path: str, *, output: str = DEFAULT_OFX_FILENAME, fmt: FormatChoice | str = FormatChoice.AUTO
) -> int:
    """Parse a statement file and write it as OFX to ``output`` (``-`` for stdout)."""

    from .ofx_export import export_ofx

    statement = _load(path, fmt)
    if statement is None:
        return 1

    content = export_ofx(statement)
    if output == "-":
        sys.stdout.write(content)
        return 0

    try:
        Path(output).write_text(content, encoding="utf-8")
    except OSError as e:
        print(f"Error: Failed to write '{output}': {e}", file=sys.stderr)
        return 1
    logger.info("wrote %d transactions to %s", len(statement.transactions), output)
    print(f"OFX written to {output} ({len(statement.transactions)} transactions)", file=sys.stderr)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Parse Itaú PDF/text, OFX and CSV card statements, show them categorized, "
        "and export them as OFX."
    ),
)

# Module-level option object to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect this when used as a default value below.
PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--path",
    help="Statement file (.pdf, .txt with extracted PDF text, .ofx or .csv)",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler will report nice errors
)


@app.command("parse")
def parse_cmd(
    path: Annotated[Path, PATH_OPTION],
    *,
    fmt: FormatChoice = typer.Option(
        FormatChoice.AUTO, "--format", help="Force a format instead of sniffing the content."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the statement as JSON."),
) -> None:
    """Parse a statement and print its transactions."""

    raise typer.Exit(cmd_parse(str(path), fmt=fmt, as_json=as_json))


@app.command("export-ofx")
def export_ofx_cmd(
    path: Annotated[Path, PATH_OPTION],
    *,
    output: str = typer.Option(
        DEFAULT_OFX_FILENAME, "--output", "-o", help="Destination file, or '-' for stdout."
    ),
    fmt: FormatChoice = typer.Option(
        FormatChoice.AUTO, "--format", help="Force a format instead of sniffing the content."
    ),
) -> None:
    """Convert a statement to OFX 1.0.2."""

    raise typer.Exit(cmd_export_ofx(str(path), output=output, fmt=fmt))


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    *,
    log_level: str | None = typer.Option(
        None, help="Logging level (falls back to FATURA_PARSER_LOG_LEVEL, then WARNING)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m fatura_parser.cli`
    app()
