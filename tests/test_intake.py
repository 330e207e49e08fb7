from decimal import Decimal

import pytest

from fatura_parser import intake
from fatura_parser.intake import (
    DEFAULT_MAX_FILE_BYTES,
    EmptyFileContent,
    FileTooLarge,
    IntakeError,
    NoTransactionsFound,
    UnsupportedFileType,
    declared_format,
    decode_text,
    has_valid_extension,
    is_file_size_valid,
    is_supported_file,
    load_statement,
    resolve_max_file_bytes,
    statement_from_upload,
)


def test_size_limit_defaults_to_ten_megabytes():
    assert resolve_max_file_bytes() == DEFAULT_MAX_FILE_BYTES == 10 * 1024 * 1024
    assert is_file_size_valid(DEFAULT_MAX_FILE_BYTES)
    assert not is_file_size_valid(DEFAULT_MAX_FILE_BYTES + 1)
    assert is_file_size_valid(5, limit=5)
    assert str(FileTooLarge(DEFAULT_MAX_FILE_BYTES)) == "Arquivo muito grande. O limite é 10 MB."


@pytest.mark.parametrize(
    ("value", "expected"),
    [("2048", 2048), ("abc", DEFAULT_MAX_FILE_BYTES), ("0", DEFAULT_MAX_FILE_BYTES)],
)
def test_size_limit_from_environment(monkeypatch, value, expected):
    monkeypatch.setenv("FATURA_PARSER_MAX_FILE_BYTES", value)
    assert resolve_max_file_bytes() == expected


def test_file_type_checks():
    assert has_valid_extension("FATURA.PDF")
    assert has_valid_extension("extrato.ofx")
    assert not has_valid_extension("planilha.xlsx")
    assert is_supported_file("upload", "text/csv")
    assert is_supported_file("upload", "application/pdf")
    assert not is_supported_file("upload", "image/png")


def test_decode_text_accepts_bom_and_cp1252():
    assert decode_text(b"\xef\xbb\xbfdata;valor") == "data;valor"
    assert decode_text("Lançamento".encode("cp1252")) == "Lançamento"


def test_upload_errors_are_intake_errors(monkeypatch):
    monkeypatch.setenv("FATURA_PARSER_MAX_FILE_BYTES", "10")
    with pytest.raises(FileTooLarge) as exc:
        statement_from_upload(b"x" * 11, filename="a.csv")
    assert exc.value.limit_bytes == 10
    assert isinstance(exc.value, IntakeError)


def test_unsupported_type():
    with pytest.raises(UnsupportedFileType, match="Formato inválido"):
        statement_from_upload(b"data;valor", filename="planilha.xlsx")


def test_empty_content():
    with pytest.raises(EmptyFileContent):
        statement_from_upload(b"  \n ", filename="a.csv")


def test_no_transactions_found():
    with pytest.raises(NoTransactionsFound, match="Nenhum lançamento"):
        statement_from_upload(b"data;descricao;valor\n01/02;LOJA;1,00\n", filename="a.csv")


def test_pdf_upload_goes_through_text_extraction(monkeypatch, data_dir):
    text = (data_dir / "itau_statement.txt").read_text(encoding="utf-8")
    seen = []

    def fake_extract(data):
        seen.append(data)
        return text

    monkeypatch.setattr(intake, "extract_pdf_text", fake_extract)
    st = statement_from_upload(b"%PDF-1.4", filename="fatura.pdf")

    assert seen == [b"%PDF-1.4"]
    assert st.bank_name == "Itaú"
    assert len(st.transactions) == 8


def test_load_statement_from_disk(data_dir):
    st = load_statement(data_dir / "itau_statement.csv")
    assert st.total_amount == Decimal("1342.35")
    st = load_statement(data_dir / "itau_statement.txt")
    assert st.due_date == "15/12/2024"


def test_load_statement_forced_format(tmp_path):
    path = tmp_path / "fatura.txt"
    path.write_text("data;lancamento;valor\n01/02;LOJA;1,00\n", encoding="utf-8")
    with pytest.raises(NoTransactionsFound):
        load_statement(path, forced_format="pdf")
    assert len(load_statement(path).transactions) == 1


def test_load_statement_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_statement(tmp_path / "missing.csv")


def test_declared_format_from_extension_or_mime():
    assert declared_format("fatura.csv") == "csv"
    assert declared_format("upload", "application/x-ofx") == "ofx"
    assert declared_format("fatura.pdf") is None
    assert declared_format("fatura.txt") is None


def test_csv_upload_with_quoted_header_is_parsed_as_csv():
    data = '"Data";"Lançamento";"Valor"\n"01/02";"LOJA";"10,00"\n'.encode()
    st = statement_from_upload(data, filename="fatura.csv")
    assert st.bank_name == "CSV"
    assert st.total_amount == Decimal("10.00")


def test_csv_upload_with_date_column_last():
    data = "Valor;Lançamento;Data\n10,00;LOJA;01/02\n".encode()
    (tx,) = statement_from_upload(data, filename="fatura.csv").transactions
    assert tx.date == "01/02"


def test_forced_format_wins_over_declared_format():
    data = b"data;lancamento;valor\n01/02;LOJA;10,00\n"
    with pytest.raises(NoTransactionsFound):
        statement_from_upload(data, filename="fatura.csv", forced_format="pdf")
