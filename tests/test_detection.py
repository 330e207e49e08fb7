import pytest

from fatura_parser.ingest import StatementFormat, detect_and_parse, detect_format, parse_statement


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("nubank.ofx", StatementFormat.OFX),
        ("itau_statement.csv", StatementFormat.CSV),
        ("itau_statement.txt", StatementFormat.PDF),
    ],
)
def test_detect_fixture_formats(data_dir, name, expected):
    assert detect_format((data_dir / name).read_text(encoding="utf-8")) == expected


def test_ofx_signature_wins_over_csv_header():
    assert detect_format("data;lancamento;valor\n<OFX>\n") == StatementFormat.OFX
    assert detect_format("OFXHEADER:100\nDATA:OFXSGML") == StatementFormat.OFX


def test_csv_header_on_first_non_blank_line():
    assert detect_format("\n\n\ufeffDATA,LANÇAMENTO,VALOR\n") == StatementFormat.CSV
    # "data" further down is not a header.
    assert detect_format("Itaú\ndata;x\n") == StatementFormat.PDF


def test_unrecognized_text_falls_back_to_pdf_layout():
    assert detect_format("hello world") == StatementFormat.PDF
    st = parse_statement("hello world")
    assert st.is_empty
    assert st.bank_name == "Itaú"


def test_parse_statement_dispatches(data_dir):
    st = parse_statement((data_dir / "nubank.ofx").read_text(encoding="utf-8"))
    assert st.bank_name == "NU PAGAMENTOS S.A."
    assert len(st.transactions) == 3


def test_forced_format_skips_detection():
    text = "data;lancamento;valor\n01/02;LOJA;10,00\n"
    assert parse_statement(text, forced_format="pdf").is_empty
    assert len(parse_statement(text, forced_format=StatementFormat.CSV).transactions) == 1


def test_detect_and_parse_alias():
    assert detect_and_parse is parse_statement


def test_rejects_non_text_input():
    with pytest.raises(TypeError):
        parse_statement(b"<OFX>")  # type: ignore[arg-type]


def test_carriage_return_csv_parses_through_dispatch():
    st = parse_statement("data;lancamento;valor\r01/02;LOJA;10,00\r02/02;UBER;5,00\r")
    assert st.bank_name == "CSV"
    assert len(st.transactions) == 2


def test_quoted_csv_header_is_detected():
    assert detect_format('"Data";"Lançamento";"Valor"\n') == StatementFormat.CSV
