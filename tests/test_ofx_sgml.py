import textwrap
from decimal import Decimal

from fatura_parser.ingest.adapters.ofx_sgml import FALLBACK_BANK_NAME, parse_ofx


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


def test_nubank_fixture(data_dir):
    st = parse_ofx((data_dir / "nubank.ofx").read_text(encoding="utf-8"))

    assert st.bank_name == "NU PAGAMENTOS S.A."
    assert st.card_number == "1234"
    assert st.card_holder == ""
    assert st.due_date == ""
    # Ledger balance is authoritative and reported as a magnitude.
    assert st.total_amount == Decimal("1685.57")

    rows = [(t.date, t.description, t.category, t.amount, t.city) for t in st.transactions]
    assert rows == [
        ("01/11", "FARMACIA PANVEL PORTO ALEGRE", "saúde", Decimal("125.50"), ""),
        ("07/11", "UBER TRIP SAO PAULO", "transporte", Decimal("25.30"), ""),
        ("15/11", "MERCADO LIVRE SAO PAULO", "outros", Decimal("320.45"), ""),
    ]


def test_unclosed_sgml_tags_and_entities():
    text = _dedent(
        """
        <OFX>
        <STMTTRN>
        <TRNTYPE>DEBIT
        <DTPOSTED>20240305120000
        <TRNAMT>-10,50
        <MEMO>PADARIA &amp; CAFE
        </STMTTRN>
        </OFX>
        """
    )
    st = parse_ofx(text)

    (tx,) = st.transactions
    assert tx.date == "05/03"
    assert tx.description == "PADARIA & CAFE"
    assert tx.category == "restaurante"
    assert tx.amount == Decimal("10.50")
    # No <ORG> and no <BALAMT>.
    assert st.bank_name == FALLBACK_BANK_NAME
    assert st.total_amount == Decimal("10.50")


def test_account_adjustments_are_ignored():
    blocks = "\n".join(
        f"<STMTTRN><DTPOSTED>20241101</DTPOSTED><TRNAMT>-{i}.00</TRNAMT><MEMO>{memo}</MEMO></STMTTRN>"
        for i, memo in enumerate(
            ["Pagamento recebido", "Encargos de financiamento", "Crédito de atraso", "SPOTIFY"], start=1
        )
    )
    st = parse_ofx(f"<OFX>\n{blocks}\n</OFX>")
    assert [t.description for t in st.transactions] == ["SPOTIFY"]
    assert st.total_amount == Decimal("4.00")


def test_blocks_missing_required_tags_are_dropped():
    text = (
        "<OFX>"
        "<STMTTRN><DTPOSTED>20241101<MEMO>SEM VALOR</STMTTRN>"
        "<STMTTRN><TRNAMT>-5.00<MEMO>SEM DATA</STMTTRN>"
        "<STMTTRN><DTPOSTED>20241102<TRNAMT>-5.00</STMTTRN>"
        "<STMTTRN><DTPOSTED>20241103<TRNAMT>abc<MEMO>VALOR RUIM</STMTTRN>"
        "</OFX>"
    )
    assert parse_ofx(text).is_empty


def test_no_transactions_gives_zero_total():
    st = parse_ofx("<OFX></OFX>")
    assert st.is_empty
    assert st.total_amount == Decimal("0")
    assert st.card_number == ""
