from decimal import Decimal

import pytest

from fatura_parser.normalizers import (
    clean_description,
    format_city,
    parse_amount,
    parse_flexible_amount,
    strip_accents,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("R$ 1.234,56", Decimal("1234.56")),
        ("125,50", Decimal("125.50")),
        ("1.299", Decimal("1299")),
        ("R$ 206,33", Decimal("206.33")),
    ],
)
def test_parse_amount_brazilian_format(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "1,2,3", "R$ -"])
def test_parse_amount_rejects_non_numbers(raw):
    assert parse_amount(raw) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("-125.50", Decimal("-125.50")),
        ("1.234,56", Decimal("1234.56")),
        ("21,99", Decimal("21.99")),
        ("R$ 39,90", Decimal("39.90")),
        ("500", Decimal("500")),
    ],
)
def test_parse_flexible_amount_decides_separator_per_value(raw, expected):
    assert parse_flexible_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "abc", "1.2.3"])
def test_parse_flexible_amount_rejects_non_numbers(raw):
    assert parse_flexible_amount(raw) is None


def test_clean_description_drops_extraction_artifacts():
    assert clean_description("AMAZON BRSAO P") == "AMAZON BRSAO"
    assert clean_description("LOJA XBR") == "LOJA X"
    assert clean_description("MERCADOB") == "MERCADO"


def test_clean_description_collapses_whitespace():
    assert clean_description("  PADARIA   DO   JOAO  ") == "PADARIA DO JOAO"
    assert clean_description("NETFLIX.COM") == "NETFLIX.COM"


def test_format_city_title_cases_and_strips_country():
    assert format_city("SAO PAULOBR") == "Sao Paulo"
    assert format_city("porto alegre") == "Porto Alegre"
    assert format_city("") == ""


def test_strip_accents():
    assert strip_accents("Lançamento") == "Lancamento"
    assert strip_accents("SAÚDE") == "SAUDE"
