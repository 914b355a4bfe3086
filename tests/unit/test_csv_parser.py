from __future__ import annotations

from pathlib import Path

import pytest

from predictgenie.utils.csv_parser import (
    SAMPLE_CSV_HEADER,
    FormatError,
    RawCsvTable,
    decode_csv_bytes,
    parse_csv,
    read_csv_file,
    sample_csv_text,
    split_csv_line,
    write_sample_csv,
)


def test_parse_csv_headers_and_rows():
    table = parse_csv("productName,currentPrice\nWidget,19.99\nGadget,5\n")

    assert table.headers == ("productName", "currentPrice")
    assert table.rows == (
        {"productName": "Widget", "currentPrice": "19.99"},
        {"productName": "Gadget", "currentPrice": "5"},
    )


def test_parse_csv_is_idempotent():
    text = sample_csv_text()
    assert parse_csv(text) == parse_csv(text)


def test_quoted_field_keeps_literal_comma():
    table = parse_csv(
        'productName,currentPrice,userProductUrl\n"Pro Camera X1, with stand",499.99,https://a.com\n'
    )

    row = table.rows[0]
    assert row["productName"] == "Pro Camera X1, with stand"
    assert row["currentPrice"] == "499.99"
    assert row["userProductUrl"] == "https://a.com"


def test_crlf_and_blank_lines_are_ignored():
    text = "name,price\r\n\r\n  Widget , 3 \r\n   \r\nGadget,4\r\n"
    table = parse_csv(text)

    assert len(table.rows) == 2
    assert table.rows[0] == {"name": "Widget", "price": "3"}


def test_headers_are_trimmed():
    table = parse_csv(" name , price \nWidget,1\n")
    assert table.headers == ("name", "price")


def test_short_rows_are_padded_with_empty_strings():
    table = parse_csv("a,b,c\n1\n")
    assert table.rows[0] == {"a": "1", "b": "", "c": ""}


def test_extra_values_are_dropped():
    table = parse_csv("a,b\n1,2,3,4\n")
    assert table.rows[0] == {"a": "1", "b": "2"}


@pytest.mark.parametrize(
    "text",
    ["", "\n\n", "productName,currentPrice\n", "productName,currentPrice\n   \n\r\n"],
)
def test_missing_header_or_data_rows_raises_format_error(text):
    with pytest.raises(FormatError) as e:
        parse_csv(text)
    assert "header row and at least one data row" in str(e.value)


def test_split_csv_line_state_machine():
    assert split_csv_line('a,"b,c",d') == ["a", '"b,c"', "d"]
    assert split_csv_line("a,,b") == ["a", "", "b"]
    assert split_csv_line(',"x"') == ["", '"x"']


def test_only_one_surrounding_quote_is_stripped():
    table = parse_csv('name,price\n""Widget"",1\n')
    assert table.rows[0]["name"] == '"Widget"'


def test_sample_csv_parses_with_three_rows():
    table = parse_csv(sample_csv_text())

    assert ",".join(table.headers) == SAMPLE_CSV_HEADER
    assert len(table.rows) == 3
    assert table.rows[0]["productName"] == "Pro Camera X1, with stand"
    assert table.rows[1]["currentPrice"] == "$149.00"
    assert table.rows[2]["competitorUrl_1"] == ""


def test_decode_csv_bytes_strips_bom():
    assert decode_csv_bytes("\ufeffname,price\n".encode("utf-8")) == "name,price\n"


def test_decode_csv_bytes_rejects_undecodable_data():
    with pytest.raises(FormatError):
        decode_csv_bytes(b"\xff\xfe\xfa")


def test_read_csv_file(write_csv):
    path = write_csv("\ufeffproductName,currentPrice\nWidget,$19.99\n")
    table = read_csv_file(path)

    assert isinstance(table, RawCsvTable)
    assert table.headers == ("productName", "currentPrice")


def test_read_csv_file_rejects_other_extensions(write_csv):
    path = write_csv("a,b\n1,2\n", name="products.txt")
    with pytest.raises(FormatError) as e:
        read_csv_file(path)
    assert "Invalid file type" in str(e.value)


def test_read_csv_file_missing_file(tmp_path: Path):
    with pytest.raises(FormatError) as e:
        read_csv_file(tmp_path / "nope.csv")
    assert str(e.value) == "Failed to read the file."


def test_write_sample_csv_into_directory(tmp_path: Path):
    path = write_sample_csv(tmp_path)

    assert path.name == "sample_products.csv"
    assert path.read_text(encoding="utf-8") == sample_csv_text()
