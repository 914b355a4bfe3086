from __future__ import annotations

import pytest

from predictgenie.utils.csv_parser import parse_csv
from predictgenie.utils.field_mapping import FieldMapping, MappingIncompleteError
from predictgenie.utils.normalize import (
    NoValidRowsError,
    NormalizationResult,
    RowError,
    ValidatedProduct,
    normalize_rows,
    parse_price,
)

NAME_PRICE = FieldMapping.from_columns("productName", "currentPrice")


def test_currency_symbol_is_stripped():
    table = parse_csv("productName,currentPrice\nWidget,$19.99\n")
    result = normalize_rows(table, NAME_PRICE)

    assert result.products == (
        ValidatedProduct(product_name="Widget", current_price=19.99, user_product_url="", competitor_urls=()),
    )
    assert result.errors == ()
    assert result.warning is None


def test_sample_file_normalizes_all_rows(sample_table, sample_mapping):
    result = normalize_rows(sample_table, sample_mapping)

    assert [p.product_name for p in result.products] == [
        "Pro Camera X1, with stand",
        "Wireless Headphones Z",
        "Smart Fitness Watch V2",
    ]
    assert [p.current_price for p in result.products] == [499.99, 149.0, 229.5]
    first = result.products[0]
    assert first.user_product_url == "https://yourstore.com/pro-camera"
    assert first.competitor_urls == ("https://competitorA.com/camera-x1", "https://competitorB.com/pro-cam-x1")
    # empty competitor cells are dropped
    assert result.products[2].competitor_urls == ()


def test_invalid_price_row_is_reported_and_excluded():
    table = parse_csv("productName,currentPrice\nWidget,19.99\nGadget,N/A\n")
    result = normalize_rows(table, NAME_PRICE)

    assert [p.product_name for p in result.products] == ["Widget"]
    assert result.errors == (RowError(row_number=3, message="Price is missing."),)
    assert result.warning == "Warning: Skipped 1 invalid rows. Reasons: Row 3: Price is missing."


def test_unparseable_price_cites_original_cell():
    table = parse_csv("productName,currentPrice\nWidget,19.99\nGadget,-.-\n")
    result = normalize_rows(table, NAME_PRICE)

    assert str(result.errors[0]) == 'Row 3: Invalid price value "-.-".'


def test_blank_product_name_is_skipped_silently():
    table = parse_csv("productName,currentPrice\n,10\n   ,N/A\nWidget,5\n")
    result = normalize_rows(table, NAME_PRICE)

    assert len(result.products) == 1
    assert result.errors == ()


def test_every_row_invalid_raises_no_valid_rows_with_all_messages():
    table = parse_csv("productName,currentPrice\nA,N/A\nB,\nC,abc\n")
    with pytest.raises(NoValidRowsError) as e:
        normalize_rows(table, NAME_PRICE)

    message = str(e.value)
    assert message.startswith("Analysis failed. ")
    assert "Row 2: Price is missing." in message
    assert "Row 3: Price is missing." in message
    assert "Row 4: Price is missing." in message
    assert len(e.value.errors) == 3


def test_only_blank_names_raises_generic_message():
    table = parse_csv("productName,currentPrice\n,1\n,2\n")
    with pytest.raises(NoValidRowsError) as e:
        normalize_rows(table, NAME_PRICE)

    assert str(e.value) == "Analysis failed. The CSV contains no rows that could be analyzed."
    assert e.value.errors == ()


def test_unready_mapping_blocks_before_rows_are_read():
    class ExplodingTable:
        headers = ("productName", "currentPrice")

        @property
        def rows(self):
            raise AssertionError("rows must not be read")

    mapping = FieldMapping(price_column="currentPrice")
    with pytest.raises(MappingIncompleteError):
        normalize_rows(ExplodingTable(), mapping)  # type: ignore[arg-type]


def test_mapping_to_unknown_column_raises():
    table = parse_csv("productName,currentPrice\nWidget,1\n")
    with pytest.raises(MappingIncompleteError):
        normalize_rows(table, FieldMapping.from_columns("productName", "price"))


def test_competitor_urls_keep_header_order_regardless_of_toggle_order():
    table = parse_csv("name,price,c1,c2,c3\nWidget,1,https://one,,https://three\n")
    mapping = FieldMapping.from_columns("name", "price")
    mapping.toggle_competitor_column("c3")
    mapping.toggle_competitor_column("c2")
    mapping.toggle_competitor_column("c1")

    result = normalize_rows(table, mapping)
    assert result.products[0].competitor_urls == ("https://one", "https://three")


def test_user_url_empty_when_not_mapped(sample_table):
    mapping = FieldMapping.from_columns("productName", "currentPrice")
    result = normalize_rows(sample_table, mapping)

    assert all(p.user_product_url == "" for p in result.products)


@pytest.mark.parametrize(
    "cell, expected",
    [
        ("$1,299.00", 1299.0),
        ("19.99 USD", 19.99),
        ("12.5.1", 12.5),
        ("0", 0.0),
        (".5", 0.5),
    ],
)
def test_parse_price_accepts(cell, expected):
    assert parse_price(cell) == (expected, None)


@pytest.mark.parametrize(
    "cell, message",
    [
        ("", "Price is missing."),
        ("N/A", "Price is missing."),
        ("--5", 'Invalid price value "--5".'),
        ("-10", 'Price cannot be negative: "-10".'),
        ("9" * 400, f'Invalid price value "{"9" * 400}".'),
    ],
)
def test_parse_price_rejects(cell, message):
    assert parse_price(cell) == (None, message)


def test_validated_product_to_dict():
    product = ValidatedProduct("Widget", 2.5, "https://u", ("https://c",))
    assert product.to_dict() == {
        "productName": "Widget",
        "currentPrice": 2.5,
        "userProductUrl": "https://u",
        "competitorUrls": ["https://c"],
    }


def test_normalization_result_without_errors_has_no_warning():
    assert NormalizationResult(products=(ValidatedProduct("A", 1.0),)).warning is None
