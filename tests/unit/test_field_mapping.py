from __future__ import annotations

import pytest

from predictgenie.utils.field_mapping import FieldMapping, MappingIncompleteError


def test_new_mapping_is_not_ready():
    mapping = FieldMapping()

    assert mapping.is_ready() is False
    assert mapping.missing_fields() == ["Product Name", "Current Price"]


def test_ready_once_name_and_price_are_set():
    mapping = FieldMapping()
    mapping.set_product_name_column("productName")
    assert mapping.is_ready() is False

    mapping.set_price_column("currentPrice")
    assert mapping.is_ready() is True
    mapping.ensure_ready()


def test_setters_replace_previous_selection():
    mapping = FieldMapping()
    mapping.set_user_url_column("a")
    mapping.set_user_url_column("b")
    assert mapping.user_url_column == "b"

    mapping.set_price_column("price")
    mapping.set_price_column("")
    assert mapping.price_column == ""


def test_toggle_competitor_column_adds_then_removes():
    mapping = FieldMapping()
    mapping.toggle_competitor_column("c1")
    mapping.toggle_competitor_column("c2")
    assert mapping.competitor_url_columns == {"c1", "c2"}

    mapping.toggle_competitor_column("c1")
    assert mapping.competitor_url_columns == {"c2"}

    mapping.toggle_competitor_column("c1")
    mapping.toggle_competitor_column("c1")
    assert mapping.competitor_url_columns == {"c2"}


def test_competitor_columns_follow_header_order():
    mapping = FieldMapping()
    mapping.toggle_competitor_column("c3")
    mapping.toggle_competitor_column("c1")

    assert mapping.competitor_columns_in_order(["name", "c1", "c2", "c3"]) == ["c1", "c3"]


def test_ensure_ready_names_missing_fields():
    mapping = FieldMapping(price_column="currentPrice")
    with pytest.raises(MappingIncompleteError) as e:
        mapping.ensure_ready()

    assert "'Product Name' and 'Current Price'" in str(e.value)
    assert "Missing: Product Name." in str(e.value)


def test_ensure_columns_exist_reports_unknown_columns():
    mapping = FieldMapping.from_columns("name", "cost", competitor_url_columns=["rival"])
    with pytest.raises(MappingIncompleteError) as e:
        mapping.ensure_columns_exist(["name", "price"])

    assert "cost" in str(e.value) and "rival" in str(e.value)


def test_reset_clears_everything():
    mapping = FieldMapping.from_columns("name", "price", "url", ["c1"])
    mapping.reset()

    assert mapping == FieldMapping()
