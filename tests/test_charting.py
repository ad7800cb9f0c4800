from datetime import date
from decimal import Decimal

from askdata.charting import pick_name_key, pick_value_key, shape_chart_data


def test_falls_back_to_first_and_second_column():
    rows = [{"product": "A", "total": 5}, {"product": "B", "total": 9}]

    assert shape_chart_data(rows) == [{"name": "A", "value": 5}, {"name": "B", "value": 9}]


def test_detects_name_column_by_substring_and_numeric_value():
    rows = [{"customer_name": "Acme", "revenue": 100}]

    assert shape_chart_data(rows) == [{"name": "Acme", "value": 100}]


def test_name_column_need_not_come_first():
    rows = [{"revenue": Decimal("12.50"), "region": "EU", "Country_Name": "France"}]

    assert pick_name_key(rows[0]) == "Country_Name"
    assert pick_value_key(rows[0], "Country_Name") == "revenue"
    assert shape_chart_data(rows) == [{"name": "France", "value": Decimal("12.50")}]


def test_value_key_skips_non_numeric_columns_and_booleans():
    row = {"segment": "SMB", "active": True, "label": "x", "customer_count": 7}

    assert pick_value_key(row, "segment") == "customer_count"


def test_value_falls_back_to_value_total_revenue_then_zero():
    # value column comes from the first row: no numeric there, so "score"
    rows = [
        {"name": "a", "score": None},
        {"name": "b", "score": None, "total": 3},
        {"name": "c", "score": None, "revenue": 4},
        {"name": "d", "score": None, "value": 5, "total": 6},
        {"name": "e", "score": 7},
    ]

    values = [point["value"] for point in shape_chart_data(rows)]

    assert values == [0, 3, 4, 5, 7]


def test_null_name_becomes_empty_string_and_other_types_are_stringified():
    rows = [{"order_date": date(2024, 1, 31), "orders": 3}, {"order_date": None, "orders": 1}]

    assert shape_chart_data(rows) == [{"name": "2024-01-31", "value": 3}, {"name": "", "value": 1}]


def test_single_column_rows():
    rows = [{"count": 12}]

    assert shape_chart_data(rows) == [{"name": "12", "value": 0}]


def test_empty_rows_pass_through():
    rows = []

    assert shape_chart_data(rows) is rows
