"""Unit tests for CSV report formatting."""

import csv
import io
import uuid
from datetime import date, datetime
from types import SimpleNamespace

from clinic_stock.services.reports import (
    BOM,
    STOCK_HEADERS,
    day_bounds,
    export_filename,
    local_date,
    stock_report_rows,
    to_delimited_text,
    transaction_report_rows,
    type_label,
)
from clinic_stock.services.stock import StockSnapshot, compute_stock


def _parse(text: str) -> list[list[str]]:
    assert text.startswith(BOM)
    return list(csv.reader(io.StringIO(text[len(BOM):], newline="")))


def test_special_characters_survive_a_csv_parser():
    text = to_delimited_text(["a", "b"], [["x,y", 'z"q']])
    assert _parse(text) == [["a", "b"], ["x,y", 'z"q']]


def test_newlines_are_quoted():
    text = to_delimited_text(["memo"], [["line one\nline two"], ["cr\rhere"]])
    assert _parse(text)[1:] == [["line one\nline two"], ["cr\rhere"]]


def test_plain_fields_are_not_quoted():
    text = to_delimited_text(["a", "b"], [["plain", "text"]])
    assert text == BOM + "a,b\r\nplain,text\r\n"


def test_empty_rows_yield_header_only():
    text = to_delimited_text(["only", "header"], [])
    assert _parse(text) == [["only", "header"]]


def test_none_renders_empty():
    text = to_delimited_text(["a", "b"], [[None, "x"]])
    assert _parse(text)[1] == ["", "x"]


def test_type_labels():
    assert type_label("in") == "In"
    assert type_label("out") == "Out"
    assert type_label("adjust") == "Adjust"
    assert type_label("other") == "other"


def test_local_date_uses_report_timezone():
    # 16:00 UTC is already the next day in Seoul
    assert local_date(datetime(2024, 1, 31, 16, 0), "Asia/Seoul") == "2024-02-01"
    assert local_date(datetime(2024, 1, 31, 14, 59), "Asia/Seoul") == "2024-01-31"


def test_day_bounds():
    start, end = day_bounds(date(2024, 2, 1), date(2024, 2, 3), "Asia/Seoul")
    assert start == datetime(2024, 1, 31, 15, 0)
    assert end == datetime(2024, 2, 3, 14, 59, 59, 999999)
    assert day_bounds(None, None, "Asia/Seoul") == (None, None)


def test_stock_rows_sorted_by_category_then_item():
    cat_b = SimpleNamespace(id=uuid.uuid4(), name="B-cat")
    cat_a = SimpleNamespace(id=uuid.uuid4(), name="A-cat")
    items = [
        SimpleNamespace(id=uuid.uuid4(), category_id=cat_b.id, name="zeta", unit="box", reorder_threshold=1),
        SimpleNamespace(id=uuid.uuid4(), category_id=cat_a.id, name="omega", unit="ea", reorder_threshold=0),
        SimpleNamespace(id=uuid.uuid4(), category_id=cat_a.id, name="alpha", unit="ml", reorder_threshold=3),
    ]
    txns = [SimpleNamespace(item_id=items[0].id, type="in", qty=4)]
    snapshot = StockSnapshot(categories=[cat_b, cat_a], items=items, levels=compute_stock(items, txns))

    rows = stock_report_rows(snapshot)

    assert len(STOCK_HEADERS) == 5
    assert rows == [
        ["A-cat", "alpha", "0", "ml", "3"],
        ["A-cat", "omega", "0", "ea", "0"],
        ["B-cat", "zeta", "4", "box", "1"],
    ]


def test_transaction_rows():
    item = SimpleNamespace(name="Gauze", unit="pack")
    txn = SimpleNamespace(occurred_at=datetime(2024, 5, 1, 0, 0), type="out", qty=2, memo=None)
    rows = transaction_report_rows([(txn, item)], "Asia/Seoul")
    assert rows == [["2024-05-01", "Gauze", "Out", "2", "pack", ""]]


def test_export_filename():
    assert export_filename("current_stock", date(2024, 6, 9)) == "current_stock_2024-06-09.csv"
