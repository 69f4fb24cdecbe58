"""Unit tests for stock aggregation."""

import itertools
import uuid
from types import SimpleNamespace

from clinic_stock.services.stock import (
    StockLevel,
    StockSnapshot,
    category_totals,
    compute_stock,
    is_low,
    low_stock_items,
    signed_quantity,
)


def _item(threshold: int = 0, category_id: uuid.UUID | None = None, name: str = "item"):
    return SimpleNamespace(
        id=uuid.uuid4(),
        reorder_threshold=threshold,
        category_id=category_id or uuid.uuid4(),
        name=name,
    )


def _txn(item, type_: str, qty: int):
    return SimpleNamespace(item_id=item.id, type=type_, qty=qty)


def test_signed_quantity():
    assert signed_quantity("in", 5) == 5
    assert signed_quantity("out", 5) == -5
    assert signed_quantity("adjust", -2) == -2
    assert signed_quantity("adjust", 2) == 2


def test_is_low():
    assert is_low(3, 5) is True
    assert is_low(5, 5) is True
    assert is_low(6, 5) is False
    # threshold 0 disables the alert, even for negative stock
    assert is_low(0, 0) is False
    assert is_low(-4, 0) is False


def test_items_without_transactions_have_zero_balance():
    alerting, silent = _item(threshold=2), _item(threshold=0)
    levels = compute_stock([alerting, silent], [])
    assert levels[alerting.id] == StockLevel(balance=0, is_low=True)
    assert levels[silent.id] == StockLevel(balance=0, is_low=False)


def test_empty_inputs():
    assert compute_stock([], []) == {}


def test_balance_sums_signed_quantities():
    item = _item(threshold=3)
    txns = [_txn(item, "in", 10), _txn(item, "out", 4), _txn(item, "adjust", -3)]
    levels = compute_stock([item], txns)
    assert levels[item.id].balance == 3
    assert levels[item.id].is_low is True


def test_balance_independent_of_order():
    item = _item(threshold=1)
    txns = [
        _txn(item, "in", 7),
        _txn(item, "out", 2),
        _txn(item, "adjust", 5),
        _txn(item, "adjust", -1),
    ]
    balances = {
        compute_stock([item], list(order))[item.id].balance
        for order in itertools.permutations(txns)
    }
    assert balances == {9}


def test_transactions_of_unknown_items_ignored():
    known, archived = _item(), _item()
    levels = compute_stock([known], [_txn(known, "in", 2), _txn(archived, "in", 50)])
    assert set(levels) == {known.id}
    assert levels[known.id].balance == 2


def test_category_totals_include_empty_categories():
    vaccines = SimpleNamespace(id=uuid.uuid4(), name="Vaccines")
    topicals = SimpleNamespace(id=uuid.uuid4(), name="Topicals")
    a = _item(category_id=vaccines.id)
    b = _item(category_id=vaccines.id)
    levels = compute_stock([a, b], [_txn(a, "in", 30), _txn(b, "in", 10)])

    rows = category_totals([vaccines, topicals], [a, b], levels)

    assert [r.name for r in rows] == ["Vaccines", "Topicals"]
    assert rows[0].total == 40
    assert rows[0].bar_width == 100
    assert rows[1].total == 0
    assert rows[1].bar_width == 0


def test_category_totals_without_stock():
    empty = SimpleNamespace(id=uuid.uuid4(), name="Empty")
    rows = category_totals([empty], [], {})
    assert rows[0].total == 0
    assert rows[0].bar_width == 0


def test_low_stock_items_preview_limit():
    items = [_item(threshold=5, name=f"item-{i:02d}") for i in range(12)]
    snapshot = StockSnapshot(categories=[], items=items, levels=compute_stock(items, []))
    assert len(low_stock_items(snapshot)) == 10
    assert len(low_stock_items(snapshot, limit=None)) == 12
