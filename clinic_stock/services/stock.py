"""Stock aggregation: current balance and low-stock flags per item.

The balance of an item is the signed sum of its ledger rows. ``in`` and
``out`` rows store magnitudes, ``adjust`` rows store their own sign:

    balance = Σ in.qty − Σ out.qty + Σ adjust.qty

``compute_stock`` and ``category_totals`` are pure; ``load_stock`` does the
tenant-scoped reads and hands the rows to them.
"""

import uuid
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinic_stock.models.category import Category
from clinic_stock.models.item import Item
from clinic_stock.models.transaction import InventoryTransaction, TransactionType

LOW_STOCK_PREVIEW = 10


class StockItem(Protocol):
    id: uuid.UUID
    reorder_threshold: int


class LedgerRow(Protocol):
    item_id: uuid.UUID
    type: str
    qty: int


@dataclass(frozen=True, slots=True)
class StockLevel:
    balance: int
    is_low: bool


@dataclass(frozen=True, slots=True)
class CategoryTotal:
    category_id: uuid.UUID
    name: str
    total: int
    bar_width: int  # percent of the largest category total


@dataclass(slots=True)
class StockSnapshot:
    """Active categories and items of one clinic, with their stock levels."""

    categories: list[Category] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    levels: dict[uuid.UUID, StockLevel] = field(default_factory=dict)

    def level(self, item_id: uuid.UUID) -> StockLevel:
        return self.levels.get(item_id, StockLevel(balance=0, is_low=False))

    @property
    def category_names(self) -> dict[uuid.UUID, str]:
        return {c.id: c.name for c in self.categories}


def signed_quantity(type_: str, qty: int) -> int:
    if type_ == TransactionType.OUT:
        return -qty
    return qty


def is_low(balance: int, threshold: int) -> bool:
    """An item needs reordering at or below a positive threshold."""
    return threshold > 0 and balance <= threshold


def compute_stock(
    items: Iterable[StockItem],
    transactions: Iterable[LedgerRow],
) -> dict[uuid.UUID, StockLevel]:
    """Balance and low-stock flag for every item in ``items``.

    Items without transactions get a balance of 0. Transactions whose item is
    not in ``items`` (archived, other clinic) are ignored.
    """
    thresholds = {item.id: item.reorder_threshold for item in items}

    sums: dict[uuid.UUID, int] = defaultdict(int)
    for txn in transactions:
        if txn.item_id in thresholds:
            sums[txn.item_id] += signed_quantity(txn.type, txn.qty)

    return {
        item_id: StockLevel(balance=sums[item_id], is_low=is_low(sums[item_id], threshold))
        for item_id, threshold in thresholds.items()
    }


def category_totals(
    categories: Iterable[Category],
    items: Iterable[Item],
    levels: Mapping[uuid.UUID, StockLevel],
) -> list[CategoryTotal]:
    """Per-category sum of balances, in category order.

    Every category gets a row, including empty ones (total 0, zero-width bar).
    Units differ between items, so this is a rough overview only.
    """
    totals: dict[uuid.UUID, int] = defaultdict(int)
    for item in items:
        level = levels.get(item.id)
        if level is not None:
            totals[item.category_id] += level.balance

    rows = [(c.id, c.name, totals[c.id]) for c in categories]
    max_total = max([1, *(total for _, _, total in rows)])
    return [
        CategoryTotal(
            category_id=cid,
            name=name,
            total=total,
            bar_width=max(0, round(total / max_total * 100)),
        )
        for cid, name, total in rows
    ]


def low_stock_items(snapshot: StockSnapshot, limit: int | None = LOW_STOCK_PREVIEW) -> list[Item]:
    low = [item for item in snapshot.items if snapshot.level(item.id).is_low]
    return low if limit is None else low[:limit]


# ── Tenant-scoped reads ──────────────────────────────────────

async def load_stock(session: AsyncSession, clinic_id: uuid.UUID) -> StockSnapshot:
    """Fetch active categories/items of a clinic and compute their stock."""
    cat_result = await session.execute(
        select(Category)
        .where(Category.clinic_id == clinic_id, Category.is_archived.is_(False))  # type: ignore[attr-defined]
        .order_by(Category.sort_order.asc(), Category.name.asc())  # type: ignore[attr-defined]
    )
    categories = list(cat_result.scalars().all())
    active_category_ids = {c.id for c in categories}

    item_result = await session.execute(
        select(Item)
        .where(Item.clinic_id == clinic_id, Item.is_archived.is_(False))  # type: ignore[attr-defined]
        .order_by(Item.name.asc())  # type: ignore[attr-defined]
    )
    items = [i for i in item_result.scalars().all() if i.category_id in active_category_ids]

    if not items:
        return StockSnapshot(categories=categories, items=[], levels={})

    txn_result = await session.execute(
        select(InventoryTransaction).where(
            InventoryTransaction.clinic_id == clinic_id,
            InventoryTransaction.item_id.in_([i.id for i in items]),  # type: ignore[attr-defined]
        )
    )
    levels = compute_stock(items, txn_result.scalars().all())
    return StockSnapshot(categories=categories, items=items, levels=levels)
