"""Dashboard summary: counts, low-stock alerts and per-category totals."""

import uuid

from fastapi import APIRouter
from pydantic import BaseModel

from clinic_stock.api.deps import CurrentClinic, Session
from clinic_stock.services.stock import category_totals, load_stock, low_stock_items

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


# ── Schemas ──────────────────────────────────────────────────

class LowStockEntry(BaseModel):
    item_id: uuid.UUID
    name: str
    category_name: str
    unit: str
    stock: int
    reorder_threshold: int


class CategoryBar(BaseModel):
    category_id: uuid.UUID
    name: str
    total: int
    bar_width: int


class DashboardResponse(BaseModel):
    item_count: int
    low_stock_count: int
    category_count: int
    low_stock: list[LowStockEntry]
    categories: list[CategoryBar]


# ── Routes ───────────────────────────────────────────────────

@router.get("", response_model=DashboardResponse)
async def get_dashboard(ctx: CurrentClinic, session: Session) -> DashboardResponse:
    snapshot = await load_stock(session, ctx.clinic_id)
    names = snapshot.category_names

    low_count = len(low_stock_items(snapshot, limit=None))
    preview = [
        LowStockEntry(
            item_id=item.id,
            name=item.name,
            category_name=names.get(item.category_id, ""),
            unit=item.unit,
            stock=snapshot.level(item.id).balance,
            reorder_threshold=item.reorder_threshold,
        )
        for item in low_stock_items(snapshot)
    ]
    bars = [
        CategoryBar(
            category_id=row.category_id,
            name=row.name,
            total=row.total,
            bar_width=row.bar_width,
        )
        for row in category_totals(snapshot.categories, snapshot.items, snapshot.levels)
    ]

    return DashboardResponse(
        item_count=len(snapshot.items),
        low_stock_count=low_count,
        category_count=len(snapshot.categories),
        low_stock=preview,
        categories=bars,
    )
