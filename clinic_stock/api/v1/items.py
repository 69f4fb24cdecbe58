"""Item endpoints: list with current stock, create, update threshold, archive."""

import uuid

from fastapi import APIRouter, status

from clinic_stock.api.deps import CurrentClinic, Session
from clinic_stock.models.item import Item, ItemCreate, ItemRead, ItemUpdate
from clinic_stock.services import catalog
from clinic_stock.services.stock import StockSnapshot, load_stock

router = APIRouter(prefix="/items", tags=["items"])


def _to_read(item: Item, snapshot: StockSnapshot) -> ItemRead:
    level = snapshot.level(item.id)
    return ItemRead(
        id=item.id,
        category_id=item.category_id,
        category_name=snapshot.category_names.get(item.category_id, ""),
        name=item.name,
        unit=item.unit,
        reorder_threshold=item.reorder_threshold,
        stock=level.balance,
        is_low=level.is_low,
    )


@router.get("", response_model=list[ItemRead])
async def list_items(ctx: CurrentClinic, session: Session) -> list[ItemRead]:
    snapshot = await load_stock(session, ctx.clinic_id)
    return [_to_read(item, snapshot) for item in snapshot.items]


@router.post("", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(body: ItemCreate, ctx: CurrentClinic, session: Session) -> ItemRead:
    item = await catalog.create_item(
        session,
        ctx.clinic_id,
        raw_name=body.name,
        category_id=body.category_id,
        raw_unit=body.unit,
        raw_threshold=body.reorder_threshold,
    )
    snapshot = await load_stock(session, ctx.clinic_id)
    return _to_read(item, snapshot)


@router.patch("/{item_id}", response_model=ItemRead)
async def update_item_threshold(
    item_id: uuid.UUID, body: ItemUpdate, ctx: CurrentClinic, session: Session,
) -> ItemRead:
    item = await catalog.update_threshold(session, ctx.clinic_id, item_id, body.reorder_threshold)
    snapshot = await load_stock(session, ctx.clinic_id)
    return _to_read(item, snapshot)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def archive_item(item_id: uuid.UUID, ctx: CurrentClinic, session: Session) -> None:
    """Soft-delete; the item's ledger rows are kept."""
    await catalog.archive_item(session, ctx.clinic_id, item_id)
