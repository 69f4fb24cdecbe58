"""Inventory transaction endpoints: recent history, record, delete."""

import uuid

from fastapi import APIRouter, Query, status

from clinic_stock.api.deps import CurrentClinic, Session
from clinic_stock.core.config import get_settings
from clinic_stock.models.item import Item
from clinic_stock.models.transaction import InventoryTransaction, TransactionCreate, TransactionRead
from clinic_stock.services import ledger

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _to_read(txn: InventoryTransaction, item: Item) -> TransactionRead:
    return TransactionRead(
        id=txn.id,
        item_id=txn.item_id,
        item_name=item.name,
        unit=item.unit,
        type=txn.type,
        qty=txn.qty,
        memo=txn.memo,
        occurred_at=txn.occurred_at,
    )


@router.get("", response_model=list[TransactionRead])
async def list_recent_transactions(
    ctx: CurrentClinic,
    session: Session,
    limit: int | None = Query(default=None, ge=1, le=500),
) -> list[TransactionRead]:
    """Most recent entries first (default: the last 50)."""
    entries = await ledger.list_transactions(
        session,
        ctx.clinic_id,
        limit=limit or get_settings().recent_transactions_limit,
    )
    return [_to_read(txn, item) for txn, item in entries]


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def record_transaction(
    body: TransactionCreate, ctx: CurrentClinic, session: Session,
) -> TransactionRead:
    """Record an in / out / adjust entry.

    In and out take positive quantities; adjust accepts a signed delta.
    """
    txn = await ledger.record_transaction(
        session,
        ctx.clinic_id,
        ctx.user_id,
        item_id=body.item_id,
        type_=body.type,
        raw_qty=body.qty,
        memo=body.memo,
        occurred_date=body.occurred_date,
        tz_name=get_settings().report_timezone,
    )
    item = await session.get(Item, txn.item_id)
    return _to_read(txn, item)


@router.delete("/{txn_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(txn_id: uuid.UUID, ctx: CurrentClinic, session: Session) -> None:
    """Hard delete; wrong entries are removed and re-entered."""
    await ledger.delete_transaction(session, ctx.clinic_id, txn_id)
