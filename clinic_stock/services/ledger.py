"""Inventory transactions: record, list, delete."""

import logging
import uuid
from datetime import date, datetime

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinic_stock.core.errors import BackendFailure, NotFound, ValidationError
from clinic_stock.models.item import Item
from clinic_stock.models.transaction import InventoryTransaction, TransactionType
from clinic_stock.services.catalog import get_item
from clinic_stock.services.entry import occurred_at_for, validate_entry

logger = logging.getLogger(__name__)


async def record_transaction(
    session: AsyncSession,
    clinic_id: uuid.UUID,
    user_id: uuid.UUID,
    item_id: uuid.UUID | None,
    type_: str,
    raw_qty: int | float | str | None,
    memo: str = "",
    occurred_date: date | None = None,
    tz_name: str = "UTC",
) -> InventoryTransaction:
    if item_id is None:
        raise ValidationError("Choose an item", next_view="/transactions")
    try:
        qty = validate_entry(type_, raw_qty)
    except ValidationError as exc:
        exc.next_view = "/transactions"
        raise

    item = await get_item(session, clinic_id, item_id)
    if item is None or item.is_archived:
        raise ValidationError("Choose an item", next_view="/transactions")

    txn = InventoryTransaction(
        clinic_id=clinic_id,
        item_id=item_id,
        type=TransactionType(type_.strip()),
        qty=qty,
        memo=memo.strip() or None,
        occurred_at=occurred_at_for(occurred_date, tz_name),
        created_by=user_id,
    )
    session.add(txn)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("Transaction insert failed for clinic %s: %s", clinic_id, exc.orig)
        raise BackendFailure("Could not save the entry", next_view="/transactions") from exc
    await session.refresh(txn)
    return txn


async def delete_transaction(session: AsyncSession, clinic_id: uuid.UUID, txn_id: uuid.UUID) -> None:
    result = await session.execute(
        delete(InventoryTransaction).where(
            InventoryTransaction.id == txn_id,  # type: ignore[arg-type]
            InventoryTransaction.clinic_id == clinic_id,  # type: ignore[arg-type]
        )
    )
    if result.rowcount == 0:
        await session.rollback()
        raise NotFound("Entry not found", next_view="/transactions")
    await session.commit()


async def list_transactions(
    session: AsyncSession,
    clinic_id: uuid.UUID,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int | None = None,
    newest_first: bool = True,
) -> list[tuple[InventoryTransaction, Item]]:
    """Ledger rows joined with their item, archived items included."""
    order = InventoryTransaction.occurred_at
    stmt = (
        select(InventoryTransaction, Item)
        .join(Item, Item.id == InventoryTransaction.item_id)  # type: ignore[arg-type]
        .where(InventoryTransaction.clinic_id == clinic_id)
        .order_by(order.desc() if newest_first else order.asc())  # type: ignore[attr-defined]
    )
    if start is not None:
        stmt = stmt.where(InventoryTransaction.occurred_at >= start)
    if end is not None:
        stmt = stmt.where(InventoryTransaction.occurred_at <= end)
    if limit is not None:
        stmt = stmt.limit(limit)

    result = await session.execute(stmt)
    return [(txn, item) for txn, item in result.all()]
