"""Categories and items: tenant-scoped create / update / archive."""

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinic_stock.core.errors import BackendFailure, NotFound, ValidationError
from clinic_stock.models.base import utcnow
from clinic_stock.models.category import DEFAULT_SORT_ORDER, Category
from clinic_stock.models.item import DEFAULT_UNIT, Item
from clinic_stock.services.entry import parse_threshold, require_name

logger = logging.getLogger(__name__)


async def _commit_or_fail(session: AsyncSession, message: str, next_view: str) -> None:
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("%s: %s", message, exc.orig)
        raise BackendFailure(message, next_view=next_view) from exc


# ── Categories ───────────────────────────────────────────────

async def create_category(session: AsyncSession, clinic_id: uuid.UUID, raw_name: str) -> Category:
    name = require_name(raw_name, "category")
    category = Category(clinic_id=clinic_id, name=name, sort_order=DEFAULT_SORT_ORDER)
    session.add(category)
    await _commit_or_fail(
        session, "Could not add the category. Check whether the name already exists", "/categories",
    )
    await session.refresh(category)
    return category


async def list_categories(session: AsyncSession, clinic_id: uuid.UUID) -> list[Category]:
    result = await session.execute(
        select(Category)
        .where(Category.clinic_id == clinic_id, Category.is_archived.is_(False))  # type: ignore[attr-defined]
        .order_by(Category.sort_order.asc(), Category.name.asc())  # type: ignore[attr-defined]
    )
    return list(result.scalars().all())


async def get_category(
    session: AsyncSession, clinic_id: uuid.UUID, category_id: uuid.UUID
) -> Category | None:
    result = await session.execute(
        select(Category).where(Category.id == category_id, Category.clinic_id == clinic_id)
    )
    return result.scalar_one_or_none()


async def archive_category(session: AsyncSession, clinic_id: uuid.UUID, category_id: uuid.UUID) -> None:
    category = await get_category(session, clinic_id, category_id)
    if category is None:
        raise NotFound("Category not found", next_view="/categories")
    category.is_archived = True
    category.updated_at = utcnow()
    session.add(category)
    await _commit_or_fail(session, "Could not archive the category", "/categories")


# ── Items ────────────────────────────────────────────────────

async def create_item(
    session: AsyncSession,
    clinic_id: uuid.UUID,
    raw_name: str,
    category_id: uuid.UUID | None,
    raw_unit: str,
    raw_threshold: int | float | str | None,
) -> Item:
    name = require_name(raw_name, "item")
    if category_id is None:
        raise ValidationError("Choose a category", next_view="/items")
    threshold = parse_threshold(raw_threshold)

    category = await get_category(session, clinic_id, category_id)
    if category is None or category.is_archived:
        raise ValidationError("Choose a category", next_view="/items")

    item = Item(
        clinic_id=clinic_id,
        category_id=category_id,
        name=name,
        unit=(raw_unit or "").strip() or DEFAULT_UNIT,
        reorder_threshold=threshold,
    )
    session.add(item)
    await _commit_or_fail(
        session, "Could not add the item. Check whether the name already exists", "/items",
    )
    await session.refresh(item)
    return item


async def get_item(session: AsyncSession, clinic_id: uuid.UUID, item_id: uuid.UUID) -> Item | None:
    result = await session.execute(
        select(Item).where(Item.id == item_id, Item.clinic_id == clinic_id)
    )
    return result.scalar_one_or_none()


async def _get_item_or_404(session: AsyncSession, clinic_id: uuid.UUID, item_id: uuid.UUID) -> Item:
    item = await get_item(session, clinic_id, item_id)
    if item is None:
        raise NotFound("Item not found", next_view="/items")
    return item


async def update_threshold(
    session: AsyncSession,
    clinic_id: uuid.UUID,
    item_id: uuid.UUID,
    raw_threshold: int | float | str | None,
) -> Item:
    threshold = parse_threshold(raw_threshold)
    item = await _get_item_or_404(session, clinic_id, item_id)
    item.reorder_threshold = threshold
    item.updated_at = utcnow()
    session.add(item)
    await _commit_or_fail(session, "Could not save the threshold", "/items")
    await session.refresh(item)
    return item


async def archive_item(session: AsyncSession, clinic_id: uuid.UUID, item_id: uuid.UUID) -> None:
    item = await _get_item_or_404(session, clinic_id, item_id)
    item.is_archived = True
    item.updated_at = utcnow()
    session.add(item)
    await _commit_or_fail(session, "Could not archive the item", "/items")
