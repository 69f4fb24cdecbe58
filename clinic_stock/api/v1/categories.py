"""Category endpoints: list active, create, archive."""

import uuid

from fastapi import APIRouter, status

from clinic_stock.api.deps import CurrentClinic, Session
from clinic_stock.models.category import CategoryCreate, CategoryRead
from clinic_stock.services import catalog

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryRead])
async def list_categories(ctx: CurrentClinic, session: Session) -> list[CategoryRead]:
    categories = await catalog.list_categories(session, ctx.clinic_id)
    return [CategoryRead.model_validate(c) for c in categories]


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryCreate, ctx: CurrentClinic, session: Session) -> CategoryRead:
    category = await catalog.create_category(session, ctx.clinic_id, body.name)
    return CategoryRead.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def archive_category(category_id: uuid.UUID, ctx: CurrentClinic, session: Session) -> None:
    """Soft-delete: the category and its items drop out of active views."""
    await catalog.archive_category(session, ctx.clinic_id, category_id)
