"""Item model: a stock-keeping unit with a reorder threshold."""

import uuid

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from clinic_stock.models.base import ArchivableMixin, TimestampMixin, new_uuid

DEFAULT_UNIT = "ea"


class Item(ArchivableMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "items"
    __table_args__ = (UniqueConstraint("clinic_id", "name", name="uq_item_name"),)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    clinic_id: uuid.UUID = Field(foreign_key="clinics.id", nullable=False, index=True)
    category_id: uuid.UUID = Field(foreign_key="categories.id", nullable=False, index=True)
    name: str = Field(max_length=255, nullable=False)
    unit: str = Field(default=DEFAULT_UNIT, max_length=50)

    # Alert when stock falls to or below this value; 0 disables the alert
    reorder_threshold: int = Field(default=0, ge=0)


# ── Pydantic schemas ─────────────────────────────────────────

class ItemCreate(SQLModel):
    """Raw form values; parsed and checked in services.entry."""
    name: str = Field(default="", max_length=255)
    category_id: uuid.UUID | None = None
    unit: str = Field(default="", max_length=50)
    reorder_threshold: int | float | str | None = None


class ItemUpdate(SQLModel):
    reorder_threshold: int | float | str | None = None


class ItemRead(SQLModel):
    id: uuid.UUID
    category_id: uuid.UUID
    category_name: str
    name: str
    unit: str
    reorder_threshold: int
    stock: int
    is_low: bool
