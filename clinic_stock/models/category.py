"""Category model: groups items within a clinic."""

import uuid

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from clinic_stock.models.base import ArchivableMixin, TimestampMixin, new_uuid

# New categories sort after the seeded defaults
DEFAULT_SORT_ORDER = 999


class Category(ArchivableMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("clinic_id", "name", name="uq_category_name"),)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    clinic_id: uuid.UUID = Field(foreign_key="clinics.id", nullable=False, index=True)
    name: str = Field(max_length=255, nullable=False)
    sort_order: int = Field(default=DEFAULT_SORT_ORDER)


# ── Pydantic schemas ─────────────────────────────────────────

class CategoryCreate(SQLModel):
    name: str = Field(default="", max_length=255)


class CategoryRead(SQLModel):
    id: uuid.UUID
    name: str
    sort_order: int
