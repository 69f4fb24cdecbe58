"""InventoryTransaction model: the append-only stock ledger."""

import uuid
from datetime import date, datetime
from enum import StrEnum

from sqlalchemy import DateTime, Text
from sqlmodel import Column, Field, SQLModel

from clinic_stock.models.base import TimestampMixin, new_uuid, utcnow


class TransactionType(StrEnum):
    IN = "in"
    OUT = "out"
    ADJUST = "adjust"


class InventoryTransaction(TimestampMixin, SQLModel, table=True):
    __tablename__ = "inventory_transactions"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    clinic_id: uuid.UUID = Field(foreign_key="clinics.id", nullable=False, index=True)
    item_id: uuid.UUID = Field(foreign_key="items.id", nullable=False, index=True)

    type: TransactionType = Field(nullable=False)

    # Magnitude for in/out, signed delta for adjust
    qty: int = Field(nullable=False)

    memo: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    occurred_at: datetime = Field(default_factory=utcnow, nullable=False, index=True, sa_type=DateTime)
    created_by: uuid.UUID = Field(foreign_key="users.id", nullable=False)


# ── Pydantic schemas ─────────────────────────────────────────

class TransactionCreate(SQLModel):
    """Raw form values; type and qty are checked by services.entry."""
    item_id: uuid.UUID | None = None
    type: str = ""
    qty: int | float | str | None = None
    memo: str = Field(default="", max_length=2000)
    occurred_date: date | None = None


class TransactionRead(SQLModel):
    id: uuid.UUID
    item_id: uuid.UUID
    item_name: str
    unit: str
    type: TransactionType
    qty: int
    memo: str | None
    occurred_at: datetime
