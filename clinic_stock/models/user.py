"""User model: an authenticated identity, independent of any clinic."""

import uuid

from sqlmodel import Field, SQLModel

from clinic_stock.models.base import TimestampMixin, new_uuid


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    email: str = Field(max_length=320, nullable=False, unique=True, index=True)
    password_hash: str = Field(nullable=False)
    display_name: str = Field(default="", max_length=255)
    is_active: bool = Field(default=True)


class Profile(SQLModel, table=True):
    """Per-identity cache of the active clinic. Lazily populated."""

    __tablename__ = "profiles"

    user_id: uuid.UUID = Field(foreign_key="users.id", primary_key=True)
    current_clinic_id: uuid.UUID | None = Field(
        default=None, foreign_key="clinics.id", nullable=True, index=True,
    )


# ── Pydantic schemas ─────────────────────────────────────────

class UserCreate(SQLModel):
    email: str = Field(max_length=320)
    password: str = Field(min_length=8, max_length=128)
    display_name: str = Field(default="", max_length=255)


class UserRead(SQLModel):
    id: uuid.UUID
    email: str
    display_name: str
    is_active: bool
