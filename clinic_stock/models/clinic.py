"""Clinic model: the tenant, plus its memberships."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from clinic_stock.models.base import TimestampMixin, new_uuid


class MemberRole(StrEnum):
    OWNER = "owner"
    STAFF = "staff"


class Clinic(TimestampMixin, SQLModel, table=True):
    __tablename__ = "clinics"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    created_by: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)


class ClinicMember(TimestampMixin, SQLModel, table=True):
    __tablename__ = "clinic_members"
    __table_args__ = (UniqueConstraint("clinic_id", "user_id", name="uq_clinic_member"),)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    clinic_id: uuid.UUID = Field(foreign_key="clinics.id", nullable=False, index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    role: MemberRole = Field(default=MemberRole.STAFF)


# ── Pydantic schemas ─────────────────────────────────────────

class ClinicCreate(SQLModel):
    name: str = Field(max_length=255)


class ClinicRead(SQLModel):
    id: uuid.UUID
    name: str
    created_by: uuid.UUID
    created_at: datetime


class ClinicMemberRead(SQLModel):
    user_id: uuid.UUID
    role: MemberRole
    created_at: datetime
