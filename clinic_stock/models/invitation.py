"""ClinicInvitation model: single-use, time-boxed membership links."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from clinic_stock.models.base import utcnow
from clinic_stock.models.clinic import MemberRole


class ClinicInvitation(SQLModel, table=True):
    __tablename__ = "clinic_invitations"

    # Opaque random token, shown in the invite link
    token: str = Field(primary_key=True, max_length=64)
    clinic_id: uuid.UUID = Field(foreign_key="clinics.id", nullable=False, index=True)
    role: MemberRole = Field(default=MemberRole.STAFF)

    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime)
    expires_at: datetime = Field(nullable=False, sa_type=DateTime)

    # Set exactly once, when the invitation is accepted
    used_at: datetime | None = Field(default=None, sa_type=DateTime)
    used_by: uuid.UUID | None = Field(default=None, foreign_key="users.id")

    created_by: uuid.UUID = Field(foreign_key="users.id", nullable=False)


# ── Pydantic schemas ─────────────────────────────────────────

class InvitationRead(SQLModel):
    token: str
    role: MemberRole
    url: str
    status: str = Field(description="'used' or 'unused'; expiry is informational")
    created_at: datetime
    expires_at: datetime
    used_at: datetime | None


class InvitationAccepted(SQLModel):
    clinic_id: uuid.UUID
    role: MemberRole
