"""Invitation lifecycle: issue, accept once, list.

States are ``unused`` → ``used`` (stored) and ``unused`` → ``expired``
(derived from ``expires_at`` at acceptance time, never swept).
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinic_stock.core.config import get_settings
from clinic_stock.core.errors import InvalidOrExpired
from clinic_stock.core.security import generate_invite_token
from clinic_stock.models.base import utcnow
from clinic_stock.models.clinic import ClinicMember, MemberRole
from clinic_stock.models.invitation import ClinicInvitation
from clinic_stock.services.tenancy import require_owner, set_current_clinic

logger = logging.getLogger(__name__)

RECENT_INVITATIONS = 20


@dataclass(frozen=True, slots=True)
class AcceptedInvite:
    clinic_id: uuid.UUID
    role: MemberRole
    already_member: bool = False


def invitation_status(invite: ClinicInvitation) -> str:
    return "used" if invite.used_at is not None else "unused"


def invite_url(token: str, site_url: str = "") -> str:
    path = f"/invite/{token}"
    return f"{site_url.rstrip('/')}{path}" if site_url else path


async def issue_invitation(
    session: AsyncSession,
    clinic_id: uuid.UUID,
    requester_id: uuid.UUID,
    requester_role: str | None,
    role: MemberRole = MemberRole.STAFF,
    ttl: timedelta | None = None,
    now: datetime | None = None,
) -> ClinicInvitation:
    """Create a new invitation. Only owners may invite.

    ``ttl`` defaults to the configured ``invite_ttl_days``.
    """
    require_owner(requester_role, "Only the clinic owner can create invite links")

    if ttl is None:
        ttl = timedelta(days=get_settings().invite_ttl_days)
    created_at = now or utcnow()
    invite = ClinicInvitation(
        token=generate_invite_token(),
        clinic_id=clinic_id,
        role=role,
        created_at=created_at,
        expires_at=created_at + ttl,
        created_by=requester_id,
    )
    session.add(invite)
    await session.commit()
    await session.refresh(invite)
    logger.info("Invitation issued for clinic %s by %s", clinic_id, requester_id)
    return invite


async def accept_invitation(
    session: AsyncSession,
    token: str,
    user_id: uuid.UUID,
    now: datetime | None = None,
) -> AcceptedInvite:
    """Consume an invitation and grant its membership.

    The token is claimed by one conditional UPDATE; only a row that is still
    unused and unexpired matches, so of two concurrent acceptances exactly one
    gets a row back. The membership insert and profile update are committed
    together with the claim.
    """
    now = now or utcnow()
    claim = (
        update(ClinicInvitation)
        .where(
            ClinicInvitation.token == token,  # type: ignore[arg-type]
            ClinicInvitation.used_at.is_(None),  # type: ignore[union-attr]
            ClinicInvitation.expires_at > now,  # type: ignore[arg-type]
        )
        .values(used_at=now, used_by=user_id)
        .returning(ClinicInvitation.clinic_id, ClinicInvitation.role)
        .execution_options(synchronize_session=False)
    )
    row = (await session.execute(claim)).first()
    if row is None:
        await session.rollback()
        logger.info("Rejected invitation token for user %s", user_id)
        raise InvalidOrExpired(
            "This invite link is invalid or has expired",
            next_view=f"/invite/{token}",
        )

    clinic_id, role = row.clinic_id, MemberRole(row.role)

    existing = await session.execute(
        select(ClinicMember).where(
            ClinicMember.clinic_id == clinic_id,
            ClinicMember.user_id == user_id,
        )
    )
    member = existing.scalar_one_or_none()
    if member is not None:
        existing_role = MemberRole(member.role)
        # Keep the link usable for someone else
        await session.rollback()
        return AcceptedInvite(clinic_id=clinic_id, role=existing_role, already_member=True)

    session.add(ClinicMember(clinic_id=clinic_id, user_id=user_id, role=role))
    await set_current_clinic(session, user_id, clinic_id)
    await session.commit()
    logger.info("User %s joined clinic %s as %s", user_id, clinic_id, role)
    return AcceptedInvite(clinic_id=clinic_id, role=role)


async def list_invitations(
    session: AsyncSession, clinic_id: uuid.UUID, limit: int = RECENT_INVITATIONS
) -> list[ClinicInvitation]:
    result = await session.execute(
        select(ClinicInvitation)
        .where(ClinicInvitation.clinic_id == clinic_id)
        .order_by(ClinicInvitation.created_at.desc())  # type: ignore[attr-defined]
        .limit(limit)
    )
    return list(result.scalars().all())
