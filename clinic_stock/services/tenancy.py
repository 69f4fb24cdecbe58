"""Clinic (tenant) resolution, setup and membership roles."""

import logging
import uuid

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinic_stock.core.errors import BackendFailure, Forbidden, NoTenant
from clinic_stock.models.category import Category
from clinic_stock.models.clinic import Clinic, ClinicMember, MemberRole
from clinic_stock.models.invitation import ClinicInvitation
from clinic_stock.models.item import Item
from clinic_stock.models.transaction import InventoryTransaction
from clinic_stock.models.user import Profile

logger = logging.getLogger(__name__)


async def set_current_clinic(
    session: AsyncSession, user_id: uuid.UUID, clinic_id: uuid.UUID | None
) -> None:
    """Upsert the profile row of ``user_id``. Caller commits."""
    profile = await session.get(Profile, user_id)
    if profile is None:
        profile = Profile(user_id=user_id, current_clinic_id=clinic_id)
    else:
        profile.current_clinic_id = clinic_id
    session.add(profile)


async def resolve_tenant(session: AsyncSession, user_id: uuid.UUID) -> uuid.UUID:
    """Return the active clinic of an identity.

    Uses the profile's cached clinic when set; otherwise adopts the identity's
    first membership and stores it on the profile. Raises ``NoTenant`` when the
    identity belongs to no clinic, which routes the caller to setup.
    """
    profile = await session.get(Profile, user_id)
    if profile is not None and profile.current_clinic_id is not None:
        return profile.current_clinic_id

    result = await session.execute(
        select(ClinicMember.clinic_id)
        .where(ClinicMember.user_id == user_id)
        .order_by(ClinicMember.created_at.asc())  # type: ignore[attr-defined]
        .limit(1)
    )
    clinic_id = result.scalar_one_or_none()
    if clinic_id is None:
        raise NoTenant()

    await set_current_clinic(session, user_id, clinic_id)
    await session.commit()
    return clinic_id


async def get_member_role(
    session: AsyncSession, clinic_id: uuid.UUID, user_id: uuid.UUID
) -> MemberRole | None:
    result = await session.execute(
        select(ClinicMember.role).where(
            ClinicMember.clinic_id == clinic_id,
            ClinicMember.user_id == user_id,
        )
    )
    role = result.scalar_one_or_none()
    return MemberRole(role) if role is not None else None


def require_owner(role: str | None, message: str = "Only the clinic owner can do this") -> None:
    if role != MemberRole.OWNER:
        raise Forbidden(message)


async def has_membership(session: AsyncSession, user_id: uuid.UUID) -> bool:
    result = await session.execute(
        select(ClinicMember.id).where(ClinicMember.user_id == user_id).limit(1)
    )
    return result.first() is not None


async def create_clinic(
    session: AsyncSession,
    user_id: uuid.UUID,
    name: str,
    default_categories: list[str],
) -> Clinic:
    """Create a clinic with its owner membership and seeded categories."""
    clinic = Clinic(name=name, created_by=user_id)
    session.add(clinic)
    await session.flush()  # populate clinic.id

    session.add(ClinicMember(clinic_id=clinic.id, user_id=user_id, role=MemberRole.OWNER))
    for index, category_name in enumerate(default_categories):
        session.add(Category(clinic_id=clinic.id, name=category_name, sort_order=index))
    await set_current_clinic(session, user_id, clinic.id)

    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("Clinic setup failed for user %s: %s", user_id, exc.orig)
        raise BackendFailure("Could not create the clinic", next_view="/setup") from exc

    await session.refresh(clinic)
    logger.info("Clinic %s created by user %s", clinic.id, user_id)
    return clinic


async def list_members(session: AsyncSession, clinic_id: uuid.UUID) -> list[ClinicMember]:
    result = await session.execute(
        select(ClinicMember)
        .where(ClinicMember.clinic_id == clinic_id)
        .order_by(ClinicMember.created_at.asc())  # type: ignore[attr-defined]
    )
    return list(result.scalars().all())


async def delete_clinic(session: AsyncSession, clinic_id: uuid.UUID) -> None:
    """Remove a clinic and every row that belongs to it."""
    for model in (InventoryTransaction, Item, Category, ClinicInvitation, ClinicMember):
        await session.execute(delete(model).where(model.clinic_id == clinic_id))  # type: ignore[attr-defined]
    await session.execute(
        update(Profile)
        .where(Profile.current_clinic_id == clinic_id)  # type: ignore[arg-type]
        .values(current_clinic_id=None)
    )
    await session.execute(delete(Clinic).where(Clinic.id == clinic_id))  # type: ignore[arg-type]
    await session.commit()
    logger.info("Clinic %s deleted", clinic_id)
