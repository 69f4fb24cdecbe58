"""FastAPI dependencies for authentication and clinic resolution."""

import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_stock.core.database import get_session
from clinic_stock.core.errors import NoTenant
from clinic_stock.core.security import decode_jwt
from clinic_stock.models.clinic import MemberRole
from clinic_stock.models.user import User
from clinic_stock.services.tenancy import get_member_role, resolve_tenant, set_current_clinic

bearer_scheme = HTTPBearer()


class AuthContext:
    """Resolved identity carried through a request."""

    __slots__ = ("user_id", "email")

    def __init__(self, user_id: uuid.UUID, email: str) -> None:
        self.user_id = user_id
        self.email = email


class ClinicContext:
    """Identity plus its active clinic and role there."""

    __slots__ = ("user_id", "clinic_id", "role")

    def __init__(self, user_id: uuid.UUID, clinic_id: uuid.UUID, role: MemberRole) -> None:
        self.user_id = user_id
        self.clinic_id = clinic_id
        self.role = role

    @property
    def is_owner(self) -> bool:
        return self.role == MemberRole.OWNER


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AuthContext:
    """Decode the bearer JWT and make sure its user still exists."""
    try:
        payload = decode_jwt(credentials.credentials)
        user_id = uuid.UUID(payload["sub"])
    except JWTError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        ) from exc
    except (KeyError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Malformed token payload",
        ) from exc

    user = await session.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is disabled or no longer exists",
        )
    return AuthContext(user_id=user.id, email=user.email)


async def get_clinic_context(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ClinicContext:
    """Resolve the caller's active clinic; NoTenant routes them to setup."""
    clinic_id = await resolve_tenant(session, auth.user_id)
    role = await get_member_role(session, clinic_id, auth.user_id)
    if role is None:
        # Stale pointer, e.g. the membership was removed; fall back to another clinic
        await set_current_clinic(session, auth.user_id, None)
        await session.commit()
        clinic_id = await resolve_tenant(session, auth.user_id)
        role = await get_member_role(session, clinic_id, auth.user_id)
        if role is None:
            raise NoTenant()
    return ClinicContext(user_id=auth.user_id, clinic_id=clinic_id, role=role)


# Typed shorthand for use in route signatures
Auth = Annotated[AuthContext, Depends(get_auth_context)]
CurrentClinic = Annotated[ClinicContext, Depends(get_clinic_context)]
Session = Annotated[AsyncSession, Depends(get_session)]
