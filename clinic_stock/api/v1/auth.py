"""Authentication endpoints: register, login, current identity, account deletion."""

import logging
import uuid

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import delete
from sqlmodel import select

from clinic_stock.api.deps import Auth, Session
from clinic_stock.core.errors import ValidationError
from clinic_stock.core.security import create_jwt, hash_password, verify_password
from clinic_stock.models.base import utcnow
from clinic_stock.models.clinic import Clinic, ClinicMember
from clinic_stock.models.user import Profile, User, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

ACCOUNT_DELETE_CONFIRMATION = "withdraw"


# ── Schemas ──────────────────────────────────────────────────

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    display_name: str = Field(default="", max_length=255)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class MeResponse(BaseModel):
    user: UserRead
    current_clinic_id: uuid.UUID | None


# ── Routes ───────────────────────────────────────────────────

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, session: Session) -> TokenResponse:
    """Create an identity. It has no clinic until setup or an accepted invite."""
    existing = await session.execute(select(User).where(User.email == body.email))
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )

    user = User(
        email=body.email,
        password_hash=hash_password(body.password),
        display_name=body.display_name,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)

    return TokenResponse(
        access_token=create_jwt(subject=str(user.id)),
        user=UserRead.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, session: Session) -> TokenResponse:
    """Authenticate with email + password, receive a JWT."""
    result = await session.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    return TokenResponse(
        access_token=create_jwt(subject=str(user.id)),
        user=UserRead.model_validate(user),
    )


@router.get("/me", response_model=MeResponse)
async def get_me(auth: Auth, session: Session) -> MeResponse:
    """Return the current identity and its cached clinic (may be null)."""
    user = await session.get(User, auth.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    profile = await session.get(Profile, auth.user_id)
    return MeResponse(
        user=UserRead.model_validate(user),
        current_clinic_id=profile.current_clinic_id if profile else None,
    )


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(auth: Auth, session: Session, confirm: str = "") -> None:
    """Delete the caller's account.

    Refused while a clinic created by the caller still exists; that clinic
    has to be deleted first. Ledger rows keep pointing at the user id, so the
    row is anonymised and disabled rather than removed.
    """
    if confirm.strip() != ACCOUNT_DELETE_CONFIRMATION:
        raise ValidationError(
            f"Type '{ACCOUNT_DELETE_CONFIRMATION}' to confirm", next_view="/settings",
        )

    created = await session.execute(
        select(Clinic.id).where(Clinic.created_by == auth.user_id).limit(1)
    )
    if created.first() is not None:
        raise ValidationError(
            "You own a clinic. Delete the clinic first", next_view="/settings",
        )

    await session.execute(delete(ClinicMember).where(ClinicMember.user_id == auth.user_id))  # type: ignore[arg-type]
    await session.execute(delete(Profile).where(Profile.user_id == auth.user_id))  # type: ignore[arg-type]

    user = await session.get(User, auth.user_id)
    if user is not None:
        user.email = f"deleted+{user.id.hex}@invalid"
        user.password_hash = ""
        user.display_name = ""
        user.is_active = False
        user.updated_at = utcnow()
        session.add(user)
    await session.commit()
    logger.info("Account %s deleted", auth.user_id)
