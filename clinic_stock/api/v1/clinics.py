"""Clinic setup, current clinic info and clinic deletion."""

import uuid

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from clinic_stock.api.deps import Auth, CurrentClinic, Session
from clinic_stock.core.config import get_settings
from clinic_stock.core.errors import BackendFailure, ValidationError
from clinic_stock.models.clinic import Clinic, ClinicCreate, ClinicRead, MemberRole
from clinic_stock.services.entry import require_name
from clinic_stock.services.tenancy import create_clinic, delete_clinic, has_membership, require_owner

router = APIRouter(prefix="/clinics", tags=["clinics"])

CLINIC_DELETE_CONFIRMATION = "delete"


class CurrentClinicResponse(BaseModel):
    clinic: ClinicRead
    role: MemberRole
    user_id: uuid.UUID


@router.post(
    "",
    response_model=ClinicRead,
    status_code=status.HTTP_201_CREATED,
    summary="Set up a clinic for the current user",
)
async def setup_clinic(body: ClinicCreate, auth: Auth, session: Session) -> ClinicRead:
    """Create a clinic owned by the caller and seed its default categories.

    An identity that already belongs to a clinic is sent back to the dashboard.
    """
    try:
        name = require_name(body.name, "clinic")
    except ValidationError as exc:
        exc.next_view = "/setup"
        raise

    if await has_membership(session, auth.user_id):
        raise BackendFailure("You already belong to a clinic", next_view="/dashboard")

    clinic = await create_clinic(
        session, auth.user_id, name, default_categories=get_settings().default_categories,
    )
    return ClinicRead.model_validate(clinic)


@router.get("/me", response_model=CurrentClinicResponse)
async def get_current_clinic(ctx: CurrentClinic, session: Session) -> CurrentClinicResponse:
    clinic = await session.get(Clinic, ctx.clinic_id)
    if clinic is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Clinic not found")
    return CurrentClinicResponse(
        clinic=ClinicRead.model_validate(clinic),
        role=ctx.role,
        user_id=ctx.user_id,
    )


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_current_clinic(ctx: CurrentClinic, session: Session, confirm: str = "") -> None:
    """Owner only. Removes the clinic with all its categories, items and ledger."""
    require_owner(ctx.role)
    if confirm.strip() != CLINIC_DELETE_CONFIRMATION:
        raise ValidationError(
            f"Type '{CLINIC_DELETE_CONFIRMATION}' to confirm", next_view="/settings",
        )
    await delete_clinic(session, ctx.clinic_id)
