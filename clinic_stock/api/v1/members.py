"""Clinic membership: member list and invite links (owner only)."""

from fastapi import APIRouter, status

from clinic_stock.api.deps import CurrentClinic, Session
from clinic_stock.core.config import get_settings
from clinic_stock.models.clinic import ClinicMemberRead
from clinic_stock.models.invitation import ClinicInvitation, InvitationRead
from clinic_stock.services.invitations import (
    invitation_status,
    invite_url,
    issue_invitation,
    list_invitations,
)
from clinic_stock.services.tenancy import list_members, require_owner

router = APIRouter(prefix="/members", tags=["members"])


def _invite_read(invite: ClinicInvitation) -> InvitationRead:
    return InvitationRead(
        token=invite.token,
        role=invite.role,
        url=invite_url(invite.token, get_settings().site_url),
        status=invitation_status(invite),
        created_at=invite.created_at,
        expires_at=invite.expires_at,
        used_at=invite.used_at,
    )


@router.get("", response_model=list[ClinicMemberRead])
async def list_clinic_members(ctx: CurrentClinic, session: Session) -> list[ClinicMemberRead]:
    require_owner(ctx.role)
    members = await list_members(session, ctx.clinic_id)
    return [ClinicMemberRead.model_validate(m) for m in members]


@router.get("/invitations", response_model=list[InvitationRead])
async def list_recent_invitations(ctx: CurrentClinic, session: Session) -> list[InvitationRead]:
    """Latest 20 invite links. Expired-but-unused links still show as unused."""
    require_owner(ctx.role)
    invites = await list_invitations(session, ctx.clinic_id)
    return [_invite_read(i) for i in invites]


@router.post(
    "/invitations",
    response_model=InvitationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a staff invite link",
)
async def create_invitation(ctx: CurrentClinic, session: Session) -> InvitationRead:
    """Issue a single-use staff invitation that expires after the configured TTL."""
    invite = await issue_invitation(
        session,
        ctx.clinic_id,
        requester_id=ctx.user_id,
        requester_role=ctx.role,
    )
    return _invite_read(invite)

