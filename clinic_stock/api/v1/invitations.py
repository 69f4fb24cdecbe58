"""Invite acceptance: any signed-in identity can redeem a link once."""

from fastapi import APIRouter

from clinic_stock.api.deps import Auth, Session
from clinic_stock.models.invitation import InvitationAccepted
from clinic_stock.services.invitations import accept_invitation

router = APIRouter(prefix="/invitations", tags=["invitations"])


@router.post("/{token}/accept", response_model=InvitationAccepted)
async def accept(token: str, auth: Auth, session: Session) -> InvitationAccepted:
    """Join the inviting clinic. Unknown, used or expired links answer 410."""
    accepted = await accept_invitation(session, token, auth.user_id)
    return InvitationAccepted(clinic_id=accepted.clinic_id, role=accepted.role)
