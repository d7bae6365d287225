# agenda/api/v1/invitations.py
from typing import List

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from agenda.core.auth import get_current_principal, get_db
from agenda.core.errors import ExternalServiceError
from agenda.core.rbac import Principal
from agenda.crud.invitation import (
    accept_invitation,
    issue_invitation,
    list_invitations,
    resend_invitation,
    soft_delete_invitation,
    verify_invitation,
)
from agenda.schemas.invitation import (
    InvitationAccept,
    InvitationCreate,
    InvitationOut,
    InvitationSendResult,
    InvitationVerifyOut,
)
from agenda.schemas.user import UserOut
from agenda.services.audit import audit_log, ip_from_request
from agenda.services.mailer import InvitationSender, get_mailer

router = APIRouter()


@router.post("/invitations", response_model=InvitationSendResult, status_code=status.HTTP_201_CREATED)
def api_issue_invitation(
    payload: InvitationCreate,
    request: Request,  # no default, must precede Depends parameters
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    send: InvitationSender = Depends(get_mailer),
):
    """
    Create and email an invitation. When the email fails the invitation is
    kept and the 502 error carries its id so it can be resent.
    """
    try:
        invitation, message = issue_invitation(db, principal, payload.email, send=send)
    except ExternalServiceError as e:
        # the invitation is already committed when only the send failed
        invitation_id = e.details.get("invitation_id") if isinstance(e.details, dict) else None
        if invitation_id is not None:
            _audit_created(db, principal, request, invitation_id, payload.email, email_sent=False)
        raise
    _audit_created(db, principal, request, invitation.id, invitation.email, email_sent=True)
    return InvitationSendResult(
        invitation=InvitationOut.model_validate(invitation),
        email_sent=True,
        message=message,
    )


def _audit_created(db: Session, principal: Principal, request: Request, invitation_id: int, email: str, *, email_sent: bool) -> None:
    audit_log(
        db,
        user_id=principal.user_id,
        action="INVITATION_CREATED",
        entity_type="invitation",
        entity_id=invitation_id,
        meta={"email": email, "email_sent": email_sent},
        ip=ip_from_request(request),
    )


@router.get("/invitations", response_model=List[InvitationOut])
def api_list_invitations(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return list_invitations(db, principal)


@router.get("/invitations/verify", response_model=InvitationVerifyOut)
def api_verify_invitation(
    token: str = Query(..., description="Invitation token from the email link"),
    db: Session = Depends(get_db),
):
    return verify_invitation(db, token)


@router.post("/invitations/accept", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def api_accept_invitation(
    payload: InvitationAccept,
    request: Request,
    db: Session = Depends(get_db),
):
    user, musician = accept_invitation(
        db,
        payload.token,
        name=payload.name,
        whatsapp=payload.whatsapp,
        password=payload.password,
    )
    audit_log(
        db,
        user_id=user.id,
        action="INVITATION_ACCEPTED",
        entity_type="musician",
        entity_id=musician.id,
        meta={"email": user.email, "token_suffix": payload.token[-6:]},
        ip=ip_from_request(request),
    )
    return user


@router.post("/invitations/{invitation_id}/resend", response_model=InvitationSendResult)
def api_resend_invitation(
    invitation_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    send: InvitationSender = Depends(get_mailer),
):
    invitation, message = resend_invitation(db, principal, invitation_id, send=send)
    audit_log(
        db,
        user_id=principal.user_id,
        action="INVITATION_RESENT",
        entity_type="invitation",
        entity_id=invitation.id,
        ip=ip_from_request(request),
    )
    return InvitationSendResult(
        invitation=InvitationOut.model_validate(invitation),
        email_sent=True,
        message=message,
    )


@router.delete("/invitations/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_invitation(
    invitation_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    soft_delete_invitation(db, principal, invitation_id)
    audit_log(
        db,
        user_id=principal.user_id,
        action="INVITATION_DELETED",
        entity_type="invitation",
        entity_id=invitation_id,
        ip=ip_from_request(request),
    )
