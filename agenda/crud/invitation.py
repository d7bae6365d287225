# agenda/crud/invitation.py
"""
Invitation lifecycle: pending -> accepted | expired (both terminal).

Expiry is checked lazily when a token is verified; there is no sweep job.
A pending invitation past ``expires_at`` stays pending in storage until
someone presents its token.
"""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from agenda.core import config
from agenda.core.clock import utcnow
from agenda.core.errors import (
    CannotResend,
    DuplicateInvitation,
    ExpiredInvitation,
    ExternalServiceError,
    InvalidToken,
    NotFoundError,
)
from agenda.core.rbac import Principal, ensure_admin
from agenda.crud.user import add_identity
from agenda.db.session import transaction
from agenda.models.invitation import (
    INVITATION_ACCEPTED,
    INVITATION_EXPIRED,
    INVITATION_PENDING,
    Invitation,
)
from agenda.models.musician import Musician
from agenda.models.user import ROLE_MUSICIAN, User
from agenda.services.mailer import InvitationSender

log = logging.getLogger(__name__)


def _generate_token() -> str:
    return secrets.token_urlsafe(32)


def _live(db: Session):
    return db.query(Invitation).filter(Invitation.deleted_at.is_(None))


def get_invitation(db: Session, invitation_id: int) -> Invitation:
    inv = _live(db).filter(Invitation.id == invitation_id).first()
    if not inv:
        raise NotFoundError("Invitation not found")
    return inv


def list_invitations(db: Session, principal: Principal) -> List[Invitation]:
    ensure_admin(principal)
    return _live(db).order_by(Invitation.created_at.desc(), Invitation.id.desc()).all()


def _deliver(invitation: Invitation, send: InvitationSender) -> str:
    try:
        return send(invitation.id)
    except ExternalServiceError as e:
        # the invitation stays; the admin can resend it later
        e.details = {"invitation_id": invitation.id}
        raise


def issue_invitation(
    db: Session,
    principal: Principal,
    email: str,
    *,
    send: InvitationSender,
    now: Optional[datetime] = None,
) -> Tuple[Invitation, str]:
    """
    Create a pending invitation and send it.
    Returns (invitation, confirmation message). A failed send does not
    undo the committed invitation; ExternalServiceError carries its id.
    """
    ensure_admin(principal)
    now = now or utcnow()
    email = email.strip().lower()

    pending = (
        _live(db)
        .filter(
            func.lower(Invitation.email) == email,
            Invitation.status == INVITATION_PENDING,
        )
        .first()
    )
    if pending:
        raise DuplicateInvitation("A pending invitation already exists for this email")

    invitation = Invitation(
        email=email,
        token=_generate_token(),
        status=INVITATION_PENDING,
        invited_by=principal.user_id,
        created_at=now,
        expires_at=now + timedelta(days=config.INVITATION_TTL_DAYS),
    )
    with transaction(db, "create the invitation"):
        db.add(invitation)
    db.refresh(invitation)
    log.info("invitation issued id=%s by user_id=%s", invitation.id, principal.user_id)

    return invitation, _deliver(invitation, send)


def verify_invitation(db: Session, token: str, *, now: Optional[datetime] = None) -> Invitation:
    """
    Return the pending invitation for ``token``.
    Past expiry the invitation is moved to 'expired' (persisted once) and
    ExpiredInvitation is raised; later calls raise it again without writing.
    """
    now = now or utcnow()
    inv = _live(db).filter(Invitation.token == token).first()

    if inv is None or inv.status == INVITATION_ACCEPTED:
        raise InvalidToken("Invalid invitation token")
    if inv.status == INVITATION_EXPIRED:
        raise ExpiredInvitation("This invitation has expired")

    if inv.expires_at < now:
        with transaction(db, "expire the invitation"):
            inv.status = INVITATION_EXPIRED
        log.info("invitation expired id=%s", inv.id)
        raise ExpiredInvitation("This invitation has expired")

    return inv


def accept_invitation(
    db: Session,
    token: str,
    *,
    name: str,
    whatsapp: str,
    password: str,
    now: Optional[datetime] = None,
) -> Tuple[User, Musician]:
    """
    Provision the account, its musician profile and mark the invitation accepted
    in a single transaction. Nothing is left behind if any step fails.
    """
    inv = verify_invitation(db, token, now=now)

    with transaction(db, "accept the invitation"):
        user = add_identity(db, email=inv.email, password=password, role=ROLE_MUSICIAN)
        musician = Musician(
            name=name,
            whatsapp=whatsapp,
            email=inv.email,
            user_id=user.id,
            active=True,
        )
        db.add(musician)
        inv.status = INVITATION_ACCEPTED

    db.refresh(user)
    db.refresh(musician)
    log.info("invitation accepted id=%s user_id=%s", inv.id, user.id)
    return user, musician


def resend_invitation(
    db: Session, principal: Principal, invitation_id: int, *, send: InvitationSender
) -> Tuple[Invitation, str]:
    ensure_admin(principal)
    inv = get_invitation(db, invitation_id)
    if inv.status != INVITATION_PENDING:
        raise CannotResend(f"Cannot resend an invitation that is {inv.status}")
    return inv, _deliver(inv, send)


def soft_delete_invitation(db: Session, principal: Principal, invitation_id: int) -> None:
    ensure_admin(principal)
    inv = get_invitation(db, invitation_id)
    with transaction(db, "delete the invitation"):
        inv.deleted_at = utcnow()
