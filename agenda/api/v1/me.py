# agenda/api/v1/me.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from agenda.core.auth import get_current_principal, get_db
from agenda.core.rbac import Principal, ensure_musician
from agenda.crud.musician import get_musician, update_profile
from agenda.crud.user import change_password
from agenda.schemas.musician import MusicianOut, MusicianProfileUpdate
from agenda.schemas.passwords import ChangePasswordRequest
from agenda.schemas.user import MeOut
from agenda.services.audit import audit_log, ip_from_request

router = APIRouter()


@router.get("/me", response_model=MeOut)
def get_me(principal: Principal = Depends(get_current_principal)):
    return MeOut(
        id=principal.user_id,
        email=principal.email,
        role=principal.role,
        musician_id=principal.musician_id,
    )


@router.get("/me/profile", response_model=MusicianOut)
def get_my_profile(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return get_musician(db, ensure_musician(principal))


@router.patch("/me/profile", response_model=MusicianOut)
def patch_my_profile(
    payload: MusicianProfileUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return update_profile(db, principal, payload)


@router.post("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def change_my_password(
    payload: ChangePasswordRequest,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    change_password(db, principal, payload.current_password, payload.new_password)
    audit_log(
        db,
        user_id=principal.user_id,
        action="PASSWORD_CHANGED",
        entity_type="user",
        entity_id=principal.user_id,
        ip=ip_from_request(request),
    )
