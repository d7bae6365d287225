# agenda/api/v1/musicians.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from agenda.core.auth import get_current_principal, get_db
from agenda.core.rbac import Principal
from agenda.crud.musician import list_musicians, soft_delete_musician, toggle_active
from agenda.schemas.musician import MusicianOut
from agenda.services.audit import audit_log, ip_from_request

router = APIRouter()


@router.get("/musicians", response_model=List[MusicianOut])
def api_list_musicians(
    active: Optional[bool] = Query(None, description="Filter by active flag"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Admins get the whole directory; musicians get only their own row."""
    return list_musicians(db, principal, active=active)


@router.post("/musicians/{musician_id}/toggle-active", response_model=MusicianOut)
def api_toggle_musician(
    musician_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    musician = toggle_active(db, principal, musician_id)
    audit_log(
        db,
        user_id=principal.user_id,
        action="MUSICIAN_ACTIVATED" if musician.active else "MUSICIAN_DEACTIVATED",
        entity_type="musician",
        entity_id=musician.id,
        ip=ip_from_request(request),
    )
    return musician


@router.delete("/musicians/{musician_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_musician(
    musician_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    soft_delete_musician(db, principal, musician_id)
    audit_log(
        db,
        user_id=principal.user_id,
        action="MUSICIAN_DELETED",
        entity_type="musician",
        entity_id=musician_id,
        ip=ip_from_request(request),
    )
