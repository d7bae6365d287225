# agenda/api/v1/unavailability.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from agenda.core.auth import get_current_principal, get_db
from agenda.core.rbac import Principal
from agenda.crud.unavailability import create_period, list_periods, soft_delete_period
from agenda.schemas.unavailability import UnavailabilityCreate, UnavailabilityOut

router = APIRouter()


@router.post("/unavailability", response_model=UnavailabilityOut, status_code=status.HTTP_201_CREATED)
def api_add_unavailability(
    payload: UnavailabilityCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return create_period(db, principal, payload)


@router.get("/unavailability", response_model=List[UnavailabilityOut])
def api_list_unavailability(
    musician_id: Optional[int] = Query(None, description="Admins only: one musician's periods"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return list_periods(db, principal, musician_id=musician_id)


@router.delete("/unavailability/{period_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_unavailability(
    period_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    soft_delete_period(db, principal, period_id)
