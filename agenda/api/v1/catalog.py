# agenda/api/v1/catalog.py
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from agenda.core.auth import get_current_principal, get_db
from agenda.core.rbac import Principal
from agenda.crud.catalog import (
    create_instrument,
    create_location,
    list_instruments,
    list_locations,
)
from agenda.schemas.catalog import InstrumentCreate, InstrumentOut, LocationCreate, LocationOut
from agenda.services.audit import audit_log, ip_from_request

# whole catalog under its own sub-prefix and tag
router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/instruments", response_model=List[InstrumentOut], operation_id="catalog_list_instruments")
def api_list_instruments(
    db: Session = Depends(get_db),
    _: Principal = Depends(get_current_principal),
):
    return list_instruments(db)


@router.post("/instruments", response_model=InstrumentOut, status_code=status.HTTP_201_CREATED)
def api_create_instrument(
    payload: InstrumentCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    obj = create_instrument(db, principal, payload.name)
    audit_log(
        db,
        user_id=principal.user_id,
        action="INSTRUMENT_CREATED",
        entity_type="instrument",
        entity_id=obj.id,
        meta={"name": obj.name},
        ip=ip_from_request(request),
    )
    return obj


@router.get("/locations", response_model=List[LocationOut], operation_id="catalog_list_locations")
def api_list_locations(
    db: Session = Depends(get_db),
    _: Principal = Depends(get_current_principal),
):
    return list_locations(db)


@router.post("/locations", response_model=LocationOut, status_code=status.HTTP_201_CREATED)
def api_create_location(
    payload: LocationCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    obj = create_location(db, principal, payload.name, payload.address)
    audit_log(
        db,
        user_id=principal.user_id,
        action="LOCATION_CREATED",
        entity_type="location",
        entity_id=obj.id,
        meta={"name": obj.name},
        ip=ip_from_request(request),
    )
    return obj
