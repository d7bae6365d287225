# agenda/api/v1/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agenda.core.auth import get_current_principal, get_db, require_admin
from agenda.core.clock import today
from agenda.core.rbac import Principal, ensure_musician
from agenda.schemas.dashboard import AdminDashboard, MusicianDashboard
from agenda.services.statistics import admin_dashboard, musician_dashboard

router = APIRouter()


@router.get("/dashboard/admin", response_model=AdminDashboard)
def api_admin_dashboard(
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    """Current month totals, response counts and the top five musicians."""
    return admin_dashboard(db, today())


@router.get("/dashboard/me", response_model=MusicianDashboard)
def api_musician_dashboard(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return musician_dashboard(db, ensure_musician(principal), today())
