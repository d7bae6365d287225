# agenda/api/v1/auth.py
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from agenda.core.auth import authenticate_user, get_db
from agenda.core.clock import utcnow
from agenda.core.security import ACCESS_TOKEN_EXPIRE_MINUTES, create_access_token
from agenda.crud.user import get_user_by_email, signup
from agenda.db.session import transaction
from agenda.schemas.user import SignupRequest, UserOut
from agenda.services.audit import audit_log, ip_from_request

router = APIRouter()


@router.post("/login")
def login(
    request: Request,  # must come before parameters with defaults
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    email = (form_data.username or "").strip()
    user = authenticate_user(db, email, form_data.password)

    if not user:
        known = get_user_by_email(db, email)
        if known:
            audit_log(
                db,
                user_id=known.id,
                action="LOGIN_FAILED",
                entity_type="auth",
                entity_id=None,
                meta={"email": email},
                ip=ip_from_request(request),
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    with transaction(db, "record the sign-in"):
        user.last_login_at = utcnow()

    audit_log(
        db,
        user_id=user.id,
        action="LOGIN_SUCCESS",
        entity_type="auth",
        entity_id=user.id,
        meta={"email": user.email, "method": "password"},
        ip=ip_from_request(request),
    )

    access_token = create_access_token(
        data={"sub": user.email},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def api_signup(
    payload: SignupRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Self-service registration; creates the account and an active musician profile."""
    user = signup(
        db,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        phone=payload.phone,
    )
    audit_log(
        db,
        user_id=user.id,
        action="SIGNUP",
        entity_type="user",
        entity_id=user.id,
        meta={"email": user.email},
        ip=ip_from_request(request),
    )
    return user
