# agenda/core/auth.py
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy import func
from sqlalchemy.orm import Session

from agenda.core.rbac import Principal, ensure_admin
from agenda.core.security import ALGORITHM, SECRET_KEY, verify_password
from agenda.db.session import SessionLocal
from agenda.models.musician import Musician
from agenda.models.user import User

# OAuth2 bearer scheme for Swagger "Authorize" button and DI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/login")


def get_db():
    """Yield a DB session and make sure it's closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Attempt authentication:
      - if user doesn't exist or password is wrong -> None (do not reveal which)
      - if user is deactivated -> 403
    """
    user = (
        db.query(User)
        .filter(func.lower(User.email) == (email or "").strip().lower())
        .first()
    )
    if not user or not verify_password(password, user.hashed_password):
        return None

    if user.is_active is False:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="User is disabled"
        )
    return user


def principal_for(db: Session, user: User) -> Principal:
    musician_id = (
        db.query(Musician.id)
        .filter(Musician.user_id == user.id, Musician.deleted_at.is_(None))
        .scalar()
    )
    return Principal(
        user_id=user.id,
        email=user.email,
        role=user.role,
        musician_id=musician_id,
    )


def get_current_principal(
    request: Request,
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    """
    Decode JWT, load the user and return the caller's Principal or 401.
    Additionally:
      - reject deactivated users (403)
      - store user context on request.state (for request logging)
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email: Optional[str] = payload.get("sub")
        if email is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise credentials_exception

    if user.is_active is False:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="User is disabled"
        )

    principal = principal_for(db, user)

    # Expose user context to middleware/loggers
    request.state.user_id = principal.user_id
    request.state.role = principal.role

    return principal


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    ensure_admin(principal)
    return principal
