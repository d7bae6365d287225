# agenda/crud/user.py
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from agenda.core.errors import DuplicateError, ValidationError
from agenda.core.rbac import Principal
from agenda.core.security import get_password_hash, verify_password
from agenda.db.session import transaction
from agenda.models.musician import Musician
from agenda.models.user import ROLE_MUSICIAN, User


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return (
        db.query(User)
        .filter(func.lower(User.email) == (email or "").strip().lower())
        .first()
    )


def add_identity(db: Session, *, email: str, password: str, role: str = ROLE_MUSICIAN) -> User:
    """
    Stage a new account in the current transaction (flushes, does not commit).
    Callers own the commit so the identity and its musician land together.
    """
    if get_user_by_email(db, email):
        raise DuplicateError("An account with this email already exists")

    user = User(
        email=email.strip().lower(),
        hashed_password=get_password_hash(password),
        role=role,
        is_active=True,
    )
    db.add(user)
    db.flush()
    return user


def signup(db: Session, *, email: str, password: str, name: str, phone: Optional[str]) -> User:
    """Self-service registration: a musician account plus its active musician profile."""
    with transaction(db, "create the account"):
        user = add_identity(db, email=email, password=password, role=ROLE_MUSICIAN)
        db.add(
            Musician(
                name=name.strip(),
                whatsapp=phone,
                email=user.email,
                user_id=user.id,
                active=True,
            )
        )
    db.refresh(user)
    return user


def change_password(
    db: Session, principal: Principal, current_password: str, new_password: str
) -> None:
    user = db.get(User, principal.user_id)
    if user is None or not verify_password(current_password, user.hashed_password):
        raise ValidationError("Current password is incorrect")
    with transaction(db, "update the password"):
        user.hashed_password = get_password_hash(new_password)
