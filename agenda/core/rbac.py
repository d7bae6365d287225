# agenda/core/rbac.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from agenda.core.errors import NotFoundError, PermissionDenied
from agenda.models.user import ROLE_ADMIN


@dataclass(frozen=True)
class Principal:
    """
    Explicit caller context threaded through every crud/service call.
    Built once per request by ``get_current_principal``; never looked up globally.
    """

    user_id: int
    email: str
    role: str
    musician_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return (self.role or "").strip().lower() == ROLE_ADMIN


# -----------------------------
# Basic checks
# -----------------------------


def ensure_admin(principal: Principal) -> None:
    """Raise 403 if the caller is not an administrator."""
    if not principal.is_admin:
        raise PermissionDenied("Administrators only")


def ensure_musician(principal: Principal) -> int:
    """Return the caller's musician id or fail if the account has no musician profile."""
    if principal.musician_id is None:
        raise NotFoundError("Musician profile not found for this account")
    return principal.musician_id
