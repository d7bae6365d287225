# agenda/services/audit.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agenda.models.audit_log import AuditLog

log = logging.getLogger(__name__)


# -----------------------------
# Helpers
# -----------------------------
def ip_from_request(request: Optional[Request]) -> Optional[str]:
    """
    Best-effort client IP extraction compatible with proxies.
    Order:
      - X-Forwarded-For (first in the list)
      - X-Real-IP
      - request.client.host
    """
    if request is None:
        return None

    xff = request.headers.get("x-forwarded-for")
    if xff:
        first = xff.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    client = getattr(request, "client", None)
    return getattr(client, "host", None)


def _dumps_meta(meta: Optional[Dict[str, Any]]) -> str:
    try:
        return json.dumps(meta or {}, ensure_ascii=False, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return json.dumps({"raw": str(meta)}, ensure_ascii=False)


# -----------------------------
# Core API
# -----------------------------
def audit_log(
    db: Session,
    *,
    user_id: Optional[int],
    action: str,
    entity_type: Optional[str],
    entity_id: Optional[int],
    meta: Optional[Dict[str, Any]] = None,
    ip: Optional[str] = None,
) -> None:
    """
    Inserts and commits an audit record.
    Audit is best-effort: a failed write is logged and rolled back, never raised,
    so it must be called after the business change has been committed.
    """
    try:
        db.add(
            AuditLog(
                user_id=user_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                meta=_dumps_meta(meta),
                ip_address=ip,
            )
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        log.warning("audit write failed action=%s entity=%s:%s", action, entity_type, entity_id, exc_info=True)
