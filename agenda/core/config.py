# agenda/core/config.py
import os
import warnings
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# root .env first, then agenda/.env (does not override values already loaded)
load_dotenv(find_dotenv(usecwd=True))
load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=False)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip().isdigit():
        return default
    return int(raw)


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./agenda.db")

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION",
        RuntimeWarning,
        stacklevel=2,
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - dev fallback only

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = _int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 720)

# Frontend origin used to build invitation links
APP_ORIGIN = os.getenv("APP_ORIGIN", "http://localhost:5173").rstrip("/")

# External transactional email endpoint (POST {"invitation_id": ...})
MAIL_ENDPOINT_URL = os.getenv("MAIL_ENDPOINT_URL", "")
MAIL_ENDPOINT_KEY = os.getenv("MAIL_ENDPOINT_KEY", "")
MAIL_TIMEOUT_SECONDS = _int_env("MAIL_TIMEOUT_SECONDS", 10)

INVITATION_TTL_DAYS = _int_env("INVITATION_TTL_DAYS", 7)

# "reset" | "preserve" - what happens to musician responses when an admin edits a schedule
ROSTER_EDIT_POLICY = os.getenv("ROSTER_EDIT_POLICY", "reset").strip().lower()
if ROSTER_EDIT_POLICY not in ("reset", "preserve"):
    warnings.warn(
        f"ROSTER_EDIT_POLICY={ROSTER_EDIT_POLICY!r} is not 'reset' or 'preserve'; using 'reset'",
        RuntimeWarning,
        stacklevel=2,
    )
    ROSTER_EDIT_POLICY = "reset"

ENABLE_CREATE_ALL = os.getenv("ENABLE_CREATE_ALL", "1") == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
