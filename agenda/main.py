# agenda/main.py
import logging

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from agenda.core import config
from agenda.core.errors import register_exception_handlers
from agenda.db.session import engine
from agenda.middleware.request_logging import RequestLoggingMiddleware

# ---------------------------
# MODELS (all tables share one Base)
# ---------------------------
from agenda.models import Base

# ---------------------------
# ROUTERS
# ---------------------------
from agenda.api import health
from agenda.api.v1 import (
    auth,
    availability,
    catalog,
    dashboard,
    invitations,
    me,
    musicians,
    schedules,
    unavailability,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ---------------------------
# CREATE TABLES (dev-only; guard with env, Alembic otherwise)
# ---------------------------
if config.ENABLE_CREATE_ALL:
    Base.metadata.create_all(bind=engine)

# ---------------------------
# APP
# ---------------------------
app = FastAPI(title="Agenda Musical")

register_exception_handlers(app)
app.add_middleware(RequestLoggingMiddleware)

# ---------------------------
# ROUTER MOUNT
# ---------------------------
app.include_router(auth.router, prefix="/api/v1", tags=["auth"])
app.include_router(me.router, prefix="/api/v1", tags=["me"])
app.include_router(musicians.router, prefix="/api/v1", tags=["musicians"])
app.include_router(unavailability.router, prefix="/api/v1", tags=["unavailability"])
app.include_router(catalog.router, prefix="/api/v1")
app.include_router(availability.router, prefix="/api/v1")
app.include_router(schedules.router, prefix="/api/v1", tags=["schedules"])
app.include_router(invitations.router, prefix="/api/v1", tags=["invitations"])
app.include_router(dashboard.router, prefix="/api/v1", tags=["dashboard"])
app.include_router(health.router, prefix="/api")


# ---------------------------
# OpenAPI (bearer login flow)
# ---------------------------
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title="Agenda Musical",
        version="1.0.0",
        description="Rosters, availability and invitations for a volunteer music ministry",
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})
    openapi_schema["components"]["securitySchemes"]["OAuth2PasswordBearer"] = {
        "type": "oauth2",
        "flows": {"password": {"tokenUrl": "/api/v1/login", "scopes": {}}},
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
