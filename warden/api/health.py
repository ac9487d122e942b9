"""Health check: database reachability and default role seeding."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from warden.core.config import settings
from warden.core.database import check_db_connected, get_db
from warden.schemas.health import HealthResponse
from warden.services.role_admin import missing_default_roles

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Report "degraded" when the database is unreachable or a default role is missing."""
    if not check_db_connected(db):
        return HealthResponse(
            status="degraded",
            environment=settings.APP_ENV,
            database="disconnected",
            missing_roles=[],
        )
    missing = missing_default_roles(db)
    return HealthResponse(
        status="degraded" if missing else "ok",
        environment=settings.APP_ENV,
        database="connected",
        missing_roles=missing,
    )
