"""Health report: database reachability and the role catalogue sign-up depends on."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    environment: str
    database: Literal["connected", "disconnected"]
    # Default roles absent from the catalogue; registration fails while "user" is listed.
    missing_roles: list[str] = []
