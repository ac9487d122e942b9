"""Request/response schemas for role administration."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime
    updated_at: datetime


class RoleCreateRequest(BaseModel):
    name: str = Field(default="", max_length=50)


class RoleUpdateRequest(BaseModel):
    name: str = Field(default="", max_length=50)


class RolesListResponse(BaseModel):
    roles: list[RoleOut]
