#!/usr/bin/env python3
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from droneplanner.core.timeutils import ensure_utc
from droneplanner.schemas.common import CamelModel, format_document_id


class CredentialsRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=256)

    @field_validator("email")
    def normalize_email(cls, value):
        return value.strip().lower()


class UserResponse(CamelModel):
    id: str
    email: str
    created_at: datetime | None = None

    @field_validator("created_at")
    def make_aware(cls, value):
        return ensure_utc(value)

    @staticmethod
    def from_orm(user) -> "UserResponse":
        return UserResponse(
            id=format_document_id(user.id),
            email=user.email,
            created_at=user.created_at,
        )


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
