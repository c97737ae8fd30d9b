"""
Request / response schemas for the ``/users`` API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserUpdate(BaseModel):
    """
    Partial update. Only keys sent by the client are applied; use
    ``model_dump(exclude_unset=True)`` to get them.
    """
    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, max_length=128)

    @field_validator("email", "password")
    @classmethod
    def reject_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class UserResponse(BaseModel):
    """User data returned to clients; the password digest is never included."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class MessageResponse(BaseModel):
    message: str
