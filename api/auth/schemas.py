"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    ADMIN = "Admin"
    USER = "User"


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1, max_length=128)


class LoginResponse(BaseModel):
    message: str = "Login successful"
    id: int
    session_token: str


class CurrentUserResponse(BaseModel):
    id: int
    username: str
    role: str | None


class RolesResponse(BaseModel):
    roles: list[str]
