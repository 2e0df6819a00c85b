# app/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# App-level roles. "guest" = no token, so we don't store it here.
Role = Literal["customer", "admin"]


class UserRegister(SQLModel):
    """
    Payload for account registration.

    Validation rules:
      - email must be a valid EmailStr (normalized to lowercase)
      - name cannot be empty or whitespace
      - password at least 6 characters
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserLogin(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    name: str
    email: str
    role: Role
    created_at: datetime


class AuthResponse(SQLModel):
    """Returned by register and login."""

    token: str
    user: UserRead


class UserRoleUpdate(SQLModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: Role
