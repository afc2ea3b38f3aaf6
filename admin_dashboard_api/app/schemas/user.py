"""
Pydantic models for account payloads.

Responses are plain dicts produced by ``public_account``; these schemas
only validate what clients send.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator

from .common import CamelModel, normalize_email

Role = Literal["admin", "user"]
Status = Literal["active", "inactive"]


class LoginRequest(CamelModel):
    email: str = Field(..., examples=["admin@example.com"])
    password: str = Field(..., min_length=1, examples=["admin123"])

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return normalize_email(value)


class RegisterRequest(CamelModel):
    """Self-service registration.  The account always gets the ``user`` role."""

    name: str = Field(..., min_length=2, examples=["Jane Doe"])
    email: str = Field(..., examples=["jane@example.com"])
    password: str = Field(..., min_length=6, examples=["secret1"])

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return normalize_email(value)


class UserCreate(RegisterRequest):
    """Account created by an administrator, who may choose the role."""

    role: Role = "user"


class UserUpdate(CamelModel):
    """Partial profile update.  Unknown keys (including ``password``) are ignored."""

    name: Optional[str] = Field(None, min_length=2)
    email: Optional[str] = None
    status: Optional[Status] = None
    role: Optional[Role] = None
    avatar: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value

    @field_validator("email")
    @classmethod
    def _email(cls, value: Optional[str]) -> Optional[str]:
        return normalize_email(value) if value is not None else value


class PasswordChange(CamelModel):
    current_password: Optional[str] = None
    new_password: str = Field(..., min_length=6)
