from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


def _check_username(value: str) -> str:
    if not _USERNAME_RE.match(value):
        raise PydanticCustomError(
            "username_invalid_chars",
            "Username must contain only ASCII letters, digits and underscores",
            {"pattern": _USERNAME_RE.pattern},
        )
    return value


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    # email-validator caps the address at 254 characters.
    email: EmailStr
    # Raw password, never stripped or transformed.
    password: str = Field(min_length=1, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class LoginRequestDTO(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)


class RegisterSuccessDTO(BaseModel):
    ok: bool = True
    user_id: int


class LoginSuccessDTO(BaseModel):
    ok: bool = True
    token: str
    token_type: str = "Bearer"
    expires_at: datetime


class ProfileDTO(BaseModel):
    username: str
