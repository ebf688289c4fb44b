# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authcore.shared.errors.base import DomainError, InfrastructureError


class UserAlreadyExistsError(DomainError):
    default_code = "user_already_exists"
    default_status = HTTPStatus.CONFLICT

    def __init__(self, field: str | None = None) -> None:
        super().__init__(context={"field": field} if field else None)
        self.field = field


class InvalidCredentialsError(DomainError):
    """Unknown user, inactive user and wrong password all surface as this."""

    default_code = "invalid_credentials"
    default_status = HTTPStatus.UNAUTHORIZED


class TokenError(DomainError):
    """Any rejected bearer token. ``reason`` and ``detail`` are for logs only."""

    default_code = "invalid_token"
    default_status = HTTPStatus.UNAUTHORIZED
    public_code = "invalid_token"
    reason = "invalid"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__()
        self.detail = detail


class MalformedTokenError(TokenError):
    reason = "malformed"


class InvalidSignatureError(TokenError):
    reason = "bad_signature"


class ExpiredTokenError(TokenError):
    reason = "expired"


class HashingError(InfrastructureError):
    def __init__(self, detail: str | None = None) -> None:
        super().__init__("hashing_failed", detail=detail)


class MalformedHashError(InfrastructureError):
    """Stored hash cannot be parsed: data corruption, not a wrong password."""

    def __init__(self, detail: str | None = None) -> None:
        super().__init__("password_hash_corrupted", detail=detail)
