# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless bearer tokens: HMAC-signed JWTs carrying ``sub``/``iat``/``exp``."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from authcore.domain.users.entities import Claims, IssuedToken
from authcore.domain.users.exceptions import (ExpiredTokenError,
                                              InvalidSignatureError,
                                              MalformedTokenError)
from authcore.domain.users.repositories import TokenService
from authcore.shared.config import TokenConfig
from authcore.shared.errors.base import ConfigError

_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    def __init__(
        self,
        config: TokenConfig,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not config.secret:
            raise ConfigError("jwt_secret_missing", hint="JWT_SECRET is not set")
        self._secret = config.secret
        self._algorithm = config.algorithm
        self._ttl = timedelta(seconds=config.ttl_seconds)
        self._leeway = timedelta(seconds=config.leeway_seconds)
        self._clock = clock

    def issue(self, subject: str) -> IssuedToken:
        """Sign claims for ``subject``; an empty subject raises ``InvariantViolation``."""
        # JWT NumericDate has whole-second precision.
        issued_at = self._clock().replace(microsecond=0)
        claims = Claims(subject=subject, issued_at=issued_at, expires_at=issued_at + self._ttl)
        payload = {
            "sub": claims.subject,
            "iat": int(claims.issued_at.timestamp()),
            "exp": int(claims.expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return IssuedToken(token=token, claims=claims)

    def validate(self, token: str) -> Claims:
        """Return the claims of a genuine, unexpired token.

        Raises ``MalformedTokenError`` when the token does not parse,
        ``InvalidSignatureError`` when it was not signed with our secret and
        algorithm, and ``ExpiredTokenError`` once ``exp`` plus the leeway has
        passed.
        """
        if not isinstance(token, str) or token.count(".") != 2:
            raise MalformedTokenError("expected three dot-separated segments")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError(str(exc)) from exc
        if header.get("alg") != self._algorithm:
            raise InvalidSignatureError(f"unexpected algorithm {header.get('alg')!r}")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": _REQUIRED_CLAIMS,
                    # Expiry is checked below against the injected clock.
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise InvalidSignatureError(str(exc)) from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError(str(exc)) from exc

        claims = self._claims_from(payload)
        if self._clock() > claims.expires_at + self._leeway:
            raise ExpiredTokenError(f"expired at {claims.expires_at.isoformat()}")
        return claims

    @staticmethod
    def _claims_from(payload: Mapping[str, Any]) -> Claims:
        subject = payload.get("sub")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not isinstance(subject, str):
            raise MalformedTokenError("sub must be a string")
        for name, value in (("iat", issued_at), ("exp", expires_at)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise MalformedTokenError(f"{name} must be an integer timestamp")
        try:
            return Claims(
                subject=subject,
                issued_at=datetime.fromtimestamp(issued_at, tz=UTC),
                expires_at=datetime.fromtimestamp(expires_at, tz=UTC),
            )
        # InvariantViolation (exp not after iat) is a ValueError.
        except (ValueError, OverflowError, OSError) as exc:
            raise MalformedTokenError(str(exc)) from exc


__all__ = ["JwtTokenService"]
