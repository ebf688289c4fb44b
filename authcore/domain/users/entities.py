# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from authcore.domain.exceptions import InvariantViolation


@dataclass(slots=True, frozen=True)
class User:
    """Stored credential record. ``password_hash`` is a PHC string, never plaintext."""

    id: int
    username: str
    email: str
    password_hash: str
    created_at: datetime
    is_active: bool = True


@dataclass(slots=True, frozen=True)
class Claims:
    subject: str
    issued_at: datetime
    expires_at: datetime

    def __post_init__(self) -> None:
        if not self.subject:
            raise InvariantViolation("Claims", "subject", "must not be empty")
        if self.expires_at <= self.issued_at:
            raise InvariantViolation("Claims", "expires_at", "must be later than issued_at")


@dataclass(slots=True, frozen=True)
class IssuedToken:
    token: str
    claims: Claims

    @property
    def expires_at(self) -> datetime:
        return self.claims.expires_at
