# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import Claims, IssuedToken, User


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_username_or_email(self, username: str, email: str) -> User | None: ...
    def add(self, user: User) -> User: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
    def verify_dummy(self, password: str) -> None: ...


class TokenService(Protocol):
    """``issue`` requires a non-empty subject (``InvariantViolation`` otherwise)."""

    def issue(self, subject: str) -> IssuedToken: ...
    def validate(self, token: str) -> Claims: ...
