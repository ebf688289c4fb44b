# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from authcore.domain.users.entities import User
from authcore.domain.users.exceptions import UserAlreadyExistsError
from authcore.domain.users.repositories import PasswordHasher, UserRepository
from authcore.infrastructure.workers import BlockingExecutor
from authcore.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        executor: BlockingExecutor,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._executor = executor

    def execute(self, username: str, email: str, password: str) -> User:
        existing = self._users.find_by_username_or_email(username, email)
        if existing:
            field = "username" if existing.username == username else "email"
            logger.warning(f"auth.register: rejected, {field} already taken username={username}")
            raise UserAlreadyExistsError(field)

        hashed = self._executor.run(self._password_hasher.hash, password)
        user = User(
            id=0,
            username=username,
            email=email,
            password_hash=hashed,
            created_at=datetime.now(UTC),
        )
        persisted = self._users.add(user)
        logger.info(f"auth.register: ok user_id={persisted.id} username={persisted.username}")
        return persisted
