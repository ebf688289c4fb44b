# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authcore.domain.users.entities import IssuedToken
from authcore.domain.users.exceptions import InvalidCredentialsError, MalformedHashError
from authcore.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from authcore.infrastructure.workers import BlockingExecutor
from authcore.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        tokens: TokenService,
        executor: BlockingExecutor,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._tokens = tokens
        self._executor = executor

    def execute(self, username: str, password: str, ip_address: str | None = None) -> IssuedToken:
        user = self._users.find_by_username(username)
        if user is None or not user.is_active:
            # Same KDF cost as a real check; the outcome below must not differ.
            self._executor.run(self._password_hasher.verify_dummy, password)
            logger.warning(f"auth.login: failed username={username} ip={ip_address}")
            raise InvalidCredentialsError()

        try:
            password_valid = self._executor.run(
                self._password_hasher.verify, password, user.password_hash
            )
        except MalformedHashError as exc:
            logger.error(
                f"auth.login: stored password hash unparseable user_id={user.id} ({exc.detail})"
            )
            raise

        if not password_valid:
            logger.warning(f"auth.login: failed username={username} ip={ip_address}")
            raise InvalidCredentialsError()

        issued = self._tokens.issue(user.username)
        logger.info(f"auth.login: ok username={username} ip={ip_address}")
        return issued
