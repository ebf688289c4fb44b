# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import atexit
from functools import cached_property

from authcore.application.services.password_hashing import Argon2PasswordHasher
from authcore.application.services.tokens import JwtTokenService
from authcore.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from authcore.application.use_cases.users.login_user import LoginUserUseCase
from authcore.application.use_cases.users.register_user import RegisterUserUseCase
from authcore.infrastructure.health import check_database, hashing_pool_check
from authcore.infrastructure.repositories.users.sqlalchemy_user_repository import \
    SqlAlchemyUserRepository
from authcore.infrastructure.workers import BlockingExecutor
from authcore.interfaces.http.controllers.auth_controller import AuthController
from authcore.interfaces.http.controllers.misc_controller import MiscController
from authcore.shared.config import AppConfig, load_config


class Container:
    """Wires the object graph once per application; every member is built lazily."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or load_config()

    @cached_property
    def password_hasher(self) -> Argon2PasswordHasher:
        return Argon2PasswordHasher(self._config.hasher)

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(self._config.token)

    @cached_property
    def hashing_executor(self) -> BlockingExecutor:
        executor = BlockingExecutor.from_config(self._config.hasher)
        atexit.register(executor.shutdown, quiet=True)
        return executor

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository()

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            executor=self.hashing_executor,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_service,
            executor=self.hashing_executor,
        )

    @cached_property
    def authenticate_token_use_case(self) -> AuthenticateTokenUseCase:
        return AuthenticateTokenUseCase(tokens=self.token_service)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            authenticate_use_case=self.authenticate_token_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(
            checks={
                "database": check_database,
                "hasher": hashing_pool_check(self.hashing_executor),
            }
        )
