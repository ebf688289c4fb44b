# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from authcore.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from authcore.application.use_cases.users.login_user import LoginUserUseCase
from authcore.application.use_cases.users.register_user import RegisterUserUseCase
from authcore.interfaces.http.auth import auth_required, current_subject
from authcore.interfaces.http.dto.auth import (LoginRequestDTO, LoginSuccessDTO,
                                               ProfileDTO, RegisterRequestDTO,
                                               RegisterSuccessDTO)
from authcore.shared.errors import validation_error_from
from authcore.shared.logging import logger
from authcore.shared.middleware.client_ip import client_ip
from authcore.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        authenticate_use_case: AuthenticateTokenUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._authenticate_use_case = authenticate_use_case

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise validation_error_from(exc) from exc

        user = self._register_use_case.execute(dto.username, dto.email, dto.password)

        payload = RegisterSuccessDTO(user_id=user.id).model_dump()
        logger.info(f"auth.register: created user_id={user.id} ip={client_ip()}")
        return jsonify(payload), 201

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise validation_error_from(exc) from exc

        issued = self._login_use_case.execute(dto.username, dto.password, client_ip())

        payload = LoginSuccessDTO(token=issued.token, expires_at=issued.expires_at)
        return jsonify(payload.model_dump(mode="json")), 200

    def profile(self) -> tuple[Response, int]:
        return jsonify(ProfileDTO(username=current_subject()).model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/profile",
            view_func=auth_required(self._authenticate_use_case)(self.profile),
            methods=["GET"],
        )
        return bp
