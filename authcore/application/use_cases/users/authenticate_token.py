# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case for resolving a bearer token to the authenticated subject."""

from __future__ import annotations

from authcore.domain.users.entities import Claims
from authcore.domain.users.exceptions import TokenError
from authcore.domain.users.repositories import TokenService
from authcore.shared.logging import logger


class AuthenticateTokenUseCase:
    def __init__(self, *, tokens: TokenService) -> None:
        self._tokens = tokens

    def execute(self, token: str) -> Claims:
        try:
            return self._tokens.validate(token)
        except TokenError as exc:
            logger.warning(f"auth.token: rejected reason={exc.reason}")
            raise
