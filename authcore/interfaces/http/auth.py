# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bearer-token guard for Flask views."""

from collections.abc import Callable
from functools import wraps

from flask import g, request

from authcore.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from authcore.shared.errors import UnauthorizedError
from authcore.shared.logging import bind_subject, logger


def bearer_token() -> str | None:
    """Token from ``Authorization: Bearer <token>``; the scheme is case-insensitive."""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def current_subject() -> str:
    return g.subject


def auth_required(authenticate: AuthenticateTokenUseCase):
    def decorator(view: Callable):
        @wraps(view)
        def guarded(*args, **kwargs):
            token = bearer_token()
            if token is None:
                logger.info(f"auth.guard: no bearer token on {request.method} {request.path}")
                raise UnauthorizedError()

            g.subject = authenticate.execute(token).subject
            bind_subject(g.subject)
            return view(*args, **kwargs)

        return guarded

    return decorator
