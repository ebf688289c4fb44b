# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application error hierarchy.

``code`` identifies the failure precisely and is what gets logged.
``public_code`` is what a client sees; when a class sets it, every
instance renders the same body and the precise code stays server-side.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, ClassVar


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    public_code: ClassVar[str | None] = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    @property
    def is_internal(self) -> bool:
        return self.status >= HTTPStatus.INTERNAL_SERVER_ERROR

    def to_dict(self) -> dict[str, Any]:
        if self.public_code is not None:
            return {"error": self.public_code}
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class ClientError(AppError):
    """A 4xx outcome. Subclasses pick their code and status as class defaults."""

    default_code: ClassVar[str] = "bad_request"
    default_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST

    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(code=self.default_code, status=self.default_status, context=context)


class DomainError(ClientError):
    default_code = "domain_error"


class ValidationError(ClientError):
    default_code = "validation_error"
    default_status = HTTPStatus.UNPROCESSABLE_ENTITY


class UnauthorizedError(ClientError):
    default_code = "unauthorized"
    default_status = HTTPStatus.UNAUTHORIZED


class RateLimitedError(ClientError):
    default_code = "rate_limited"
    default_status = HTTPStatus.TOO_MANY_REQUESTS


class InfrastructureError(AppError):
    """Internal fault; always a 500 rendered as ``internal_error``."""

    public_code = "internal_error"

    def __init__(self, code: str = "infrastructure_error", *, detail: str | None = None) -> None:
        super().__init__(code=code, status=HTTPStatus.INTERNAL_SERVER_ERROR)
        self.detail = detail


class ConfigError(InfrastructureError):
    """Raised while the process is starting; never reaches a request."""

    def __init__(self, code: str = "config_error", *, hint: str | None = None) -> None:
        super().__init__(code, detail=hint)
