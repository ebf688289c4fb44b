# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import re
import secrets
import time

from flask import Flask, Response, g, request

from authcore.shared.logging import (clear_request_context, get_correlation_id, logger,
                                     set_correlation_id)

from authcore.shared.middleware.client_ip import client_ip

REQUEST_ID_HEADER = "X-Request-ID"

# Caller-supplied ids end up in every log line; anything else is replaced.
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._\-]{1,64}$")
_MASKED_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "x-auth-token"})


def _fingerprint(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _header_summary() -> dict[str, str]:
    return {
        key: _fingerprint(value) if key.lower() in _MASKED_HEADERS else value
        for key, value in request.headers.items()
    }


def _request_id() -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_RE.match(supplied):
        return supplied
    return secrets.token_urlsafe(8)


def configure_request_logging(app: Flask, *, debug: bool = False) -> None:
    """Correlation id, access log line and timing for every request.

    With ``debug`` the start line also lists request headers, credential
    headers reduced to a short fingerprint. Bodies are never logged.
    """

    @app.before_request
    def _open_request() -> None:
        set_correlation_id(_request_id())
        g.request_started = time.perf_counter()
        if debug:
            logger.debug(
                f"http.request: {request.method} {request.path} ip={client_ip()} "
                f"headers={_header_summary()} body_size={request.content_length or 0}"
            )

    @app.after_request
    def _close_request(response: Response) -> Response:
        elapsed_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        response.headers[REQUEST_ID_HEADER] = get_correlation_id()
        level = "WARNING" if response.status_code >= 500 else "INFO"
        logger.log(
            level,
            f"http.response: {request.method} {request.path} status={response.status_code} "
            f"duration_ms={elapsed_ms:.1f} ip={client_ip()}",
        )
        return response

    @app.teardown_request
    def _drop_context(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"http.error: {type(exc).__name__} on {request.method} {request.path}")
        clear_request_context()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
