# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-client request throttling for the credential endpoints."""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from collections.abc import Callable
from functools import wraps

from flask import request

from authcore.shared.config import load_config
from authcore.shared.errors.base import RateLimitedError
from authcore.shared.logging import logger
from authcore.shared.middleware.client_ip import client_ip


class SlidingWindowLimiter:
    """At most ``limit`` hits per key within any ``window_seconds`` span."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = max(1, int(limit))
        self.window = max(0.1, float(window_seconds))
        self._clock = clock
        self._lock = threading.Lock()
        self._hits: dict[str, deque[float]] = {}

    def hit(self, key: str) -> float:
        """Record a hit for ``key``.

        Returns 0.0 when admitted, otherwise the seconds until the oldest hit
        leaves the window. Rejected hits are not recorded.
        """
        now = self._clock()
        with self._lock:
            self._evict_expired(now)
            hits = self._hits.setdefault(key, deque())
            if len(hits) < self.limit:
                hits.append(now)
                return 0.0
            return hits[0] + self.window - now

    def _evict_expired(self, now: float) -> None:
        horizon = now - self.window
        for key in list(self._hits):
            hits = self._hits[key]
            while hits and hits[0] <= horizon:
                hits.popleft()
            if not hits:
                del self._hits[key]


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    security = load_config().security
    limiter = SlidingWindowLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(view: Callable):
        if not security.enable_rate_limit:
            return view

        @wraps(view)
        def throttled(*args, **kwargs):
            wait = limiter.hit(f"{request.endpoint}:{client_ip()}")
            if wait > 0:
                retry_after = math.ceil(wait)
                logger.warning(
                    f"rate_limit: rejected {request.method} {request.path} "
                    f"ip={client_ip()} retry_after={retry_after}s"
                )
                raise RateLimitedError(context={"retry_after": retry_after})
            return view(*args, **kwargs)

        return throttled

    return decorator


__all__ = ["SlidingWindowLimiter", "rate_limit"]
