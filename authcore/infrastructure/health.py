# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Readiness checks reported by ``GET /api/health``."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from sqlalchemy import text

from authcore.infrastructure.db import ENGINE
from authcore.infrastructure.workers import BlockingExecutor
from authcore.shared.logging import logger

HealthCheck = Callable[[], object]


def check_database() -> None:
    with ENGINE.connect() as connection:
        connection.execute(text("SELECT 1"))


def hashing_pool_check(executor: BlockingExecutor) -> HealthCheck:
    """Round-trip a no-op through the pool; fails while it is saturated or shut down."""

    def check() -> None:
        executor.run(int)

    return check


def run_checks(checks: Mapping[str, HealthCheck]) -> tuple[bool, dict[str, str]]:
    results: dict[str, str] = {}
    for name, check in checks.items():
        try:
            check()
        except Exception as exc:
            logger.error(f"health: {name} check failed ({type(exc).__name__})")
            results[name] = "error"
        else:
            results[name] = "ok"
    return all(state == "ok" for state in results.values()), results


__all__ = ["HealthCheck", "check_database", "hashing_pool_check", "run_checks"]
