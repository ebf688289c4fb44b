# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Dedicated thread pool for CPU-bound work (password hashing).

``run`` has two independent failure axes. ``WorkerUnavailableError`` means
the job never produced an outcome: no free slot, pool shut down, or the job
overran its deadline. Anything the job itself returns or raises is passed
through untouched.
"""

from __future__ import annotations

import contextvars
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_for_futures
from typing import Any, TypeVar

from authcore.shared.config import HasherConfig
from authcore.shared.errors.base import InfrastructureError
from authcore.shared.logging import logger

T = TypeVar("T")


class WorkerUnavailableError(InfrastructureError):
    def __init__(self, detail: str | None = None) -> None:
        super().__init__("worker_unavailable", detail=detail)


class BlockingExecutor:
    def __init__(
        self,
        *,
        workers: int = 4,
        queue_size: int = 32,
        queue_timeout: float = 5.0,
        task_timeout: float = 30.0,
        name: str = "kdf",
    ) -> None:
        self._name = name
        self._pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix=name)
        # Running plus waiting jobs; beyond this callers are turned away.
        self._slots = threading.BoundedSemaphore(workers + queue_size)
        self._queue_timeout = queue_timeout
        self._task_timeout = task_timeout
        self._closing = threading.Lock()
        self._closed = False

    @classmethod
    def from_config(cls, config: HasherConfig) -> BlockingExecutor:
        return cls(
            workers=config.workers,
            queue_size=config.queue_size,
            queue_timeout=config.queue_timeout,
            task_timeout=config.task_timeout,
        )

    def run(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        if not self._slots.acquire(timeout=self._queue_timeout):
            logger.error(f"workers.{self._name}: saturated, no slot within {self._queue_timeout}s")
            raise WorkerUnavailableError("pool saturated")

        try:
            # Run under the caller's context so log lines keep its correlation id.
            ctx = contextvars.copy_context()
            future: Future[T] = self._pool.submit(ctx.run, fn, *args, **kwargs)
        except RuntimeError as exc:
            self._slots.release()
            logger.error(f"workers.{self._name}: submit refused ({exc})")
            raise WorkerUnavailableError("pool shut down") from exc
        future.add_done_callback(lambda _: self._slots.release())

        done, _ = wait_for_futures((future,), timeout=self._task_timeout)
        if not done:
            # A job already running finishes in the background; its result is dropped.
            future.cancel()
            logger.error(f"workers.{self._name}: job exceeded {self._task_timeout}s")
            raise WorkerUnavailableError("task timed out")
        if future.cancelled():
            raise WorkerUnavailableError("task cancelled")
        return future.result()

    def shutdown(self, wait: bool = True, *, quiet: bool = False) -> None:
        """Stop the pool; repeated calls are no-ops.

        ``quiet`` skips the log line, for interpreter exit when sinks may be closed.
        """
        with self._closing:
            if self._closed:
                return
            self._closed = True
        self._pool.shutdown(wait=wait, cancel_futures=True)
        if not quiet:
            logger.info(f"workers.{self._name}: shut down")


__all__ = ["BlockingExecutor", "WorkerUnavailableError"]
