from __future__ import annotations

import threading

import pytest
from loguru import logger as loguru_logger

from authcore.domain.users.exceptions import MalformedHashError
from authcore.infrastructure.health import hashing_pool_check, run_checks
from authcore.infrastructure.workers import BlockingExecutor, WorkerUnavailableError
from authcore.shared.config import HasherConfig
from authcore.shared.logging import clear_request_context, get_correlation_id, set_correlation_id


@pytest.fixture()
def executor() -> BlockingExecutor:
    pool = BlockingExecutor(workers=1, queue_size=0, queue_timeout=1.0, task_timeout=5.0)
    yield pool
    pool.shutdown(wait=True)


def test_run_returns_job_result(executor: BlockingExecutor) -> None:
    assert executor.run(pow, 2, 10) == 1024
    assert executor.run(lambda *, name: f"hi {name}", name="alice") == "hi alice"


def test_job_exception_passes_through_unchanged(executor: BlockingExecutor) -> None:
    def corrupted() -> bool:
        raise MalformedHashError("bad salt")

    with pytest.raises(MalformedHashError) as exc_info:
        executor.run(corrupted)

    assert exc_info.value.detail == "bad salt"


def test_job_false_result_is_not_an_error(executor: BlockingExecutor) -> None:
    assert executor.run(lambda: False) is False


def test_slot_is_returned_after_each_job(executor: BlockingExecutor) -> None:
    results = [executor.run(lambda i=i: i * i) for i in range(5)]

    assert results == [0, 1, 4, 9, 16]


def test_saturated_pool_reports_unavailable() -> None:
    pool = BlockingExecutor(workers=1, queue_size=0, queue_timeout=0.05, task_timeout=5.0)
    started = threading.Event()
    release = threading.Event()

    def blocker() -> str:
        started.set()
        release.wait(5)
        return "done"

    holder_result: list[str] = []
    holder = threading.Thread(target=lambda: holder_result.append(pool.run(blocker)))
    holder.start()
    try:
        assert started.wait(5)
        with pytest.raises(WorkerUnavailableError) as exc_info:
            pool.run(lambda: "never runs")
        assert exc_info.value.code == "worker_unavailable"
        assert exc_info.value.to_dict() == {"error": "internal_error"}
    finally:
        release.set()
        holder.join(5)
        pool.shutdown()

    assert holder_result == ["done"]


def test_job_over_deadline_reports_unavailable() -> None:
    pool = BlockingExecutor(workers=1, queue_size=0, queue_timeout=1.0, task_timeout=0.05)
    release = threading.Event()
    try:
        with pytest.raises(WorkerUnavailableError) as exc_info:
            pool.run(release.wait, 5)
        assert exc_info.value.detail == "task timed out"
    finally:
        release.set()
        pool.shutdown()


def test_run_after_shutdown_reports_unavailable() -> None:
    pool = BlockingExecutor(workers=1, queue_size=1)
    pool.shutdown()

    with pytest.raises(WorkerUnavailableError) as exc_info:
        pool.run(lambda: 1)

    assert exc_info.value.detail == "pool shut down"


def test_from_config_uses_hasher_settings() -> None:
    pool = BlockingExecutor.from_config(
        HasherConfig(workers=2, queue_size=3, queue_timeout=0.5, task_timeout=2.0)
    )
    try:
        assert pool.run(sum, [1, 2, 3]) == 6
    finally:
        pool.shutdown()


def test_job_sees_callers_correlation_id(executor: BlockingExecutor) -> None:
    set_correlation_id("req-7")
    try:
        assert executor.run(get_correlation_id) == "req-7"
    finally:
        clear_request_context()


def test_health_check_reports_shut_down_pool() -> None:
    pool = BlockingExecutor(workers=1, queue_size=0, queue_timeout=0.1)
    checks = {"hasher": hashing_pool_check(pool)}
    assert run_checks(checks) == (True, {"hasher": "ok"})

    pool.shutdown(wait=True)

    assert run_checks(checks) == (False, {"hasher": "error"})


def test_repeated_shutdown_is_a_no_op() -> None:
    messages: list[str] = []
    sink_id = loguru_logger.add(lambda message: messages.append(message.record["message"]))
    try:
        pool = BlockingExecutor(workers=1, queue_size=0)
        pool.shutdown(quiet=True)
        pool.shutdown()
    finally:
        loguru_logger.remove(sink_id)

    assert not [m for m in messages if "shut down" in m]
    with pytest.raises(WorkerUnavailableError):
        pool.run(int)
