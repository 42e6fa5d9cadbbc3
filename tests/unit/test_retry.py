from __future__ import annotations

import asyncio
import logging

import pytest

from client_records.infrastructure.store import ErrorCode, StoreError
from client_records.retry import RetryPolicy
from tests.helpers import RecordingSleep


class _FlakyAttempt:
    """Fails the first ``failures`` calls, then succeeds."""

    def __init__(self, failures: int, error: Exception | None = None) -> None:
        self.failures = failures
        self.calls = 0
        self._error = error or StoreError("down", ErrorCode.UNAVAILABLE)

    async def __call__(self) -> None:
        self.calls += 1
        if self.calls <= self.failures:
            raise self._error


def test_delay_schedule_doubles_then_gives_up():
    policy = RetryPolicy(max_retries=3, base_delay=1.0)

    assert [policy.delay_for(k) for k in range(4)] == [1.0, 2.0, 4.0, None]


def test_delay_schedule_scales_with_base_delay():
    policy = RetryPolicy(max_retries=2, base_delay=0.5)

    assert policy.delay_for(0) == 0.5
    assert policy.delay_for(1) == 1.0
    assert policy.delay_for(2) is None


def test_negative_retry_count_is_rejected():
    with pytest.raises(ValueError):
        RetryPolicy(max_retries=-1)


@pytest.mark.asyncio
async def test_success_on_first_attempt_never_sleeps():
    sleeper = RecordingSleep()
    attempt = _FlakyAttempt(failures=0)

    await RetryPolicy(sleep=sleeper).run(attempt)

    assert attempt.calls == 1
    assert sleeper.delays == []


@pytest.mark.asyncio
async def test_recovers_after_two_failures_with_backoff():
    sleeper = RecordingSleep()
    attempt = _FlakyAttempt(failures=2)

    await RetryPolicy(max_retries=3, base_delay=1.0, sleep=sleeper).run(attempt)

    assert attempt.calls == 3
    assert sleeper.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_fourth_failure_propagates():
    sleeper = RecordingSleep()
    error = StoreError("denied", ErrorCode.PERMISSION_DENIED)
    attempt = _FlakyAttempt(failures=10, error=error)

    with pytest.raises(StoreError) as excinfo:
        await RetryPolicy(max_retries=3, base_delay=1.0, sleep=sleeper).run(attempt)

    assert excinfo.value is error
    assert attempt.calls == 4
    assert sleeper.delays == [1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_zero_retries_propagates_first_failure():
    sleeper = RecordingSleep()
    attempt = _FlakyAttempt(failures=1)

    with pytest.raises(StoreError):
        await RetryPolicy(max_retries=0, sleep=sleeper).run(attempt)

    assert attempt.calls == 1
    assert sleeper.delays == []


@pytest.mark.asyncio
async def test_cancellation_is_not_retried():
    sleeper = RecordingSleep()
    calls = []

    async def attempt() -> None:
        calls.append(1)
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await RetryPolicy(sleep=sleeper).run(attempt)

    assert len(calls) == 1
    assert sleeper.delays == []


@pytest.mark.asyncio
async def test_each_run_starts_a_fresh_attempt_budget():
    sleeper = RecordingSleep()
    policy = RetryPolicy(max_retries=1, sleep=sleeper)

    await policy.run(_FlakyAttempt(failures=1))
    await policy.run(_FlakyAttempt(failures=1))

    assert sleeper.delays == [1.0, 1.0]


@pytest.mark.asyncio
async def test_retries_are_logged_with_operation_label(caplog):
    sleeper = RecordingSleep()

    with caplog.at_level(logging.WARNING, logger="client_records.retry"):
        await RetryPolicy(sleep=sleeper).run(_FlakyAttempt(failures=1), label="list")

    records = [r for r in caplog.records if r.name == "client_records.retry"]
    assert len(records) == 1
    assert records[0].operation == "list"
    assert records[0].attempt == 1
    assert records[0].delay == 1.0
