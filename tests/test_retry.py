import asyncio

import pytest

from speechcoach.services.retry import (
    ErrorKind,
    RateLimited,
    RequestExecutor,
    RetryPolicy,
    ServerFault,
    Success,
    TerminalFailure,
)


class Script:
    """Replays a fixed list of outcomes and counts attempts."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if len(self.outcomes) > 1:
            return self.outcomes.pop(0)
        return self.outcomes[0]


def _executor(max_retries: int = 1, **policy):
    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    return RequestExecutor(RetryPolicy(max_retries=max_retries, **policy), sleep=fake_sleep), delays


def test_rate_limited_then_success():
    executor, delays = _executor()
    script = Script(RateLimited(retry_after=1), Success("ok"))

    outcome = asyncio.run(executor.execute(script))

    assert outcome == Success("ok")
    assert script.calls == 2
    assert delays == [1.0]


def test_rate_limited_without_header_uses_default_wait():
    executor, delays = _executor()
    script = Script(RateLimited(), Success("ok"))

    asyncio.run(executor.execute(script))

    assert delays == [5.0]


def test_retry_after_ignored_when_policy_disables_it():
    executor, delays = _executor(honor_retry_after=False, default_retry_after=2.0)
    script = Script(RateLimited(retry_after=30), Success("ok"))

    asyncio.run(executor.execute(script))

    assert delays == [2.0]


def test_rate_limited_budget_exhausted():
    executor, delays = _executor()
    script = Script(RateLimited(retry_after=1))

    outcome = asyncio.run(executor.execute(script))

    assert outcome == RateLimited(retry_after=1)
    assert script.calls == 2
    assert delays == [1.0]


def test_persistent_server_fault_fails_after_budget():
    executor, delays = _executor(max_retries=1)
    script = Script(ServerFault(500, "boom"))

    outcome = asyncio.run(executor.execute(script))

    assert isinstance(outcome, ServerFault)
    assert script.calls == 2
    assert delays == [1.0]


def test_server_fault_backoff_is_linear():
    executor, delays = _executor(max_retries=3)
    script = Script(ServerFault(503), ServerFault(502), ServerFault(None, "reset"), Success({"text": "hi"}))

    outcome = asyncio.run(executor.execute(script))

    assert outcome == Success({"text": "hi"})
    assert script.calls == 4
    assert delays == [1.0, 2.0, 3.0]


def test_terminal_failure_is_not_retried():
    executor, delays = _executor(max_retries=3)
    failure = TerminalFailure(ErrorKind.AUTHENTICATION, "bad key", 401)
    script = Script(failure)

    outcome = asyncio.run(executor.execute(script))

    assert outcome is failure
    assert script.calls == 1
    assert delays == []


def test_zero_retries_means_single_attempt():
    executor, delays = _executor(max_retries=0)
    script = Script(ServerFault(500))

    asyncio.run(executor.execute(script))

    assert script.calls == 1
    assert delays == []


def test_cancellation_during_delay_stops_retries():
    script = Script(RateLimited(retry_after=30), Success("late"))

    async def scenario():
        executor = RequestExecutor(RetryPolicy(max_retries=3))
        task = asyncio.create_task(executor.execute(script))
        while script.calls == 0:
            await asyncio.sleep(0)
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
    assert script.calls == 1


def test_executions_are_independent():
    executor, delays = _executor()
    first = Script(ServerFault(500), Success("a"))
    second = Script(ServerFault(500), Success("b"))

    assert asyncio.run(executor.execute(first)) == Success("a")
    assert asyncio.run(executor.execute(second)) == Success("b")
    assert first.calls == second.calls == 2
    assert delays == [1.0, 1.0]


def test_waits_are_capped_by_policy():
    executor, delays = _executor(max_retries=2, max_wait=30.0)
    script = Script(RateLimited(retry_after=3600), RateLimited(retry_after=float("inf")), Success("ok"))

    assert asyncio.run(executor.execute(script)) == Success("ok")
    assert delays == [30.0, 30.0]
