"""Retry policy for remote calls (rate limiting, transient faults, backoff)."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from ..metrics import REMOTE_ATTEMPT_COUNTER, REMOTE_RETRY_COUNTER

LOGGER = logging.getLogger("speechcoach.retry")

DEFAULT_RETRY_AFTER = 5.0
MAX_WAIT = 60.0


class ErrorKind(str, Enum):
    MISSING_API_KEY = "missing_api_key"
    AUDIO_NOT_FOUND = "audio_not_found"
    FILE_TOO_LARGE = "file_too_large"
    EMPTY_TRANSCRIPT = "empty_transcript"
    AUTHENTICATION = "authentication"
    RATE_LIMITED = "rate_limited"
    SERVER = "server"
    HTTP = "http"
    NETWORK = "network"
    MALFORMED_RESPONSE = "malformed_response"
    INVALID_OPTION = "invalid_option"


@dataclass(frozen=True, slots=True)
class Success:
    payload: Any


@dataclass(frozen=True, slots=True)
class RateLimited:
    retry_after: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ServerFault:
    """5xx response, or a transport failure when ``status_code`` is None."""

    status_code: Optional[int] = None
    message: str = ""


@dataclass(frozen=True, slots=True)
class TerminalFailure:
    kind: ErrorKind
    message: str = ""
    status_code: Optional[int] = None


RequestOutcome = Union[Success, RateLimited, ServerFault, TerminalFailure]
AttemptFn = Callable[[], Awaitable[RequestOutcome]]
SleepFn = Callable[[float], Awaitable[None]]


def linear_backoff(attempt: int) -> float:
    return float(attempt)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_retries: int = 1
    delay: Callable[[int], float] = linear_backoff
    honor_retry_after: bool = True
    default_retry_after: float = DEFAULT_RETRY_AFTER
    max_wait: float = MAX_WAIT


class RequestExecutor:
    """Run an attempt function until success, a terminal failure, or the budget is spent.

    Attempts run strictly one after another. Waits between attempts are awaited,
    so cancelling the calling task during a wait raises ``CancelledError`` and no
    further attempt is started.
    """

    def __init__(self, policy: RetryPolicy | None = None, *, sleep: SleepFn = asyncio.sleep, name: str = "remote") -> None:
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self.name = name

    async def execute(self, attempt_fn: AttemptFn) -> RequestOutcome:
        max_attempts = max(self.policy.max_retries, 0) + 1
        outcome: RequestOutcome = ServerFault(message="no attempt made")
        for attempt in range(1, max_attempts + 1):
            outcome = await attempt_fn()
            REMOTE_ATTEMPT_COUNTER.labels(call=self.name, outcome=_outcome_label(outcome)).inc()
            if isinstance(outcome, (Success, TerminalFailure)):
                return outcome
            if attempt >= max_attempts:
                break
            delay, reason = self._delay_for(outcome, attempt)
            REMOTE_RETRY_COUNTER.labels(call=self.name, reason=reason).inc()
            LOGGER.info("%s attempt %d/%d %s; retrying in %.1fs", self.name, attempt, max_attempts, reason, delay)
            await self._sleep(delay)
        LOGGER.error("%s failed after %d attempt(s): %s", self.name, max_attempts, outcome)
        return outcome

    def _delay_for(self, outcome: RequestOutcome, attempt: int) -> tuple[float, str]:
        if isinstance(outcome, RateLimited):
            if self.policy.honor_retry_after and outcome.retry_after is not None:
                return self._bounded(outcome.retry_after), "rate_limited"
            return self._bounded(self.policy.default_retry_after), "rate_limited"
        return self._bounded(self.policy.delay(attempt)), "server_fault"

    def _bounded(self, seconds: float) -> float:
        if not math.isfinite(seconds):
            return self.policy.max_wait
        return min(max(0.0, seconds), self.policy.max_wait)


def _outcome_label(outcome: RequestOutcome) -> str:
    if isinstance(outcome, Success):
        return "success"
    if isinstance(outcome, RateLimited):
        return "rate_limited"
    if isinstance(outcome, ServerFault):
        return "server_fault"
    return outcome.kind.value


__all__ = [
    "AttemptFn",
    "ErrorKind",
    "RateLimited",
    "RequestExecutor",
    "RequestOutcome",
    "RetryPolicy",
    "ServerFault",
    "Success",
    "TerminalFailure",
    "linear_backoff",
]
