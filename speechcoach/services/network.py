"""HTTP boundary helpers shared by the OpenAI clients."""

from __future__ import annotations

import math
from typing import Awaitable, Callable, Optional

import httpx

from .retry import (
    ErrorKind,
    RateLimited,
    RequestOutcome,
    ServerFault,
    Success,
    TerminalFailure,
)

ResponseParser = Callable[[httpx.Response], RequestOutcome]


class ApiError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        status_code: Optional[int] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.retry_after = retry_after

    @classmethod
    def from_outcome(cls, outcome: RequestOutcome) -> "ApiError":
        if isinstance(outcome, RateLimited):
            if outcome.retry_after is not None:
                message = f"Rate limited. Please try again in {outcome.retry_after:.0f} seconds."
            else:
                message = "Rate limited. Please try again shortly."
            return cls(ErrorKind.RATE_LIMITED, message, status_code=429, retry_after=outcome.retry_after)
        if isinstance(outcome, ServerFault):
            if outcome.status_code is None:
                return cls(ErrorKind.NETWORK, f"Network error: {outcome.message}")
            return cls(
                ErrorKind.SERVER,
                f"API error ({outcome.status_code}): {outcome.message}",
                status_code=outcome.status_code,
            )
        if isinstance(outcome, TerminalFailure):
            return cls(outcome.kind, outcome.message, status_code=outcome.status_code)
        raise TypeError(f"Not a failure outcome: {outcome!r}")


def classify_response(response: httpx.Response, parse_success: ResponseParser) -> RequestOutcome:
    """Map an HTTP response onto the retry vocabulary."""
    status = response.status_code
    if status == 200:
        return parse_success(response)
    if status in (401, 403):
        message = parse_error_message(response) or "Authentication failed"
        return TerminalFailure(ErrorKind.AUTHENTICATION, f"API error ({status}): {message}", status)
    if status == 429:
        return RateLimited(retry_after=parse_retry_after(response))
    message = parse_error_message(response) or "Request failed"
    if status >= 500:
        return ServerFault(status_code=status, message=message)
    return TerminalFailure(ErrorKind.HTTP, f"API error ({status}): {message}", status)


async def send(request: Callable[[], Awaitable[httpx.Response]], parse_success: ResponseParser) -> RequestOutcome:
    try:
        response = await request()
    except httpx.TransportError as exc:
        return ServerFault(status_code=None, message=str(exc) or exc.__class__.__name__)
    return classify_response(response, parse_success)


def parse_retry_after(response: httpx.Response) -> Optional[float]:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        seconds = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


def parse_error_message(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return None


__all__ = ["ApiError", "classify_response", "parse_error_message", "parse_retry_after", "send"]
