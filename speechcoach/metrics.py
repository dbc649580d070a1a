"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import Counter, Summary

REMOTE_ATTEMPT_COUNTER = Counter(
    "speechcoach_remote_attempts_total",
    "Remote API attempts by call and outcome",
    labelnames=("call", "outcome"),
)

REMOTE_RETRY_COUNTER = Counter(
    "speechcoach_remote_retries_total",
    "Retries scheduled after a recoverable remote failure",
    labelnames=("call", "reason"),
)

SILENCE_TRIM_COUNTER = Counter(
    "speechcoach_silence_trim_total",
    "Silence trimming runs by result",
    labelnames=("result",),
)

SILENCE_TRIM_DURATION = Summary(
    "speechcoach_silence_trim_seconds",
    "Time spent scanning and splicing audio buffers",
)
