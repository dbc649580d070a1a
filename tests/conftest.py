"""Pytest configuration helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest


def _ensure_repo_on_path() -> None:
    """Allow tests to import ``speechcoach`` without installing the package."""
    repo_root = Path(__file__).resolve().parents[1]
    path_str = str(repo_root)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_repo_on_path()

SAMPLE_RATE = 16_000


def tone(duration_s: float, sample_rate: int = SAMPLE_RATE, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(int(duration_s * sample_rate))
    return (np.sin(2 * np.pi * 440 * t / sample_rate) * amplitude).astype(np.float32)


def silence(duration_s: float, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    return np.zeros(int(duration_s * sample_rate), dtype=np.float32)


@pytest.fixture()
def mixed_audio() -> np.ndarray:
    """1s tone + 2s silence + 1s tone."""
    return np.concatenate([tone(1.0), silence(2.0), tone(1.0)])
