"""Fixed-window rate limiting with a minimum spacing between admitted requests.

``evaluate`` is pure: it receives the caller-scoped previous entry and returns
the decision together with the entry the caller should persist. Nothing is
stored here.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    window_ms: int
    max_requests_per_window: int
    min_interval_ms: int


@dataclass(frozen=True, slots=True)
class RateLimitEntry:
    window_start_ms: float
    requests_in_window: int = 0
    last_request_ms: float = 0


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    allowed: bool
    retry_after_ms: float
    next_entry: RateLimitEntry


class RateLimitExceeded(RuntimeError):
    """Raised when a search is denied by the rate limiter."""

    def __init__(self, retry_after_ms: float) -> None:
        self.retry_after_ms = retry_after_ms
        self.wait_seconds = math.ceil(retry_after_ms / 1000)
        super().__init__(
            f"Voce fez muitas buscas em pouco tempo. Tente novamente em {self.wait_seconds}s."
        )


def evaluate(now_ms: float, previous_entry: Optional[RateLimitEntry], config: RateLimitConfig) -> RateLimitDecision:
    entry = previous_entry or RateLimitEntry(window_start_ms=now_ms)

    if entry.last_request_ms > 0:
        elapsed = now_ms - entry.last_request_ms
        if elapsed < config.min_interval_ms:
            return RateLimitDecision(
                allowed=False,
                retry_after_ms=config.min_interval_ms - elapsed,
                next_entry=entry,
            )

    window_elapsed = now_ms - entry.window_start_ms
    if window_elapsed >= config.window_ms:
        entry = replace(entry, window_start_ms=now_ms, requests_in_window=0)
        window_elapsed = 0

    if entry.requests_in_window >= config.max_requests_per_window:
        return RateLimitDecision(
            allowed=False,
            retry_after_ms=max(1, config.window_ms - window_elapsed),
            next_entry=entry,
        )

    return RateLimitDecision(
        allowed=True,
        retry_after_ms=0,
        next_entry=replace(
            entry,
            requests_in_window=entry.requests_in_window + 1,
            last_request_ms=now_ms,
        ),
    )
