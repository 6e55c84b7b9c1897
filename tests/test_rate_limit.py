import pytest

from professional_search.core.rate_limit import (
    RateLimitConfig,
    RateLimitEntry,
    RateLimitExceeded,
    evaluate,
)

CONFIG = RateLimitConfig(window_ms=60_000, max_requests_per_window=3, min_interval_ms=5_000)


def test_first_request_is_allowed():
    decision = evaluate(100_000, None, CONFIG)

    assert decision.allowed is True
    assert decision.retry_after_ms == 0
    assert decision.next_entry == RateLimitEntry(window_start_ms=100_000, requests_in_window=1, last_request_ms=100_000)


def test_blocks_request_below_minimum_interval():
    first = evaluate(100_000, None, CONFIG)
    second = evaluate(102_000, first.next_entry, CONFIG)

    assert second.allowed is False
    assert second.retry_after_ms == 3000
    assert second.next_entry is first.next_entry


def test_blocks_when_window_is_full():
    first = evaluate(100_000, None, CONFIG)
    second = evaluate(106_000, first.next_entry, CONFIG)
    third = evaluate(112_000, second.next_entry, CONFIG)
    fourth = evaluate(118_000, third.next_entry, CONFIG)

    assert [first.allowed, second.allowed, third.allowed] == [True, True, True]
    assert third.next_entry.requests_in_window == 3
    assert fourth.allowed is False
    assert fourth.retry_after_ms == 42_000
    assert fourth.next_entry.requests_in_window == 3
    assert fourth.next_entry.last_request_ms == 112_000


def test_resets_window_after_it_elapses():
    first = evaluate(100_000, None, CONFIG)
    second = evaluate(106_000, first.next_entry, CONFIG)
    third = evaluate(112_000, second.next_entry, CONFIG)

    after_window = evaluate(170_001, third.next_entry, CONFIG)

    assert after_window.allowed is True
    assert after_window.next_entry.requests_in_window == 1
    assert after_window.next_entry.window_start_ms == 170_001


def test_window_is_fixed_not_sliding():
    entry = RateLimitEntry(window_start_ms=0, requests_in_window=3, last_request_ms=59_000)
    decision = evaluate(60_000 - 1, entry, RateLimitConfig(60_000, 3, 0))

    assert decision.allowed is False
    assert decision.retry_after_ms == 1


def test_denied_attempt_does_not_mutate_previous_entry():
    entry = RateLimitEntry(window_start_ms=0, requests_in_window=3, last_request_ms=10_000)
    decision = evaluate(20_000, entry, CONFIG)

    assert decision.allowed is False
    assert entry.requests_in_window == 3
    assert decision.next_entry.requests_in_window == 3


def test_zero_quota_denies_with_full_window():
    decision = evaluate(5_000, None, RateLimitConfig(window_ms=60_000, max_requests_per_window=0, min_interval_ms=0))

    assert decision.allowed is False
    assert decision.retry_after_ms == 60_000
    assert decision.next_entry.requests_in_window == 0


@pytest.mark.parametrize("retry_after_ms, seconds", [(3000, 3), (2001, 3), (1, 1), (42_000, 42)])
def test_rate_limit_exceeded_reports_wait_seconds(retry_after_ms, seconds):
    exc = RateLimitExceeded(retry_after_ms)
    assert exc.wait_seconds == seconds
    assert f"{seconds}s" in str(exc)
