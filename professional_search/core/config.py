"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from professional_search.core.rate_limit import RateLimitConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    search_port: int = 8080
    cache_ttl_ms: int = 30 * 60 * 1000
    rate_limit_window_ms: int = 60_000
    rate_limit_max_requests: int = 3
    rate_limit_min_interval_ms: int = 5_000
    max_workers: int = 8
    request_timeout: float = 10

    def rate_limit_config(self) -> RateLimitConfig:
        return RateLimitConfig(
            window_ms=self.rate_limit_window_ms,
            max_requests_per_window=self.rate_limit_max_requests,
            min_interval_ms=self.rate_limit_min_interval_ms,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_PLACES_API_KEY", "").strip()
    search_port = int(os.getenv("SEARCH_PORT", "8080"))
    cache_ttl_minutes = int(os.getenv("SEARCH_CACHE_TTL_MINUTES", "30"))
    rate_limit_window_ms = int(os.getenv("SEARCH_RATE_LIMIT_WINDOW_MS", "60000"))
    rate_limit_max_requests = int(os.getenv("SEARCH_RATE_LIMIT_MAX_REQUESTS", "3"))
    rate_limit_min_interval_ms = int(os.getenv("SEARCH_RATE_LIMIT_MIN_INTERVAL_MS", "5000"))
    max_workers = int(os.getenv("SEARCH_MAX_WORKERS", "8"))
    request_timeout = float(os.getenv("GOOGLE_PLACES_TIMEOUT", "10"))

    if not google_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not configured; professional searches will fail.")
    if max_workers < 1:
        logger.warning("SEARCH_MAX_WORKERS=%d is invalid; using 1.", max_workers)
        max_workers = 1

    return Settings(
        google_api_key=google_api_key,
        search_port=search_port,
        cache_ttl_ms=cache_ttl_minutes * 60 * 1000,
        rate_limit_window_ms=rate_limit_window_ms,
        rate_limit_max_requests=rate_limit_max_requests,
        rate_limit_min_interval_ms=rate_limit_min_interval_ms,
        max_workers=max_workers,
        request_timeout=request_timeout,
    )
