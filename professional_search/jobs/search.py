"""Professional search orchestration: cache, rate limiting and parallel Places lookups."""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Sequence

from professional_search.core.cache import SearchCache
from professional_search.core.cache_key import build_cache_key
from professional_search.core.config import get_settings
from professional_search.core.rate_limit import (
    RateLimitConfig,
    RateLimitEntry,
    RateLimitExceeded,
    evaluate,
)
from professional_search.etl.aggregate import build_top_places_by_category
from professional_search.etl.transform import (
    address_matches_city,
    build_text_query,
    extract_city,
    to_place_result,
)
from professional_search.models import CategoryResult, Coordinates, PlaceResult, SearchCategory
from professional_search.vendors import google_places

logger = logging.getLogger(__name__)

MIN_RATING = 4
RESULTS_PER_REQUEST = 5
DEFAULT_RADIUS_METERS = 12000
DEFAULT_MAX_PLACES_PER_CATEGORY = 3
DEFAULT_RATE_LIMIT_KEY = "default"


class MissingApiKeyError(RuntimeError):
    """Raised when a search is attempted without a Google Places API key."""

    code = "EMPTY_API_KEY"

    def __init__(self) -> None:
        super().__init__("Google Places API key nao configurada")


def _now_ms() -> float:
    return time.time() * 1000


def build_request_body(
    category_id: str,
    location_label: Optional[str] = None,
    coordinates: Optional[Coordinates] = None,
    radius_meters: float = DEFAULT_RADIUS_METERS,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "textQuery": build_text_query(category_id, location_label),
        "minRating": MIN_RATING,
        "maxResultCount": RESULTS_PER_REQUEST,
    }
    if coordinates is not None:
        body["locationBias"] = {
            "circle": {
                "center": {"latitude": coordinates.latitude, "longitude": coordinates.longitude},
                "radius": radius_meters,
            }
        }
    return body


def search_single_category(
    category: SearchCategory,
    api_key: str,
    location_label: Optional[str] = None,
    coordinates: Optional[Coordinates] = None,
    radius_meters: float = DEFAULT_RADIUS_METERS,
    timeout: float = 10,
) -> List[PlaceResult]:
    body = build_request_body(category.id, location_label, coordinates, radius_meters)
    logger.info("Running Places text search for category=%s query=%s", category.id, body["textQuery"])
    payload = google_places.search_text(body, api_key=api_key, timeout=timeout)

    places: List[PlaceResult] = []
    for raw in payload.get("places") or []:
        if not isinstance(raw, dict):
            continue
        place = to_place_result(raw, category)
        if place is not None:
            places.append(place)

    city = extract_city(location_label)
    if city:
        matching = [place for place in places if address_matches_city(place.address, city)]
        logger.debug(
            "City filter %s kept %d of %d places for category=%s", city, len(matching), len(places), category.id
        )
        places = matching
    return places


class ProfessionalSearchService:
    """Owns the result cache and per-key rate-limit state for professional searches.

    Concurrent searches with the same cache key are coalesced: only the first
    one is rate limited and reaches Google Places, the others wait for its
    outcome.
    """

    def __init__(
        self,
        cache: Optional[SearchCache] = None,
        rate_limit_config: Optional[RateLimitConfig] = None,
        clock: Callable[[], float] = _now_ms,
        max_workers: int = 8,
        request_timeout: float = 10,
    ) -> None:
        self.cache = cache if cache is not None else SearchCache()
        self.rate_limit_config = rate_limit_config or RateLimitConfig(
            window_ms=60_000, max_requests_per_window=3, min_interval_ms=5_000
        )
        self._clock = clock
        self._max_workers = max(1, max_workers)
        self._request_timeout = request_timeout
        self._rate_limits: Dict[str, RateLimitEntry] = {}
        self._inflight: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def rate_limit_entry(self, rate_limit_key: str) -> Optional[RateLimitEntry]:
        with self._lock:
            return self._rate_limits.get(rate_limit_key)

    def search_by_category(
        self,
        categories: Sequence[SearchCategory],
        api_key: str,
        location_label: Optional[str] = None,
        coordinates: Optional[Coordinates] = None,
        radius_meters: float = DEFAULT_RADIUS_METERS,
        max_places_per_category: int = DEFAULT_MAX_PLACES_PER_CATEGORY,
        rate_limit_key: str = DEFAULT_RATE_LIMIT_KEY,
    ) -> List[CategoryResult]:
        if not (api_key or "").strip():
            raise MissingApiKeyError()
        if not categories:
            return []

        cache_key = build_cache_key(
            [category.id for category in categories],
            location_label=location_label,
            coordinates=coordinates,
            radius_meters=radius_meters,
            max_per_category=max_places_per_category,
        )
        now_ms = self._clock()

        with self._lock:
            cached = self.cache.get(cache_key, now_ms)
            if cached is not None:
                logger.info("Cache hit for key=%s", cache_key)
                return list(cached)

            pending = self._inflight.get(cache_key)
            if pending is None:
                decision = evaluate(now_ms, self._rate_limits.get(rate_limit_key), self.rate_limit_config)
                if not decision.allowed:
                    logger.warning(
                        "Rate limit denied search for rate_limit_key=%s retry_after_ms=%s",
                        rate_limit_key,
                        decision.retry_after_ms,
                    )
                    raise RateLimitExceeded(decision.retry_after_ms)
                self._rate_limits[rate_limit_key] = decision.next_entry
                owner = Future()
                self._inflight[cache_key] = owner

        if pending is not None:
            logger.info("Joining in-flight search for key=%s", cache_key)
            return list(pending.result())

        try:
            results = self._fetch(
                categories, api_key, location_label, coordinates, radius_meters, max_places_per_category
            )
            self.cache.set(cache_key, results, now_ms)
        except BaseException as exc:
            owner.set_exception(exc)
            raise
        finally:
            with self._lock:
                self._inflight.pop(cache_key, None)

        owner.set_result(tuple(results))
        return results

    def _fetch(
        self,
        categories: Sequence[SearchCategory],
        api_key: str,
        location_label: Optional[str],
        coordinates: Optional[Coordinates],
        radius_meters: float,
        max_places_per_category: int,
    ) -> List[CategoryResult]:
        logger.info("Cache miss; searching %d categories", len(categories))
        workers = min(len(categories), self._max_workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(
                    search_single_category,
                    category,
                    api_key,
                    location_label,
                    coordinates,
                    radius_meters,
                    self._request_timeout,
                )
                for category in categories
            ]
            results_by_category = {
                category.id: future.result() for category, future in zip(categories, futures)
            }

        return build_top_places_by_category(categories, results_by_category, max_places_per_category)


@lru_cache(maxsize=1)
def get_search_service() -> ProfessionalSearchService:
    settings = get_settings()
    return ProfessionalSearchService(
        cache=SearchCache(ttl_ms=settings.cache_ttl_ms),
        rate_limit_config=settings.rate_limit_config(),
        max_workers=settings.max_workers,
        request_timeout=settings.request_timeout,
    )


def search_professionals_by_category(**kwargs: Any) -> List[CategoryResult]:
    """Search with the process-wide service, using the configured API key unless one is given."""
    kwargs.setdefault("api_key", get_settings().google_api_key)
    return get_search_service().search_by_category(**kwargs)
