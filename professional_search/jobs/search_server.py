"""HTTP entrypoint exposing the professional search to the mobile app."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

from professional_search.core.config import get_settings
from professional_search.core.rate_limit import RateLimitExceeded
from professional_search.jobs.search import (
    DEFAULT_MAX_PLACES_PER_CATEGORY,
    DEFAULT_RADIUS_METERS,
    DEFAULT_RATE_LIMIT_KEY,
    MissingApiKeyError,
    get_search_service,
)
from professional_search.models import Coordinates, SearchCategory
from professional_search.vendors.google_places import GooglePlacesError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)


class PayloadError(ValueError):
    """Raised when the search request body is invalid."""


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "api_key_configured": bool(settings.google_api_key),
                "cached_searches": len(get_search_service().cache),
            }
        ),
        200,
    )


@app.post("/search")
def search() -> Any:
    """
    Search care professionals by category.
    Required JSON fields: categories ([{id, name}])
    Optional: location_label, coordinates ({latitude, longitude}), radius_meters,
    max_places_per_category, rate_limit_key
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    try:
        params = _parse_search_payload(payload)
    except PayloadError as exc:
        return jsonify({"error": str(exc)}), 400

    try:
        results = get_search_service().search_by_category(api_key=get_settings().google_api_key, **params)
    except MissingApiKeyError as exc:
        logger.error("Search rejected: %s", exc)
        return jsonify({"error": str(exc), "code": exc.code}), 500
    except RateLimitExceeded as exc:
        response = jsonify({"error": str(exc), "retry_after_seconds": exc.wait_seconds})
        response.headers["Retry-After"] = str(exc.wait_seconds)
        return response, 429
    except GooglePlacesError as exc:
        logger.error("Google Places failed with status=%s", exc.status_code)
        return jsonify({"error": str(exc)}), 502
    except Exception as exc:  # noqa: BLE001
        logger.exception("Professional search failed: %s", exc)
        return jsonify({"error": "search failed"}), 500

    return jsonify({"data": [asdict(result) for result in results]}), 200


# ---------- Internals ----------


def _parse_search_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    raw_categories = payload.get("categories")
    if not isinstance(raw_categories, list):
        raise PayloadError("categories must be a list")

    categories: List[SearchCategory] = []
    for raw in raw_categories:
        if not isinstance(raw, dict) or not str(raw.get("id") or "").strip():
            raise PayloadError("each category needs an id")
        category_id = str(raw["id"]).strip()
        categories.append(SearchCategory(id=category_id, name=str(raw.get("name") or category_id).strip()))

    location_label = payload.get("location_label")
    if location_label is not None and not isinstance(location_label, str):
        raise PayloadError("location_label must be a string")

    return {
        "categories": categories,
        "location_label": location_label,
        "coordinates": _parse_coordinates(payload.get("coordinates")),
        "radius_meters": _parse_number(payload, "radius_meters", DEFAULT_RADIUS_METERS),
        "max_places_per_category": int(
            _parse_number(payload, "max_places_per_category", DEFAULT_MAX_PLACES_PER_CATEGORY)
        ),
        "rate_limit_key": str(payload.get("rate_limit_key") or DEFAULT_RATE_LIMIT_KEY),
    }


def _parse_coordinates(raw: Any) -> Optional[Coordinates]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise PayloadError("coordinates must be an object")
    try:
        return Coordinates(latitude=float(raw["latitude"]), longitude=float(raw["longitude"]))
    except (KeyError, TypeError, ValueError):
        raise PayloadError("coordinates need numeric latitude and longitude") from None


def _parse_number(payload: Dict[str, Any], field: str, default: float) -> float:
    raw = payload.get(field)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise PayloadError(f"{field} must be numeric") from None
    if value <= 0:
        raise PayloadError(f"{field} must be positive")
    return int(value) if value.is_integer() else value


def main() -> None:
    port = int(os.getenv("PORT") or get_settings().search_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
