"""Client utilities for the Google Places Text Search (New) API."""

import logging
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_TEXT_SEARCH_URL = "https://places.googleapis.com/v1/places:searchText"
FIELD_MASK = ",".join(
    [
        "places.id",
        "places.displayName",
        "places.formattedAddress",
        "places.googleMapsUri",
        "places.nationalPhoneNumber",
        "places.internationalPhoneNumber",
    ]
)


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)


def search_text(body: Dict[str, Any], api_key: str, timeout: float = 10) -> Dict[str, Any]:
    headers = {
        "Content-Type": "application/json",
        "X-Goog-Api-Key": api_key,
        "X-Goog-FieldMask": FIELD_MASK,
    }
    response = _SESSION.post(_TEXT_SEARCH_URL, json=body, headers=headers, timeout=timeout)
    if not 200 <= response.status_code < 300:
        logger.error(
            "search_text failed: status=%s, query=%s, body=%s",
            response.status_code,
            body.get("textQuery"),
            response.text[:300],
        )
        raise GooglePlacesError(
            response.status_code,
            f"Erro na busca do Google Places ({response.status_code})",
        )
    return response.json() or {}
