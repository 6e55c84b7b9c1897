"""Utilities for building Places queries and transforming their responses."""

import logging
import re
import unicodedata
from typing import Any, Dict, Optional

from professional_search.models import PlaceResult, SearchCategory

logger = logging.getLogger(__name__)

CATEGORY_QUERIES = {
    "psicologo": "psicologo infantil autismo ABA",
    "fono": "fonoaudiologo infantil autismo",
    "nutricionista": "nutricionista infantil seletividade alimentar autismo",
    "to": "terapeuta ocupacional integracao sensorial infantil",
    "neuropediatra": "neuropediatra infantil autismo",
    "psiquiatra": "psiquiatra infantil autismo",
    "pedagogo": "psicopedagogo autismo inclusao escolar",
}

MISSING_ADDRESS = "Endereco nao informado"
WHATSAPP_BASE_URL = "https://wa.me/"
BRAZIL_COUNTRY_CODE = "55"

_BRAZIL_STATES = {
    "ac": "acre",
    "al": "alagoas",
    "ap": "amapa",
    "am": "amazonas",
    "ba": "bahia",
    "ce": "ceara",
    "df": "distrito federal",
    "es": "espirito santo",
    "go": "goias",
    "ma": "maranhao",
    "mt": "mato grosso",
    "ms": "mato grosso do sul",
    "mg": "minas gerais",
    "pa": "para",
    "pb": "paraiba",
    "pr": "parana",
    "pe": "pernambuco",
    "pi": "piaui",
    "rj": "rio de janeiro",
    "rn": "rio grande do norte",
    "rs": "rio grande do sul",
    "ro": "rondonia",
    "rr": "roraima",
    "sc": "santa catarina",
    "sp": "sao paulo",
    "se": "sergipe",
    "to": "tocantins",
}
_STATE_TOKENS = set(_BRAZIL_STATES) | set(_BRAZIL_STATES.values())
_NON_DIGITS = re.compile(r"\D")


def normalize_text(value: str) -> str:
    """Lower-case and strip diacritics so "Jequié" compares equal to "jequie"."""
    decomposed = unicodedata.normalize("NFD", value.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def build_text_query(category_id: str, location_label: Optional[str] = None) -> str:
    query = CATEGORY_QUERIES.get(category_id, f"{category_id} autismo infantil")
    location = (location_label or "").strip()
    if location:
        query = f"{query} em {location}"
    return query


def extract_city(location_label: Optional[str] = None) -> Optional[str]:
    """Return the city part of labels such as "Jequie, BA".

    A label without a comma that names a state ("Bahia", "SP") has no city.
    """
    if not location_label:
        return None

    head, comma, _ = location_label.partition(",")
    candidate = head.strip()
    if not candidate:
        return None
    if not comma and normalize_text(candidate) in _STATE_TOKENS:
        return None
    return candidate


def address_matches_city(address: str, city: str) -> bool:
    normalized_address = normalize_text(address or "").strip()
    normalized_city = normalize_text(city or "").strip()
    if not normalized_address or not normalized_city:
        return False
    return normalized_city in normalized_address


def whatsapp_url_from_phone(phone: Optional[str] = None) -> Optional[str]:
    digits = _NON_DIGITS.sub("", phone or "")
    if digits.startswith(BRAZIL_COUNTRY_CODE) and len(digits) >= 12:
        return f"{WHATSAPP_BASE_URL}{digits}"
    if len(digits) in (10, 11):
        return f"{WHATSAPP_BASE_URL}{BRAZIL_COUNTRY_CODE}{digits}"
    return None


def to_place_result(raw: Dict[str, Any], category: SearchCategory) -> Optional[PlaceResult]:
    place_id = _strip_or_none(raw.get("id"))
    display_name = raw.get("displayName")
    name = _strip_or_none(display_name.get("text")) if isinstance(display_name, dict) else None
    maps_url = _strip_or_none(raw.get("googleMapsUri"))
    if not place_id or not name or not maps_url:
        logger.debug("Skipping place without id/name/maps url: %s", raw)
        return None

    national = _strip_or_none(raw.get("nationalPhoneNumber"))
    international = _strip_or_none(raw.get("internationalPhoneNumber"))
    clinic_phone = national or international
    whatsapp_url = whatsapp_url_from_phone(international or national)
    if not clinic_phone and not whatsapp_url:
        logger.debug("Skipping place %s without a contact channel", place_id)
        return None

    return PlaceResult(
        id=place_id,
        name=name,
        address=_strip_or_none(raw.get("formattedAddress")) or MISSING_ADDRESS,
        maps_url=maps_url,
        category_id=category.id,
        category_name=category.name,
        rating=_safe_float(raw.get("rating")),
        clinic_phone=clinic_phone,
        whatsapp_url=whatsapp_url,
    )


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None
