"""Core data models shared by the professional search pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class SearchCategory:
    """A care-provider specialty; ``id`` is the stable key used everywhere."""

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class PlaceResult:
    """Normalized snapshot of a clinic returned by Google Places."""

    id: str
    name: str
    address: str
    maps_url: str
    category_id: str
    category_name: str
    rating: Optional[float] = None
    clinic_phone: Optional[str] = None
    whatsapp_url: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CategoryResult:
    category_id: str
    category_name: str
    places: Tuple[PlaceResult, ...] = ()
