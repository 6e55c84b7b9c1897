"""Cache key construction for professional searches."""

from typing import Iterable, Optional

from professional_search.models import Coordinates

_DELIMITER = "|"
_COORDINATE_PRECISION = 3


def _format_coordinate(value: float) -> str:
    # Adding 0.0 turns -0.0 into 0.0 so both sides of the equator share a key.
    return f"{round(value, _COORDINATE_PRECISION) + 0.0:.{_COORDINATE_PRECISION}f}"


def build_cache_key(
    category_ids: Iterable[str],
    location_label: Optional[str] = None,
    coordinates: Optional[Coordinates] = None,
    radius_meters: Optional[float] = None,
    max_per_category: Optional[int] = None,
) -> str:
    """Return a key that is stable across category order, label casing and GPS jitter.

    Missing optional fields contribute an empty segment so every key has the
    same number of fields.
    """
    ids = ",".join(sorted(category_ids))
    label = (location_label or "").strip().lower()
    if coordinates is not None:
        latitude = _format_coordinate(coordinates.latitude)
        longitude = _format_coordinate(coordinates.longitude)
    else:
        latitude = longitude = ""
    radius = "" if radius_meters is None else str(radius_meters)
    max_places = "" if max_per_category is None else str(max_per_category)
    return _DELIMITER.join([ids, label, latitude, longitude, radius, max_places])
