"""Per-category aggregation of Places results."""

from typing import Iterable, List, Mapping, Sequence, Set

from professional_search.models import CategoryResult, PlaceResult, SearchCategory


def build_top_places_by_category(
    categories: Iterable[SearchCategory],
    results_by_category: Mapping[str, Sequence[PlaceResult]],
    max_per_category: int,
) -> List[CategoryResult]:
    """Deduplicate each category's places by id and keep the first ``max_per_category``.

    Categories left without places are omitted.
    """
    grouped: List[CategoryResult] = []
    for category in categories:
        seen: Set[str] = set()
        places: List[PlaceResult] = []
        for place in results_by_category.get(category.id, ()):
            if place.id in seen:
                continue
            seen.add(place.id)
            places.append(place)
        places = places[:max(max_per_category, 0)]
        if places:
            grouped.append(CategoryResult(category.id, category.name, tuple(places)))
    return grouped


def pick_top_unique_results_by_category(
    categories: Iterable[SearchCategory],
    results_by_category: Mapping[str, Sequence[PlaceResult]],
) -> List[PlaceResult]:
    """Pick one place per category, preferring places no earlier category took.

    This is a greedy pass in category order, not an optimal assignment: earlier
    categories get first pick of shared places. When every candidate of a
    category is already taken, its first candidate is reused so the category
    is not left empty. Categories without candidates are skipped.
    """
    used: Set[str] = set()
    picked: List[PlaceResult] = []
    for category in categories:
        candidates = results_by_category.get(category.id) or ()
        if not candidates:
            continue
        choice = next((place for place in candidates if place.id not in used), candidates[0])
        used.add(choice.id)
        picked.append(choice)
    return picked
