"""CLI job to search care professionals by category and print the results as JSON."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import List, Optional, Sequence

from professional_search.core.config import get_settings
from professional_search.core.rate_limit import RateLimitExceeded
from professional_search.etl.aggregate import pick_top_unique_results_by_category
from professional_search.jobs.search import (
    DEFAULT_MAX_PLACES_PER_CATEGORY,
    DEFAULT_RADIUS_METERS,
    MissingApiKeyError,
    get_search_service,
)
from professional_search.models import Coordinates, SearchCategory

logger = logging.getLogger(__name__)

CATEGORY_NAMES = {
    "psicologo": "Psicologo (ABA/TEACCH)",
    "fono": "Fonoaudiologo",
    "nutricionista": "Nutricionista especializado",
    "to": "Terapeuta Ocupacional",
    "neuropediatra": "Neuropediatra",
    "psiquiatra": "Psiquiatra infantil",
    "pedagogo": "Pedagogo especializado",
}


def build_categories(category_ids: Sequence[str]) -> List[SearchCategory]:
    categories: List[SearchCategory] = []
    for category_id in category_ids:
        category_id = category_id.strip()
        if category_id and all(category.id != category_id for category in categories):
            categories.append(SearchCategory(id=category_id, name=CATEGORY_NAMES.get(category_id, category_id)))
    return categories


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search care professionals on Google Places")
    parser.add_argument(
        "--category",
        dest="categories",
        action="append",
        required=True,
        help=f"Category id to search, repeatable (known: {', '.join(CATEGORY_NAMES)})",
    )
    parser.add_argument("--location", dest="location_label", help="Location label, e.g. 'Campinas, SP'")
    parser.add_argument("--lat", dest="latitude", type=float, help="Latitude for the location bias")
    parser.add_argument("--lng", dest="longitude", type=float, help="Longitude for the location bias")
    parser.add_argument("--radius", dest="radius_meters", type=float, default=DEFAULT_RADIUS_METERS)
    parser.add_argument(
        "--max-per-category",
        dest="max_places_per_category",
        type=int,
        default=DEFAULT_MAX_PLACES_PER_CATEGORY,
        help="Maximum number of places returned per category",
    )
    parser.add_argument("--rate-limit-key", dest="rate_limit_key", default="cli")
    parser.add_argument(
        "--unique",
        action="store_true",
        help="Print one place per category, avoiding places already picked by earlier categories",
    )
    return parser


def run_search(args: argparse.Namespace) -> str:
    coordinates = None
    if args.latitude is not None and args.longitude is not None:
        coordinates = Coordinates(latitude=args.latitude, longitude=args.longitude)

    categories = build_categories(args.categories)
    results = get_search_service().search_by_category(
        categories,
        api_key=get_settings().google_api_key,
        location_label=args.location_label,
        coordinates=coordinates,
        radius_meters=args.radius_meters,
        max_places_per_category=args.max_places_per_category,
        rate_limit_key=args.rate_limit_key,
    )
    logger.info("Found places for %d of %d categories", len(results), len(categories))

    if args.unique:
        by_category = {result.category_id: list(result.places) for result in results}
        picked = pick_top_unique_results_by_category(categories, by_category)
        return json.dumps([asdict(place) for place in picked], ensure_ascii=False, indent=2)
    return json.dumps([asdict(result) for result in results], ensure_ascii=False, indent=2)


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.latitude is None) != (args.longitude is None):
        parser.error("--lat and --lng must be provided together")

    try:
        output = run_search(args)
    except MissingApiKeyError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except RateLimitExceeded as exc:
        logger.error("%s", exc)
        return 1
    except Exception as exc:  # noqa: BLE001
        logger.error("Professional search failed: %s", exc, exc_info=True)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
