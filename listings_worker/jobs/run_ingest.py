"""CLI job to discover local businesses and persist them as pending listings."""

import argparse
import logging
from typing import Iterable, List, Optional

from listings_worker.core.config import Settings, get_settings
from listings_worker.core.content import ContentEnricher
from listings_worker.core.db import PostgresBusinessStore, init_pool
from listings_worker.core.pipeline import IngestionOrchestrator
from listings_worker.core.rate_limit import FixedDelayLimiter
from listings_worker.etl.categories import PriceLevelMapper, TypeCategorizer
from listings_worker.vendors.anthropic_client import AnthropicTextGenerator
from listings_worker.vendors.google_places import PlaceSearchClient

logger = logging.getLogger(__name__)


def parse_terms(raw: Iterable[str]) -> List[str]:
    """Split comma-separated search terms, dropping blanks."""
    terms: List[str] = []
    for chunk in raw:
        terms.extend(term.strip() for term in str(chunk).split(",") if term.strip())
    return terms


def build_orchestrator(settings: Settings) -> IngestionOrchestrator:
    if not settings.google_api_key:
        raise RuntimeError("GOOGLE_PLACES_API_KEY is required")
    if not settings.anthropic_api_key:
        raise RuntimeError("ANTHROPIC_API_KEY is required")

    municipality = settings.municipality
    generator = AnthropicTextGenerator(settings.anthropic_api_key, settings.anthropic_model)
    return IngestionOrchestrator(
        search_client=PlaceSearchClient(settings.google_api_key, municipality),
        enricher=ContentEnricher(generator, municipality),
        municipality=municipality,
        categorizer=TypeCategorizer.from_file(settings.category_map_path),
        price_mapper=PriceLevelMapper.from_file(settings.price_level_map_path),
        limiter=FixedDelayLimiter(settings.request_delay),
    )


def run_ingest_job(
    *,
    search_terms: List[str],
    max_per_term: Optional[int] = None,
    dry_run: bool = False,
) -> dict:
    settings = get_settings()
    if not search_terms:
        raise ValueError("At least one search term is required")

    orchestrator = build_orchestrator(settings)
    store = None
    if not dry_run:
        init_pool()
        store = PostgresBusinessStore()

    cap = max_per_term or settings.max_per_term
    logger.info("Starting ingest for %d terms (max_per_term=%d, dry_run=%s)", len(search_terms), cap, dry_run)
    records = orchestrator.ingest(search_terms, cap, store)

    saved = 0
    skipped = 0
    failed = 0
    if store is not None:
        for record in records:
            try:
                if store.insert(record):
                    saved += 1
                else:
                    skipped += 1
            except Exception as exc:  # noqa: BLE001
                failed += 1
                logger.error("Failed to save %s: %s", record.name, exc)

    logger.info(
        "Completed ingest: records=%d saved=%d skipped=%d failed=%d",
        len(records),
        saved,
        skipped,
        failed,
    )
    return {"records": len(records), "saved": saved, "skipped": skipped, "failed": failed}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Discover and enrich local businesses")
    parser.add_argument(
        "--terms",
        dest="terms",
        required=True,
        action="append",
        help="Comma-separated business types to search, e.g. 'plumber,bakery'",
    )
    parser.add_argument(
        "--max-per-term",
        dest="max_per_term",
        type=int,
        default=get_settings().max_per_term,
        help="Maximum number of places requested per search term",
    )
    parser.add_argument("--dry-run", dest="dry_run", action="store_true", help="Do not write to the database")
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()

    run_ingest_job(
        search_terms=parse_terms(args.terms),
        max_per_term=args.max_per_term,
        dry_run=args.dry_run,
    )


if __name__ == "__main__":
    main()
