"""Search -> dedupe -> location check -> enrichment -> normalisation pipeline."""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from listings_worker.core.content import ContentEnricher
from listings_worker.core.rate_limit import RateLimiter
from listings_worker.etl.categories import PriceLevelMapper, TypeCategorizer
from listings_worker.etl.filters import ExistenceCheck, is_duplicate, validate_location
from listings_worker.etl.transform import business_type_label, display_name, to_business_record
from listings_worker.models import BusinessRecord, Municipality, PlaceCandidate
from listings_worker.vendors.google_places import PlaceSearchClient

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IngestionOrchestrator:
    """Runs candidates through the pipeline one at a time.

    Duplicate and location checks run before enrichment so rejected places
    never cost a generation call. The limiter is consulted after every
    candidate, whether it was kept or skipped.
    """

    def __init__(
        self,
        search_client: PlaceSearchClient,
        enricher: ContentEnricher,
        municipality: Municipality,
        categorizer: TypeCategorizer,
        price_mapper: PriceLevelMapper,
        limiter: RateLimiter,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.search_client = search_client
        self.enricher = enricher
        self.municipality = municipality
        self.categorizer = categorizer
        self.price_mapper = price_mapper
        self.limiter = limiter
        self.clock = clock

    def ingest(
        self,
        search_terms: Sequence[str],
        max_per_term: int,
        store: Optional[ExistenceCheck] = None,
    ) -> List[BusinessRecord]:
        records: List[BusinessRecord] = []
        for term in search_terms:
            logger.info("Searching for %r in %s", term, self.municipality.name)
            candidates = self.search_client.search(term, max_per_term)
            for candidate in candidates:
                record = self.process_candidate(candidate, store)
                if record is not None:
                    records.append(record)
                self.limiter.wait()

        logger.info("Ingest finished: terms=%d records=%d", len(search_terms), len(records))
        return records

    def process_candidate(
        self,
        candidate: PlaceCandidate,
        store: Optional[ExistenceCheck] = None,
    ) -> Optional[BusinessRecord]:
        name = display_name(candidate)

        if is_duplicate(candidate.place_id, store):
            logger.info("Skipping %s (%s): already stored", name, candidate.place_id)
            return None

        verdict = validate_location(candidate.formatted_address, self.municipality)
        if not verdict.is_valid:
            logger.info("Skipping %s (%s): %s", name, candidate.place_id, verdict.reason)
            return None

        logger.info("Processing %s", name)
        enrichment = self.enricher.enrich(
            name,
            business_type_label(candidate.primary_type),
            candidate.formatted_address or "",
        )
        if enrichment.description is None:
            logger.warning("No description generated for %s; keeping record without one", name)

        return to_business_record(
            candidate,
            enrichment,
            self.municipality,
            self.categorizer,
            self.price_mapper,
            scraped_at=self.clock(),
        )
