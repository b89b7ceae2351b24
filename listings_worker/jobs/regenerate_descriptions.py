"""CLI job that backfills descriptions and keywords for stored businesses lacking them."""

import logging

from listings_worker.core.config import get_settings
from listings_worker.core.content import ContentEnricher
from listings_worker.core.db import PostgresBusinessStore, init_pool
from listings_worker.core.rate_limit import FixedDelayLimiter
from listings_worker.vendors.anthropic_client import AnthropicTextGenerator

logger = logging.getLogger(__name__)

BACKFILL_DELAY_SECONDS = 1.0


def regenerate_descriptions(store: PostgresBusinessStore, enricher: ContentEnricher, limiter) -> dict:
    businesses = store.missing_descriptions()
    total = len(businesses)
    logger.info("Found %d businesses needing descriptions", total)

    updated = 0
    for index, business in enumerate(businesses, start=1):
        name = business.get("name") or "Unknown"
        business_type = business.get("subcategory") or business.get("category") or "business"
        address = business.get("street") or ""
        logger.info("[%d/%d] Processing %s", index, total, name)

        result = enricher.enrich(name, business_type, address)
        if result.description:
            store.update_enrichment(business["id"], result.description, result.keywords)
            updated += 1
        else:
            logger.warning("No description generated for %s; leaving it unchanged", name)

        limiter.wait()

    logger.info("Backfill complete: processed=%d updated=%d", total, updated)
    return {"processed": total, "updated": updated}


def run_regenerate_job() -> dict:
    settings = get_settings()
    if not settings.anthropic_api_key:
        raise RuntimeError("ANTHROPIC_API_KEY is required")

    init_pool()
    generator = AnthropicTextGenerator(settings.anthropic_api_key, settings.anthropic_model)
    enricher = ContentEnricher(generator, settings.municipality)
    return regenerate_descriptions(
        PostgresBusinessStore(),
        enricher,
        FixedDelayLimiter(BACKFILL_DELAY_SECONDS),
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    try:
        run_regenerate_job()
    except Exception as exc:  # noqa: BLE001
        logger.error("Description backfill failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
