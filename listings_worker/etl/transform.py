"""Utilities for transforming Places candidates into business rows."""

import logging
import re
from datetime import datetime, timezone
from typing import Optional

from listings_worker.etl.categories import PriceLevelMapper, TypeCategorizer
from listings_worker.models import BusinessRecord, EnrichmentResult, Municipality, PlaceCandidate

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 255
STATE_MAX_LENGTH = 2
ZIP_MAX_LENGTH = 10
SLUG_SUFFIX_LENGTH = 8

_APOSTROPHES = re.compile(r"['\u2019]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_ZIP = re.compile(r"\b\d{5}(?:-\d{4})?\b")


def display_name(candidate: PlaceCandidate) -> str:
    name = (candidate.name or "").strip()
    return name or "Unknown"


def business_type_label(primary_type: Optional[str]) -> str:
    """``hvac_contractor`` -> ``hvac contractor``; absent types read as ``business``."""
    label = (primary_type or "").replace("_", " ").strip()
    return label or "business"


def slugify(name: str, place_id: str) -> str:
    base = _NON_ALNUM.sub("-", _APOSTROPHES.sub("", name.lower())).strip("-")
    suffix = _NON_ALNUM.sub("", place_id[:SLUG_SUFFIX_LENGTH].lower())
    slug = "-".join(part for part in (base, suffix) if part)
    return slug or "business"


def parse_zip(formatted_address: Optional[str]) -> str:
    segments = [segment.strip() for segment in (formatted_address or "").split(",")]
    tail = segments[2] if len(segments) > 2 else ""
    match = _ZIP.search(tail)
    return (match.group(0) if match else "")[:ZIP_MAX_LENGTH]


def to_business_record(
    candidate: PlaceCandidate,
    enrichment: EnrichmentResult,
    municipality: Municipality,
    categorizer: TypeCategorizer,
    price_mapper: PriceLevelMapper,
    scraped_at: Optional[datetime] = None,
) -> BusinessRecord:
    name = display_name(candidate)[:NAME_MAX_LENGTH]
    address = candidate.formatted_address or ""
    street = address.split(",")[0].strip()

    # City and state come from configuration once the location check has passed.
    return BusinessRecord(
        google_place_id=candidate.place_id,
        name=name,
        slug=slugify(name, candidate.place_id),
        category=categorizer.categorize(candidate.primary_type),
        subcategory=business_type_label(candidate.primary_type),
        description=enrichment.description,
        street=street,
        city=municipality.name,
        state=municipality.state[:STATE_MAX_LENGTH],
        zip=parse_zip(address),
        phone=candidate.phone or None,
        website=candidate.website or None,
        google_maps_url=candidate.maps_url or None,
        latitude=candidate.latitude,
        longitude=candidate.longitude,
        rating=candidate.rating,
        total_ratings=candidate.rating_count or 0,
        price_level=price_mapper.map(candidate.price_level),
        opening_hours=candidate.opening_hours,
        keywords=list(enrichment.keywords),
        scraped_at=scraped_at or datetime.now(timezone.utc),
    )
