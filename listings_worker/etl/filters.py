"""Cheap candidate filters that run before any paid enrichment call."""

import logging
from typing import Optional, Protocol

from listings_worker.models import LocationVerdict, Municipality

logger = logging.getLogger(__name__)


class ExistenceCheck(Protocol):
    def exists(self, place_id: str) -> bool:
        ...


def city_segment(formatted_address: Optional[str]) -> str:
    """Second comma-separated segment of a formatted address, or ''."""
    segments = [segment.strip() for segment in (formatted_address or "").split(",")]
    return segments[1] if len(segments) > 1 else ""


def validate_location(formatted_address: Optional[str], municipality: Municipality) -> LocationVerdict:
    """Check that the address sits in ``municipality``.

    Only the second comma segment is inspected, and it passes when it contains
    the municipality name case-insensitively. Addresses carrying a suite line
    before the city, or towns whose name is part of a neighbour's name, will
    be misjudged; no geocoding is attempted.
    """
    segment = city_segment(formatted_address)
    if municipality.name.lower() in segment.lower():
        return LocationVerdict(is_valid=True, detected_segment=segment)
    return LocationVerdict(
        is_valid=False,
        detected_segment=segment,
        reason=f"address city segment {segment!r} is not in {municipality.name}",
    )


def is_duplicate(place_id: str, store: Optional[ExistenceCheck] = None) -> bool:
    """Return True when ``store`` already holds ``place_id``; lookup errors count as not duplicate."""
    if store is None:
        return False
    try:
        return bool(store.exists(place_id))
    except Exception as exc:  # noqa: BLE001
        logger.error("Duplicate check failed for %s, treating as new: %s", place_id, exc)
        return False
