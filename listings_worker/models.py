"""Core data models shared by the business listings ingestion pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Municipality:
    """Target town that searches and location checks are scoped to."""

    name: str
    state: str
    state_name: Optional[str] = None

    @property
    def display_state(self) -> str:
        return self.state_name or self.state


@dataclass(frozen=True, slots=True)
class PlaceCandidate:
    """Snapshot of one place returned by the Places text search."""

    place_id: str
    name: Optional[str] = None
    formatted_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    rating_count: Optional[int] = None
    price_level: Optional[str] = None
    opening_hours: Optional[Dict[str, Any]] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    maps_url: Optional[str] = None
    primary_type: Optional[str] = None
    raw_snapshot: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_api(cls, place: Dict[str, Any]) -> "PlaceCandidate":
        location = place.get("location") or {}
        display_name = place.get("displayName") or {}
        return cls(
            place_id=place["id"],
            name=display_name.get("text"),
            formatted_address=place.get("formattedAddress"),
            latitude=location.get("latitude"),
            longitude=location.get("longitude"),
            rating=place.get("rating"),
            rating_count=place.get("userRatingCount"),
            price_level=place.get("priceLevel"),
            opening_hours=place.get("regularOpeningHours"),
            website=place.get("websiteUri"),
            phone=place.get("nationalPhoneNumber"),
            maps_url=place.get("googleMapsUri"),
            primary_type=place.get("primaryType"),
            raw_snapshot=place,
        )


@dataclass(frozen=True)
class LocationVerdict:
    is_valid: bool
    detected_segment: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class EnrichmentResult:
    """Generated copy for a candidate. ``description`` is None when generation failed."""

    description: Optional[str] = None
    keywords: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class BusinessRecord:
    """Normalized business row handed to the persistence layer."""

    google_place_id: str
    name: str
    slug: str
    category: str
    subcategory: str
    description: Optional[str]
    street: str
    city: str
    state: str
    zip: str
    phone: Optional[str]
    website: Optional[str]
    google_maps_url: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    rating: Optional[float]
    total_ratings: int
    price_level: Optional[int]
    opening_hours: Optional[Dict[str, Any]]
    keywords: List[str]
    scraped_at: datetime
    status: str = "pending"

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)
