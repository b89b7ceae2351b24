"""Database helpers for the listings worker."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

from psycopg2 import extras, pool

from listings_worker.core.config import get_settings
from listings_worker.models import BusinessRecord

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is required for database connections")
        _connection_pool = pool.SimpleConnectionPool(
            minconn,
            maxconn,
            dsn=settings.database_url,
            connect_timeout=10,
        )
        logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


def _prepare_params(record: BusinessRecord) -> Dict[str, Any]:
    params = record.to_row()
    params["opening_hours"] = extras.Json(record.opening_hours) if record.opening_hours is not None else None
    params["keywords"] = list(record.keywords)
    return params


_EXISTS = "SELECT 1 FROM businesses WHERE google_place_id = %(google_place_id)s LIMIT 1"

_INSERT_BUSINESS = """
INSERT INTO businesses (
    google_place_id,
    name,
    slug,
    category,
    subcategory,
    description,
    street,
    city,
    state,
    zip,
    phone,
    website,
    google_maps_url,
    latitude,
    longitude,
    rating,
    total_ratings,
    price_level,
    opening_hours,
    keywords,
    status,
    scraped_at
) VALUES (
    %(google_place_id)s,
    %(name)s,
    %(slug)s,
    %(category)s,
    %(subcategory)s,
    %(description)s,
    %(street)s,
    %(city)s,
    %(state)s,
    %(zip)s,
    %(phone)s,
    %(website)s,
    %(google_maps_url)s,
    %(latitude)s,
    %(longitude)s,
    %(rating)s,
    %(total_ratings)s,
    %(price_level)s,
    %(opening_hours)s,
    %(keywords)s,
    %(status)s,
    %(scraped_at)s
)
ON CONFLICT (google_place_id) DO NOTHING;
"""

_MISSING_DESCRIPTIONS = """
SELECT id, name, category, subcategory, street
FROM businesses
WHERE description IS NULL OR description = ''
ORDER BY id
"""

_UPDATE_ENRICHMENT = """
UPDATE businesses
SET description = %(description)s, keywords = %(keywords)s, updated_at = NOW()
WHERE id = %(id)s
"""


class PostgresBusinessStore:
    """Persistence handle used by the ingestion and backfill jobs."""

    def exists(self, place_id: str) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_EXISTS, {"google_place_id": place_id})
                return cur.fetchone() is not None

    def insert(self, record: BusinessRecord) -> bool:
        """Insert a business row; returns False when the place id is already stored."""
        params = _prepare_params(record)
        if not params["google_place_id"] or not params["slug"]:
            raise ValueError("google_place_id and slug are required for insert")

        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_INSERT_BUSINESS, params)
                inserted = cur.rowcount > 0
            conn.commit()
        logger.debug("Inserted business %s (new=%s)", record.slug, inserted)
        return inserted

    def missing_descriptions(self) -> List[Dict[str, Any]]:
        with get_connection() as conn:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(_MISSING_DESCRIPTIONS)
                return [dict(row) for row in cur.fetchall()]

    def update_enrichment(self, business_id: int, description: str, keywords: Sequence[str]) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    _UPDATE_ENRICHMENT,
                    {"id": business_id, "description": description, "keywords": list(keywords)},
                )
            conn.commit()
        logger.debug("Updated enrichment for business id=%s", business_id)
