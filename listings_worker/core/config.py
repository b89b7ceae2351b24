"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from listings_worker.models import Municipality

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    anthropic_api_key: str
    database_url: str
    municipality_name: str = "Fair Lawn"
    municipality_state: str = "NJ"
    municipality_state_name: Optional[str] = "New Jersey"
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL
    request_delay: float = 0.5
    max_per_term: int = 20
    category_map_path: Optional[str] = None
    price_level_map_path: Optional[str] = None
    worker_port: int = 9000

    @property
    def municipality(self) -> Municipality:
        return Municipality(
            name=self.municipality_name,
            state=self.municipality_state,
            state_name=self.municipality_state_name,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_PLACES_API_KEY", "")
    anthropic_api_key = os.getenv("ANTHROPIC_API_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")
    municipality_name = os.getenv("MUNICIPALITY_NAME", "Fair Lawn").strip()
    municipality_state = os.getenv("MUNICIPALITY_STATE", "NJ").strip().upper()
    municipality_state_name = os.getenv("MUNICIPALITY_STATE_NAME", "New Jersey").strip() or None
    anthropic_model = os.getenv("ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL
    request_delay = float(os.getenv("INGEST_REQUEST_DELAY", "0.5"))
    max_per_term = int(os.getenv("INGEST_MAX_PER_TERM", "20"))
    category_map_path = os.getenv("CATEGORY_MAP_PATH") or None
    price_level_map_path = os.getenv("PRICE_LEVEL_MAP_PATH") or None
    worker_port = int(os.getenv("WORKER_PORT", "9000"))

    if not database_url:
        logger.warning("DATABASE_URL is not set; database operations will fail.")
    if not google_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not configured; Places searches will fail.")
    if not anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY is not configured; descriptions and keywords will be empty.")

    return Settings(
        google_api_key=google_api_key,
        anthropic_api_key=anthropic_api_key,
        database_url=database_url,
        municipality_name=municipality_name,
        municipality_state=municipality_state,
        municipality_state_name=municipality_state_name,
        anthropic_model=anthropic_model,
        request_delay=request_delay,
        max_per_term=max_per_term,
        category_map_path=category_map_path,
        price_level_map_path=price_level_map_path,
        worker_port=worker_port,
    )
