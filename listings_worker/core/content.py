"""Generated descriptions and SEO keywords for business listings."""

import logging
from typing import List, Optional

from listings_worker.models import EnrichmentResult, Municipality
from listings_worker.vendors.anthropic_client import TextGenerator

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_TOKENS = 300
KEYWORDS_MAX_TOKENS = 150
KEYWORD_COUNT = 8


class ContentEnricher:
    """Wraps a text generator; each operation degrades on its own."""

    def __init__(self, generator: TextGenerator, municipality: Municipality) -> None:
        self.generator = generator
        self.municipality = municipality

    def description_prompt(self, name: str, business_type: str, address: str) -> str:
        town = self.municipality
        return (
            f"Write a friendly, SEO-optimized 150-word description for {name}, a {business_type} "
            f"located at {address} in {town.name}, {town.display_state}. Focus on what makes them "
            f"valuable to the local community. Use natural language and include keywords like "
            f'"{town.name}" and "{business_type}". Write in third person.'
        )

    def keywords_prompt(self, name: str, business_type: str, address: str) -> str:
        town = self.municipality
        location = f" at {address}" if address else ""
        return (
            f"Generate {KEYWORD_COUNT} SEO keywords for {name}, a {business_type}{location} in "
            f"{town.name}, {town.state}. Return only comma-separated keywords that locals might "
            f'search for. Include variations with "{town.name}", "near me", and service-specific terms.'
        )

    def generate_description(self, name: str, business_type: str, address: str) -> Optional[str]:
        try:
            text = self.generator.generate(
                self.description_prompt(name, business_type, address),
                max_tokens=DESCRIPTION_MAX_TOKENS,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Description generation failed for %s: %s", name, exc)
            return None
        return text.strip() or None

    def generate_keywords(self, name: str, business_type: str, address: str) -> List[str]:
        try:
            text = self.generator.generate(
                self.keywords_prompt(name, business_type, address),
                max_tokens=KEYWORDS_MAX_TOKENS,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Keyword generation failed for %s: %s", name, exc)
            return []
        return split_keywords(text)

    def enrich(self, name: str, business_type: str, address: str) -> EnrichmentResult:
        description = self.generate_description(name, business_type, address)
        keywords = self.generate_keywords(name, business_type, address)
        return EnrichmentResult(description=description, keywords=keywords)


def split_keywords(text: str) -> List[str]:
    return [keyword.strip() for keyword in text.split(",") if keyword.strip()]
