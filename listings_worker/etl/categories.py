"""Lookup tables translating Places labels into listing categories and price levels.

The tables live in ``etl/data/*.json`` so category policy can change without
touching pipeline code; alternative files can be supplied through settings.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.joinpath("data")
DEFAULT_CATEGORY_MAP = DATA_DIR.joinpath("categories.json")
DEFAULT_PRICE_LEVEL_MAP = DATA_DIR.joinpath("price_levels.json")
FALLBACK_CATEGORY = "Services"
_PRICE_PREFIX = "PRICE_LEVEL_"

PathLike = Union[str, Path]


class TypeCategorizer:
    def __init__(self, table: Mapping[str, str], default: str = FALLBACK_CATEGORY) -> None:
        self.table: Dict[str, str] = dict(table)
        self.default = default

    @property
    def categories(self) -> set:
        return set(self.table.values()) | {self.default}

    def categorize(self, primary_type: Optional[str]) -> str:
        if not primary_type:
            return self.default
        return self.table.get(primary_type.strip().lower(), self.default)

    @classmethod
    def from_file(cls, path: Optional[PathLike] = None) -> "TypeCategorizer":
        source = Path(path) if path else DEFAULT_CATEGORY_MAP
        with source.open("r", encoding="utf-8") as fh:
            data = json.load(fh)

        default = data.get("default")
        if not default:
            raise ValueError(f"{source}: 'default' category is required")

        table: Dict[str, str] = {}
        for category, labels in (data.get("categories") or {}).items():
            for label in labels:
                key = label.strip().lower()
                if key in table and table[key] != category:
                    raise ValueError(f"{source}: {label!r} mapped to both {table[key]!r} and {category!r}")
                table[key] = category
        logger.debug("Loaded %d type labels from %s", len(table), source)
        return cls(table, default=default)


class PriceLevelMapper:
    """Maps ``PRICE_LEVEL_*`` labels (or their short forms) to 0-4."""

    def __init__(self, table: Mapping[str, int]) -> None:
        self.table: Dict[str, int] = {_normalize_price_label(label): level for label, level in table.items()}

    def map(self, label: Optional[str]) -> Optional[int]:
        if not label:
            return None
        return self.table.get(_normalize_price_label(label))

    @classmethod
    def from_file(cls, path: Optional[PathLike] = None) -> "PriceLevelMapper":
        source = Path(path) if path else DEFAULT_PRICE_LEVEL_MAP
        with source.open("r", encoding="utf-8") as fh:
            data = json.load(fh)

        for label, level in data.items():
            if isinstance(level, bool) or not isinstance(level, int) or not 0 <= level <= 4:
                raise ValueError(f"{source}: price level for {label!r} must be an integer 0-4")
        return cls(data)


def _normalize_price_label(label: str) -> str:
    key = label.strip().upper().replace("-", "_").replace(" ", "_")
    if not key.startswith(_PRICE_PREFIX):
        key = _PRICE_PREFIX + key
    return key
