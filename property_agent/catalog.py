"""Read-only property catalog and the plain (non-relaxing) matchers over it."""
import json
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .models import Action, Property, SearchFilter
from .parser import parse
from .utils import get_logger, property_from_dict
from .vocabulary import LOCATION_MAP

logger = get_logger(__name__)

_PART_FILES = ("property_basics.json", "property_characteristics.json", "property_images.json")


def filter_properties(properties: Iterable[Property], filters: SearchFilter) -> List[Property]:
    """Location substring (case-insensitive), inclusive price bounds, at-least bedrooms."""
    results = list(properties)
    if filters.location:
        needle = filters.location.lower()
        results = [p for p in results if needle in p.location.lower()]
    if filters.max_price is not None:
        results = [p for p in results if p.price <= filters.max_price]
    if filters.min_price is not None:
        results = [p for p in results if p.price >= filters.min_price]
    if filters.bedrooms is not None:
        results = [p for p in results if p.bedrooms >= filters.bedrooms]
    return results


def _matches_text(p: Property, needle: str) -> bool:
    return (
        needle in p.title.lower()
        or needle in p.location.lower()
        or any(needle in a.lower() for a in p.amenities)
    )


class Catalog:
    """Ordered, immutable list of listings loaded once at startup."""

    def __init__(self, properties: Iterable[Property]) -> None:
        self._properties = tuple(properties)
        self._by_id = {p.id: p for p in self._properties}

    def get_all(self) -> List[Property]:
        return list(self._properties)

    def get(self, property_id: Any) -> Optional[Property]:
        return self._by_id.get(property_id)

    def filter(self, filters: SearchFilter) -> List[Property]:
        return filter_properties(self._properties, filters)

    def locations(self) -> List[str]:
        return sorted({p.location for p in self._properties})

    def search_text(self, query: str) -> List[Property]:
        """Instant search: structured bits of the query plus a substring match on the rest."""
        parsed = parse(query)
        if parsed.is_empty() or parsed.action == Action.SAVED:
            return self.get_all()

        free_text = parsed.free_text or ""
        if parsed.location:
            # The location word is handled by the location filter, not the substring match.
            for key, label in LOCATION_MAP.items():
                if label == parsed.location:
                    free_text = re.sub(rf"(?<!\w){re.escape(key)}(?!\w)", " ", free_text)
            free_text = " ".join(free_text.split())

        results = self.filter(parsed)
        if free_text:
            results = [p for p in results if _matches_text(p, free_text)]
        return results

    def __len__(self) -> int:
        return len(self._properties)


def _read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _merge_parts(basics: List[Dict], characteristics: List[Dict], images: List[Dict]) -> List[Dict]:
    """Merge the three record lists by id; basics decide order and membership."""
    chars_by_id = {c.get("id"): c for c in characteristics}
    images_by_id = {i.get("id"): i for i in images}
    return [
        {**basic, **chars_by_id.get(basic.get("id"), {}), **images_by_id.get(basic.get("id"), {})}
        for basic in basics
    ]


def load_catalog(path: Union[str, Path]) -> Catalog:
    """Load a catalog from a merged JSON list, or a directory holding the three part files.

    A missing or unreadable source yields an empty catalog and an error log.
    """
    path = Path(path)
    try:
        if path.is_dir():
            records = _merge_parts(*(_read_json(path / name) for name in _PART_FILES))
        else:
            records = _read_json(path)
        properties = [property_from_dict(r) for r in records]
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error("Error loading catalog from %s: %s", path, e)
        return Catalog([])

    logger.info("Loaded %d properties", len(properties))
    return Catalog(properties)
