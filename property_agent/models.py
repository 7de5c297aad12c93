# Data models for search and chat interactions.
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional


class Action(str, Enum):
    SEARCH = "search"
    SAVED = "saved"  # Show the caller's saved list; every other field is ignored.


def _non_negative(value: Any, name: str, integral: bool = False) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    if number < 0:
        raise ValueError(f"{name} must be non-negative, got {value!r}")
    if integral and not number.is_integer():
        raise ValueError(f"{name} must be a whole number, got {value!r}")
    return int(round(number))


@dataclass
class SearchFilter:
    """Structured search criteria derived from text.

    All constraints are combined with AND. An empty filter matches the whole catalog.
    ``free_text`` is only used by the instant text search and never goes over the wire.
    """

    location: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    bedrooms: Optional[int] = None  # at least N
    action: Action = Action.SEARCH
    free_text: Optional[str] = None

    def has_criteria(self) -> bool:
        """True if any of location / max_price / bedrooms is set."""
        return self.location is not None or self.max_price is not None or self.bedrooms is not None

    def is_empty(self) -> bool:
        return (
            self.action == Action.SEARCH
            and not self.has_criteria()
            and self.min_price is None
            and not self.free_text
        )

    def copy(self, **changes: Any) -> "SearchFilter":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: camelCase keys, unset fields left out."""
        payload: Dict[str, Any] = {"action": self.action.value}
        if self.location is not None:
            payload["location"] = self.location
        if self.min_price is not None:
            payload["minPrice"] = self.min_price
        if self.max_price is not None:
            payload["maxPrice"] = self.max_price
        if self.bedrooms is not None:
            payload["bedrooms"] = self.bedrooms
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchFilter":
        """Build a filter from wire or snake_case keys. Raises ValueError on bad values."""
        if not isinstance(data, dict):
            raise ValueError(f"filter must be an object, got {type(data).__name__}")

        def pick(*keys: str) -> Any:
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        raw_action = pick("action") or Action.SEARCH.value
        try:
            action = Action(str(raw_action).strip().lower())
        except ValueError:
            raise ValueError(f"unknown action {raw_action!r}") from None

        location = pick("location")
        if location is not None:
            if not isinstance(location, str):
                raise ValueError(f"location must be a string, got {location!r}")
            location = location.strip() or None

        return cls(
            location=location,
            min_price=_non_negative(pick("minPrice", "min_price"), "minPrice"),
            max_price=_non_negative(pick("maxPrice", "max_price"), "maxPrice"),
            bedrooms=_non_negative(pick("bedrooms"), "bedrooms", integral=True),
            action=action,
        )


@dataclass
class Property:
    """Catalog listing. Read-only to the search engine."""
    id: int
    title: str
    location: str
    price: int
    bedrooms: int
    bathrooms: Optional[float] = None
    size: Optional[int] = None
    amenities: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)  # image urls, descriptions, ...


@dataclass
class ChatTurn:
    speaker: str  # "user" | "assistant"
    text: str


@dataclass
class MatchResult:
    """Catalog match after relaxation. ``rationale`` is empty for a direct match."""
    results: List[Property]
    rationale: str = ""
    relaxed_by: Optional[str] = None  # name of the relaxation rule that produced results


@dataclass
class ChatReply:
    message: str
    filters: SearchFilter
    properties: List[Property]
    ai_enabled: bool = False
