"""Deterministic extraction of search criteria from free text.

Provides:
- parse(): bedrooms, price bounds, location and leftover text from one message
- is_follow_up(): detects short confirmations such as "yes" or "show me"
- AbstractFilterExtractor / PatternFilterExtractor: the extractor interface and its
  regex-based implementation, used directly or as the fallback for the AI delegate
"""
import math
import re
from typing import List, Optional, Tuple

from .config import SMALL_PRICE_THRESHOLD
from .models import Action, ChatTurn, SearchFilter
from .vocabulary import (
    AFFIRMATION_WORDS,
    BEDROOM_WORDS,
    CEILING_WORDS,
    FLOOR_WORDS,
    LOCATION_MAP,
    PRICE_UNITS,
    SAVED_WORDS,
    SHOW_ALL_WORDS,
    STOP_WORDS,
)


def _alternation(words) -> str:
    # Longest first so "million" wins over "m" and "bedrooms" over "bed".
    return "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))


_BED_RE = re.compile(rf"(\d+)\s*-?\s*(?:{_alternation(BEDROOM_WORDS)})(?!\w)", re.IGNORECASE)

_PRICE_RE = re.compile(
    rf"(?:(?<!\w)(?P<ceiling>{_alternation(CEILING_WORDS)})|(?<!\w)(?P<floor>{_alternation(FLOOR_WORDS)}))?"
    r"\s*(?P<dollar>\$)?\s*"
    r"(?P<amount>\d+(?:,\d{3})*(?:\.\d+)?)"
    rf"\s*(?P<unit>{_alternation(PRICE_UNITS)})?(?!\w)",
    re.IGNORECASE,
)

_LOCATION_RES: List[Tuple[re.Pattern, str]] = [
    (re.compile(rf"(?<!\w){re.escape(key)}(?!\w)"), label) for key, label in LOCATION_MAP.items()
]

_STOP_RE = re.compile(rf"\b(?:{_alternation(STOP_WORDS)})\b", re.IGNORECASE)
_PUNCT_RE = re.compile(r"[^\w\s'-]")
_FOLLOW_UP_RE = re.compile(rf"^(?:{_alternation(AFFIRMATION_WORDS)})(?!\w)")


def is_follow_up(message: str) -> bool:
    """True if the message starts with an affirmation like "yes" or "go ahead"."""
    return bool(_FOLLOW_UP_RE.match((message or "").strip().lower()))


def resolve_amount(amount: str, unit: Optional[str]) -> Optional[int]:
    """Turn a matched number and optional unit into whole currency units.

    A bare number below SMALL_PRICE_THRESHOLD is read as thousands ("under 500").
    Returns None for amounts too large to represent.
    """
    value = float(amount.replace(",", ""))
    if unit:
        value *= PRICE_UNITS[unit.lower()]
    elif value < SMALL_PRICE_THRESHOLD:
        value *= 1000
    if not math.isfinite(value):
        return None
    return int(round(value))


def extract_bedrooms(text: str) -> Tuple[Optional[int], str]:
    """Return the first "<n> bed" count and the text with that span blanked out."""
    match = _BED_RE.search(text)
    if not match:
        return None, text
    return int(match.group(1)), text[: match.start()] + " " + text[match.end():]


def extract_prices(text: str) -> Tuple[Optional[int], Optional[int], str]:
    """Return (min_price, max_price, remaining text).

    Candidates are scanned left to right; a number only counts as a price when it
    carries a qualifier word, a "$" sign or a unit suffix. Floor words ("over",
    "at least", "from $") set the minimum; everything else sets the maximum.
    """
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    spans: List[Tuple[int, int]] = []
    for match in _PRICE_RE.finditer(text):
        if not (match.group("ceiling") or match.group("floor") or match.group("dollar") or match.group("unit")):
            continue
        # "from" only reads as a price floor with an explicit "$" or unit ("from $300k", not "from 2019").
        if (match.group("floor") or "").lower() == "from" and not (match.group("dollar") or match.group("unit")):
            continue
        value = resolve_amount(match.group("amount"), match.group("unit"))
        if value is None:
            continue
        if match.group("floor"):
            if min_price is not None:
                continue
            min_price = value
        else:
            if max_price is not None:
                continue
            max_price = value
        spans.append(match.span())
        if min_price is not None and max_price is not None:
            break

    for start, end in reversed(spans):
        text = text[:start] + " " + text[end:]
    return min_price, max_price, text


def extract_location(text: str) -> Optional[str]:
    """First vocabulary key present as a whole word in the text, in vocabulary order."""
    lowered = text.lower()
    for pattern, label in _LOCATION_RES:
        if pattern.search(lowered):
            return label
    return None


def leftover_text(text: str) -> Optional[str]:
    """Strip stop words and punctuation; what remains is a substring query."""
    cleaned = _PUNCT_RE.sub(" ", text.lower())
    cleaned = _STOP_RE.sub(" ", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return cleaned or None


def parse(text: str) -> SearchFilter:
    """Extract a SearchFilter from one message. Pure and deterministic."""
    lowered = (text or "").lower()

    if any(word in lowered for word in SAVED_WORDS):
        return SearchFilter(action=Action.SAVED)
    if any(word in lowered for word in SHOW_ALL_WORDS):
        return SearchFilter()

    bedrooms, working = extract_bedrooms(lowered)
    min_price, max_price, working = extract_prices(working)

    return SearchFilter(
        location=extract_location(lowered),
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        free_text=leftover_text(working),
    )


class AbstractFilterExtractor:
    """Interface for turning a chat message into a SearchFilter."""
    name = "abstract"

    async def extract(self, message: str, history: List[ChatTurn], is_follow_up: bool) -> SearchFilter:
        raise NotImplementedError


class PatternFilterExtractor(AbstractFilterExtractor):
    """Regex extractor. Never fails; history and follow-up flag are ignored."""
    name = "pattern"

    async def extract(self, message: str, history: List[ChatTurn], is_follow_up: bool) -> SearchFilter:
        return parse(message)
