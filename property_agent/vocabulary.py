"""Word lists used by the lexical parser and the follow-up detector."""
from typing import Dict, Tuple

# Colloquial name or abbreviation -> canonical location label.
# Order matters: the first key found in the text wins.
LOCATION_MAP: Dict[str, str] = {
    "new york": "New York",
    "nyc": "New York",
    "ny": "New York",
    "miami": "Miami",
    "los angeles": "Los Angeles",
    "la": "Los Angeles",
    "austin": "Austin",
    "san francisco": "San Francisco",
    "sf": "San Francisco",
    "chicago": "Chicago",
    "dallas": "Dallas",
    "seattle": "Seattle",
    "boston": "Boston",
}

BEDROOM_WORDS: Tuple[str, ...] = ("bedrooms", "bedroom", "beds", "bed", "bhk", "br", "rk", "b")

CEILING_WORDS: Tuple[str, ...] = ("less than", "up to", "upto", "under", "below", "budget", "max", "<")
FLOOR_WORDS: Tuple[str, ...] = ("more than", "at least", "over", "above", "from", "min", ">")

# Unit suffix -> multiplier.
PRICE_UNITS: Dict[str, int] = {
    "k": 1_000,
    "thousand": 1_000,
    "m": 1_000_000,
    "million": 1_000_000,
    "lac": 100_000,
    "lacs": 100_000,
    "lakh": 100_000,
    "lakhs": 100_000,
}

SAVED_WORDS: Tuple[str, ...] = ("saved", "bookmark", "my properties", "favorites", "favourites")
SHOW_ALL_WORDS: Tuple[str, ...] = ("all properties", "show all", "everything")

# Removed from the leftover text before it is used as a substring query.
STOP_WORDS: Tuple[str, ...] = (
    "in", "at", "for", "from", "the", "with", "and", "a", "an", "show", "me", "find", "get",
    "looking", "want", "need", "properties", "property", "homes", "home", "house",
    "houses", "apartment", "apartments", "flat", "flats",
)

# Leading words that mark a short confirmation of the previous turn.
AFFIRMATION_WORDS: Tuple[str, ...] = (
    "yes", "yeah", "yep", "sure", "ok", "okay", "please", "show me", "show",
    "let's see", "go ahead", "proceed",
)
