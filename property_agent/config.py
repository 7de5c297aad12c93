import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# .env from the working directory (or a parent) fills in unset variables before they are read.
load_dotenv(find_dotenv(usecwd=True))

MODEL_NAME = os.getenv("PROPERTY_AGENT_MODEL", "gpt-4.1-mini")
MAX_TURNS = 6 # Maximum number of recent user/assistant turns sent to the extraction prompt.
MAX_PREVIEWS = 3 # Number of matched listings described to the phrasing prompt.
ASSISTANT_NAME = "Mira"

SMALL_PRICE_THRESHOLD = 1000 # Bare amounts below this are read as thousands ("under 500" -> 500,000).

STATE_TTL_SECONDS = 1800 # How long a session's last filters stay usable for follow-ups.
STATE_MAX_SESSIONS = 1000 # Oldest sessions are evicted past this size.
DEFAULT_SESSION_ID = "default"

CATALOG_PATH = Path(
    os.getenv("PROPERTY_AGENT_CATALOG", Path(__file__).resolve().parent / "data" / "properties.json")
)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def ai_enabled() -> bool:
    """True when an API key is present and the delegate was not switched off."""
    disabled = os.getenv("PROPERTY_AGENT_DISABLE_AI", "").strip().lower() in {"1", "true", "yes"}
    return bool(os.getenv("OPENAI_API_KEY")) and not disabled
