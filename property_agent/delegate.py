"""Adapter around the external text-generation service.

The delegate is optional: build_text_generator() returns None when no API key is
configured, and every failure is reported as AIUnavailable / AIParseError so the
resolver can fall back to the pattern parser.
"""
import json
from typing import List, Optional

from openai import AsyncOpenAI

from .config import MAX_TURNS, MODEL_NAME, ai_enabled
from .errors import AIParseError, AIUnavailable
from .models import ChatTurn, SearchFilter
from .parser import AbstractFilterExtractor
from .utils import get_logger, render_history, strip_code_fences

logger = get_logger(__name__)

# Instruction used for the extraction call.
EXTRACTION_PROMPT = (
    "You are analyzing a chat conversation to extract property search filters.\n\n"
    "{context}"
    'Current user message: "{message}"\n\n'
    "{follow_up}"
    "Return ONLY a JSON object with these keys (only include keys that are mentioned):\n"
    '- location (string, e.g. "Miami", "New York")\n'
    '- maxPrice (number, convert "1 million" to 1000000, "500k" to 500000)\n'
    "- minPrice (number)\n"
    "- bedrooms (number)\n"
    '- action (string: "search" or "saved")\n\n'
    'If the user asks to see saved properties, set action to "saved".\n'
    "If user says yes/sure/show me to a previous property query, extract the filters from that previous query."
)

FOLLOW_UP_NOTE = (
    "This appears to be a follow-up/confirmation. If the previous message mentioned a location "
    "or criteria, USE THOSE SAME FILTERS.\n\n"
)


class AbstractTextGenerator:
    """Interface for text-generation services: prompt in, raw text out."""

    async def generate(self, prompt: str) -> str:
        raise NotImplementedError


class OpenAITextGenerator(AbstractTextGenerator):
    """Single-prompt wrapper over the OpenAI chat completions API."""

    def __init__(self, model: str = MODEL_NAME, client: Optional[AsyncOpenAI] = None) -> None:
        self.model = model
        self._client = client or AsyncOpenAI()

    async def generate(self, prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.choices[0].message.content or ""


def build_text_generator() -> Optional[AbstractTextGenerator]:
    """Return the configured generator, or None when AI is disabled."""
    if not ai_enabled():
        logger.info("No OPENAI_API_KEY found - using pattern extraction only")
        return None
    logger.info("AI delegate enabled", extra={"model": MODEL_NAME})
    return OpenAITextGenerator()


def build_extraction_prompt(message: str, history: List[ChatTurn], is_follow_up: bool) -> str:
    rendered = render_history(history, MAX_TURNS)
    context = f"Previous conversation:\n{rendered}\n\n" if rendered else ""
    return EXTRACTION_PROMPT.format(
        context=context,
        message=message,
        follow_up=FOLLOW_UP_NOTE if is_follow_up else "",
    )


def _reject_constant(name: str) -> None:
    raise ValueError(f"non-finite number {name} in delegate response")


def parse_filter_response(text: str) -> SearchFilter:
    """Decode the delegate's raw answer into a SearchFilter or raise AIParseError."""
    cleaned = strip_code_fences(text)
    if not cleaned:
        raise AIParseError("empty response from delegate")
    try:
        data = json.loads(cleaned, parse_constant=_reject_constant)
    except ValueError:
        # Tolerate prose around the object.
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise AIParseError(f"no JSON object in delegate response: {cleaned[:80]!r}") from None
        try:
            data = json.loads(cleaned[start:end + 1], parse_constant=_reject_constant)
        except ValueError as e:
            raise AIParseError(f"invalid JSON from delegate: {e}") from e
    try:
        return SearchFilter.from_dict(data)
    except ValueError as e:
        raise AIParseError(str(e)) from e


class DelegateFilterExtractor(AbstractFilterExtractor):
    """Asks the text-generation delegate for a JSON filter."""
    name = "delegate"

    def __init__(self, generator: Optional[AbstractTextGenerator]) -> None:
        self.generator = generator

    @property
    def available(self) -> bool:
        return self.generator is not None

    async def extract(self, message: str, history: List[ChatTurn], is_follow_up: bool) -> SearchFilter:
        if self.generator is None:
            raise AIUnavailable("no text-generation delegate configured")

        prompt = build_extraction_prompt(message, history, is_follow_up)
        try:
            raw = await self.generator.generate(prompt)
        except Exception as e:
            raise AIUnavailable(f"delegate call failed: {e}") from e

        filters = parse_filter_response(raw)
        logger.info("AI extracted filters", extra={"filters": filters.to_dict()})
        return filters
