"""Turns a resolved filter and its match into the assistant's chat message."""
import json
from typing import List, Optional

from .config import ASSISTANT_NAME, MAX_PREVIEWS
from .delegate import AbstractTextGenerator
from .models import MatchResult, Property, SearchFilter
from .utils import format_price, get_logger

logger = get_logger(__name__)

SAVED_REPLY = "Let me fetch your saved properties! 💾"

# Prompt used for the phrasing call.
PHRASING_PROMPT = (
    "You are {assistant}, a friendly real estate assistant chatbot on a property listing website.\n\n"
    "IMPORTANT CONTEXT: When you find properties, they appear in the MAIN GRID on the left side of "
    "the screen (not in this chat). The chat is a floating widget on the right.\n\n"
    'User asked: "{message}"\n'
    "Filters applied: {filters}\n"
    "Properties found: {count}\n"
    "{note}"
    "{previews}\n"
    "Generate a helpful response following these rules:\n"
    "1. Be conversational and friendly with 1-2 relevant emojis\n"
    "2. If properties found: mention the count and say they've been filtered in the main view/grid\n"
    "3. If NO properties found: suggest adjusting criteria (different location, higher budget, fewer beds)\n"
    "4. You can briefly mention 1-2 standout properties from the preview if relevant\n"
    "5. Keep it SHORT (2-3 sentences max)\n"
    '6. NEVER say "below" or "see below" - properties appear in the main grid, not the chat'
)


def _plural(n: int) -> str:
    return "property" if n == 1 else "properties"


def preview_lines(results: List[Property], limit: int = MAX_PREVIEWS) -> str:
    return "\n".join(
        f"• {p.title} in {p.location} - {format_price(p.price)} ({p.bedrooms}BR)" for p in results[:limit]
    )


def template_reply(filters: SearchFilter, match: MatchResult) -> str:
    """Deterministic message for a match, used whenever the delegate is not asked."""
    count = len(match.results)
    unfiltered = not filters.has_criteria() and filters.min_price is None
    if match.relaxed_by == "fallback" and unfiltered:
        return f"Here are all {count} available properties! 🏘️"
    if match.rationale:
        return match.rationale
    if unfiltered:
        return f"Here are all {count} available properties! 🏘️"

    message = f"🎉 Found {count} {_plural(count)}"
    if filters.location:
        message += f" in {filters.location}"
    if filters.bedrooms is not None:
        message += f" with {filters.bedrooms}+ bedrooms"
    if filters.min_price is not None:
        message += f" from {format_price(filters.min_price)}"
    if filters.max_price is not None:
        message += f" under {format_price(filters.max_price)}"
    return message + "!\n\nHere are your matches:"


def fallback_reply(results: List[Property]) -> str:
    """Short message used when the phrasing call fails."""
    if results:
        return f"Found {len(results)} {_plural(len(results))} for you! Check out the filtered results in the main grid. 🏠"
    return "No properties match those criteria. Try adjusting your search! 🔍"


def build_phrasing_prompt(message: str, filters: SearchFilter, match: MatchResult) -> str:
    previews = preview_lines(match.results)
    return PHRASING_PROMPT.format(
        assistant=ASSISTANT_NAME,
        message=message,
        filters=json.dumps(filters.to_dict()),
        count=len(match.results),
        note=f"Search note: {match.rationale}\n" if match.rationale else "",
        previews=f"\nTop matches:\n{previews}\n" if previews else "",
    )


class ResponseComposer:
    """Phrases replies through the delegate when allowed, else via templates."""

    def __init__(self, generator: Optional[AbstractTextGenerator] = None) -> None:
        self.generator = generator

    async def compose(
        self,
        message: str,
        filters: SearchFilter,
        match: MatchResult,
        use_delegate: bool = True,
    ) -> str:
        if self.generator is None or not use_delegate:
            return template_reply(filters, match)

        prompt = build_phrasing_prompt(message, filters, match)
        try:
            text = (await self.generator.generate(prompt)).strip()
        except Exception as e:
            logger.warning("AI response error: %s", e)
            return fallback_reply(match.results)
        if not text:
            return fallback_reply(match.results)
        return text
