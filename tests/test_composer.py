import asyncio

from property_agent.composer import (
    ResponseComposer,
    build_phrasing_prompt,
    fallback_reply,
    template_reply,
)
from property_agent.models import MatchResult, SearchFilter
from property_agent.relaxation import FALLBACK_RATIONALE


def test_template_for_unfiltered_search(properties):
    message = template_reply(SearchFilter(), MatchResult(results=properties))
    assert message == "Here are all 6 available properties! 🏘️"


def test_template_for_unfiltered_fallback(properties):
    match = MatchResult(results=properties, rationale=FALLBACK_RATIONALE, relaxed_by="fallback")
    assert template_reply(SearchFilter(free_text="castle"), match).startswith("Here are all 6")


def test_template_uses_rationale_when_relaxed(properties):
    match = MatchResult(results=properties[:1], rationale="Relaxed!", relaxed_by="drop_location")
    assert template_reply(SearchFilter(bedrooms=2), match) == "Relaxed!"


def test_template_lists_applied_criteria(properties):
    f = SearchFilter(location="Miami", bedrooms=2, min_price=300000, max_price=800000)
    message = template_reply(f, MatchResult(results=properties[:3]))
    assert message == (
        "🎉 Found 3 properties in Miami with 2+ bedrooms from $300,000 under $800,000!"
        "\n\nHere are your matches:"
    )


def test_fallback_reply_depends_on_results(properties):
    assert fallback_reply(properties).startswith("Found 6 properties")
    assert fallback_reply(properties[:1]).startswith("Found 1 property for you")
    assert fallback_reply([]) == "No properties match those criteria. Try adjusting your search! 🔍"


def test_phrasing_prompt_limits_previews_and_adds_note(properties):
    match = MatchResult(results=properties, rationale="No 5+ bedroom properties here", relaxed_by="drop_location")
    prompt = build_phrasing_prompt("5 beds", SearchFilter(bedrooms=5), match)
    assert prompt.count("• ") == 3
    assert "Search note: No 5+ bedroom properties here" in prompt
    assert 'Filters applied: {"action": "search", "bedrooms": 5}' in prompt
    assert 'NEVER say "below"' in prompt


def test_compose_without_generator_uses_template(properties):
    composer = ResponseComposer(None)
    text = asyncio.run(composer.compose("hi", SearchFilter(), MatchResult(results=properties)))
    assert text == "Here are all 6 available properties! 🏘️"


def test_compose_respects_use_delegate_flag(properties, fake_generator):
    generator = fake_generator(["should not be used"])
    composer = ResponseComposer(generator)
    asyncio.run(composer.compose("hi", SearchFilter(), MatchResult(results=properties), use_delegate=False))
    assert generator.prompts == []


def test_compose_blank_delegate_text_falls_back(properties, fake_generator):
    composer = ResponseComposer(fake_generator(["   "]))
    text = asyncio.run(composer.compose("hi", SearchFilter(), MatchResult(results=properties)))
    assert text.startswith("Found 6 properties for you!")
