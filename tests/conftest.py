from typing import List, Union

import pytest

from property_agent.catalog import Catalog
from property_agent.delegate import AbstractTextGenerator
from property_agent.models import Property


def _listing(id, title, location, price, bedrooms, amenities):
    return Property(
        id=id,
        title=title,
        location=location,
        price=price,
        bedrooms=bedrooms,
        bathrooms=1,
        size=1000,
        amenities=list(amenities),
    )


@pytest.fixture()
def properties():
    return [
        _listing(1, "Brickell Condo", "Miami, FL", 450000, 2, ["Pool", "Gym"]),
        _listing(2, "Grove Family House", "Miami, FL", 780000, 4, ["Garden"]),
        _listing(3, "Wynwood Loft", "Miami, FL", 395000, 3, ["Rooftop"]),
        _listing(4, "East Austin Modern", "Austin, TX", 520000, 3, ["Patio"]),
        _listing(5, "South Congress Studio", "Austin, TX", 240000, 1, ["Gym"]),
        _listing(6, "Brooklyn Brownstone", "New York, NY", 2100000, 5, ["Fireplace"]),
    ]


@pytest.fixture()
def catalog(properties):
    return Catalog(properties)


class FakeGenerator(AbstractTextGenerator):
    """Replays canned responses; an Exception in the list is raised instead."""

    def __init__(self, responses: List[Union[str, Exception]]) -> None:
        self.responses = list(responses)
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise RuntimeError("no canned response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture()
def fake_generator():
    return FakeGenerator
