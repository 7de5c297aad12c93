from property_agent.models import SearchFilter
from property_agent.relaxation import FALLBACK_RATIONALE, RelaxationEngine, RelaxationRule


def ids(result):
    return [p.id for p in result.results]


def test_direct_match_has_no_rationale(properties):
    result = RelaxationEngine().match(SearchFilter(location="Miami", bedrooms=3), properties)
    assert ids(result) == [2, 3]
    assert result.rationale == ""
    assert result.relaxed_by is None


def test_drops_bedrooms_and_reports_best_in_location(properties):
    result = RelaxationEngine().match(SearchFilter(location="Austin", bedrooms=5), properties)
    assert ids(result) == [4, 5]
    assert result.relaxed_by == "drop_bedrooms"
    assert "5+ bedroom" in result.rationale
    assert "Austin" in result.rationale
    assert "3 bedroom" in result.rationale


def test_drops_location_when_location_has_nothing(properties):
    result = RelaxationEngine().match(SearchFilter(location="Boston", bedrooms=5), properties)
    assert ids(result) == [6]
    assert result.relaxed_by == "drop_location"
    assert result.rationale.startswith("No 5+ bedroom properties in Boston")


def test_drops_other_constraints_when_only_bedrooms_survive(properties):
    result = RelaxationEngine().match(SearchFilter(bedrooms=5, max_price=1_000_000), properties)
    assert ids(result) == [6]
    assert "that area" in result.rationale


def test_falls_back_to_full_catalog(properties):
    result = RelaxationEngine().match(SearchFilter(bedrooms=9), properties)
    assert ids(result) == [p.id for p in properties]
    assert result.rationale == FALLBACK_RATIONALE
    assert result.relaxed_by == "fallback"


def test_price_only_miss_falls_back_to_full_catalog(properties):
    result = RelaxationEngine().match(SearchFilter(location="Miami", max_price=100_000), properties)
    assert len(result.results) == len(properties)
    assert result.relaxed_by == "fallback"


def test_min_price_only_miss_falls_back_to_full_catalog(properties):
    result = RelaxationEngine().match(SearchFilter(min_price=10**9), properties)
    assert len(result.results) == len(properties)


def test_empty_filter_matches_everything(properties):
    result = RelaxationEngine().match(SearchFilter(), properties)
    assert len(result.results) == len(properties)
    assert result.rationale == ""


def test_custom_rules_are_tried_in_order(properties):
    drop_price = RelaxationRule(
        name="drop_price",
        applies=lambda f: f.max_price is not None,
        relax=lambda f: f.copy(max_price=None),
        explain=lambda f, results: f"{len(results)} over budget",
    )
    engine = RelaxationEngine(rules=[drop_price])
    result = engine.match(SearchFilter(location="Miami", max_price=100_000), properties)
    assert ids(result) == [1, 2, 3]
    assert result.rationale == "3 over budget"
    assert result.relaxed_by == "drop_price"


def test_catalog_is_not_mutated(properties):
    before = list(properties)
    RelaxationEngine().match(SearchFilter(bedrooms=9), properties)
    assert properties == before
