"""Ordered relaxation of search constraints when a direct match comes back empty.

Rules are tried top to bottom. Each rule drops constraints from the original filter,
re-runs the match and, if it finds anything, explains what was relaxed. When no rule
succeeds the whole catalog is returned, so a conversational search is never empty.
"""
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from .models import MatchResult, Property, SearchFilter
from .catalog import filter_properties
from .utils import get_logger

logger = get_logger(__name__)

FALLBACK_RATIONALE = (
    "I couldn't find exact matches for your criteria. "
    "Try adjusting your filters (e.g., different location or price). 🏠"
)


@dataclass(frozen=True)
class RelaxationRule:
    name: str
    applies: Callable[[SearchFilter], bool]
    relax: Callable[[SearchFilter], SearchFilter]
    explain: Callable[[SearchFilter, List[Property]], str]


def _explain_location_only(f: SearchFilter, results: List[Property]) -> str:
    best = max(p.bedrooms for p in results)
    return (
        f"There are no {f.bedrooms}+ bedroom properties in {f.location}. "
        f"The best option there is a {best} bedroom property. Here's what's available:"
    )


def _explain_bedrooms_only(f: SearchFilter, results: List[Property]) -> str:
    return (
        f"No {f.bedrooms}+ bedroom properties in {f.location or 'that area'}, "
        "but I found some in other locations:"
    )


DEFAULT_RULES: Tuple[RelaxationRule, ...] = (
    # Keep the place, drop the bedroom count (and everything else).
    RelaxationRule(
        name="drop_bedrooms",
        applies=lambda f: f.bedrooms is not None and bool(f.location),
        relax=lambda f: SearchFilter(location=f.location),
        explain=_explain_location_only,
    ),
    # Keep the bedroom count, look everywhere.
    RelaxationRule(
        name="drop_location",
        applies=lambda f: f.bedrooms is not None,
        relax=lambda f: SearchFilter(bedrooms=f.bedrooms),
        explain=_explain_bedrooms_only,
    ),
)


class RelaxationEngine:
    """Runs a direct match, then the relaxation rules, then the full-catalog fallback."""

    def __init__(self, rules: Sequence[RelaxationRule] = DEFAULT_RULES) -> None:
        self.rules = tuple(rules)

    def match(self, filters: SearchFilter, catalog: Sequence[Property]) -> MatchResult:
        direct = filter_properties(catalog, filters)
        if direct:
            return MatchResult(results=direct)

        if filters.has_criteria():
            for rule in self.rules:
                if not rule.applies(filters):
                    continue
                relaxed = filter_properties(catalog, rule.relax(filters))
                if relaxed:
                    logger.info(
                        "Relaxed search",
                        extra={"rule": rule.name, "filters": filters.to_dict(), "count": len(relaxed)},
                    )
                    return MatchResult(results=relaxed, rationale=rule.explain(filters, relaxed), relaxed_by=rule.name)

        logger.info("No match after relaxation, returning full catalog", extra={"filters": filters.to_dict()})
        return MatchResult(results=list(catalog), rationale=FALLBACK_RATIONALE, relaxed_by="fallback")
