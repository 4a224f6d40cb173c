"""
Filter and search over the challenge collection.

This is a pure computation module with no I/O. Every predicate is applied
with logical AND and the original collection order is always preserved.
"""

from collections.abc import Iterable, Sequence

from ril.domain.constants import ALL
from ril.domain.models import Challenge, FilterCriteria


def matches_category(challenge: Challenge, category: str) -> bool:
    return category == ALL or challenge.category == category


def matches_difficulty(challenge: Challenge, difficulty: str) -> bool:
    return difficulty == ALL or challenge.difficulty == difficulty


def matches_query(challenge: Challenge, query: str) -> bool:
    """Case-insensitive substring match against title or description."""
    if not query:
        return True
    q = query.lower()
    return q in challenge.title.lower() or q in challenge.description.lower()


def matches(challenge: Challenge, criteria: FilterCriteria) -> bool:
    return (
        matches_category(challenge, criteria.category)
        and matches_difficulty(challenge, criteria.difficulty)
        and matches_query(challenge, criteria.query)
    )


def filter_challenges(
    challenges: Iterable[Challenge], criteria: FilterCriteria
) -> list[Challenge]:
    """
    Compute the visible subset for the given criteria.

    Args:
        challenges: The full ordered collection.
        criteria: Active category/difficulty/query selection.

    Returns:
        Ordered subsequence of `challenges`. An empty list means no matches.
    """
    return [c for c in challenges if matches(c, criteria)]


def find_challenge(challenges: Sequence[Challenge], challenge_id: int) -> Challenge | None:
    for c in challenges:
        if c.id == challenge_id:
            return c
    return None
