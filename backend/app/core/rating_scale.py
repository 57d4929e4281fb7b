"""
Rating scale - fixed 22-step credit scale (AAA best, D worst).
Drives asset sort order and the override vs consensus colour signal.
"""
from __future__ import annotations

import enum

# Full rating scale (best to worst)
RATING_ORDER = [
    "AAA", "AA+", "AA", "AA-",
    "A+", "A", "A-",
    "BBB+", "BBB", "BBB-",
    "BB+", "BB", "BB-",
    "B+", "B", "B-",
    "CCC+", "CCC", "CCC-",
    "CC", "C", "D",
]

_RANKS = {grade: i for i, grade in enumerate(RATING_ORDER)}


class RatingSignal(str, enum.Enum):
    IMPROVED = "improved"
    DOWNGRADED = "downgraded"
    NEUTRAL = "neutral"


def rating_rank(grade: str | None) -> int | None:
    """Index in RATING_ORDER (0 = best). None for labels outside the scale."""
    if grade is None:
        return None
    return _RANKS.get(grade)


def is_known_rating(grade: str | None) -> bool:
    return rating_rank(grade) is not None


def sort_key(grade: str | None) -> tuple[int, int]:
    """Known grades by rank; unknown grades after all of them, tied with each other."""
    rank = rating_rank(grade)
    if rank is None:
        return (1, 0)
    return (0, rank)


def compare_ratings(selected: str | None, consensus: str | None) -> RatingSignal:
    """
    Signal for a selected rating against the consensus.
    Strictly better rank -> IMPROVED, strictly worse -> DOWNGRADED.
    Equal, missing or off-scale labels -> NEUTRAL.
    """
    selected_rank = rating_rank(selected)
    consensus_rank = rating_rank(consensus)
    if selected_rank is None or consensus_rank is None:
        return RatingSignal.NEUTRAL
    if selected_rank < consensus_rank:
        return RatingSignal.IMPROVED
    if selected_rank > consensus_rank:
        return RatingSignal.DOWNGRADED
    return RatingSignal.NEUTRAL
