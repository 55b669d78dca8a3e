"""Which of two horses the combination market prefers.

For each candidate second leg L, compare the odds of (A, L) against (B, L).
Shorter odds for A count +1, shorter odds for B count -1. Legs where either
combination is missing or priced at zero do not count, and neither do equal
prices, so swapping A and B always mirrors the result.
"""

import logging
from typing import Iterable, Mapping, Optional, Union

logger = logging.getLogger(__name__)

OddsLookup = Mapping[frozenset, float]


def odds_lookup(pairs: Iterable) -> dict[frozenset, float]:
    """Index pair records (raw or preprocessed) by unordered horse pair."""
    lookup = {}
    for pair in pairs:
        odds = getattr(pair, "actual_odds", None)
        if odds is None:
            odds = pair.odds
        lookup[frozenset((pair.horse_number_1, pair.horse_number_2))] = odds
    return lookup


def _as_lookup(odds: Union[OddsLookup, Iterable]) -> OddsLookup:
    return odds if isinstance(odds, Mapping) else odds_lookup(odds)


def dominance_score(first_leg_a: str, first_leg_b: str, second_legs: Iterable[str], odds: OddsLookup) -> int:
    score = 0
    for leg in second_legs:
        if leg in (first_leg_a, first_leg_b):
            continue
        odds_a = odds.get(frozenset((first_leg_a, leg)), 0)
        odds_b = odds.get(frozenset((first_leg_b, leg)), 0)
        if odds_a <= 0 or odds_b <= 0:
            continue
        if odds_a < odds_b:
            score += 1
        elif odds_a > odds_b:
            score -= 1
    return score


def _dominant(first_leg_a: str, first_leg_b: str, second_legs: Iterable[str], odds) -> Optional[str]:
    score = dominance_score(first_leg_a, first_leg_b, second_legs, _as_lookup(odds))
    if score > 0:
        return first_leg_a
    if score < 0:
        return first_leg_b
    return None


def compare_quinella_dominance(first_leg_a: str, first_leg_b: str, second_legs: Iterable[str],
                               quinella_odds) -> Optional[str]:
    """Dominant first leg in the quinella market, or None on a tie / no comparisons.

    ``quinella_odds`` is either a pair list or an ``odds_lookup`` mapping.
    """
    return _dominant(first_leg_a, first_leg_b, second_legs, quinella_odds)


def compare_pq_dominance(first_leg_a: str, first_leg_b: str, second_legs: Iterable[str],
                         pq_odds) -> Optional[str]:
    """Same contest in the place-quinella market."""
    return _dominant(first_leg_a, first_leg_b, second_legs, pq_odds)
