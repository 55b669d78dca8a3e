"""Win-odds categories and coarse odds buckets.

The category table overlaps on purpose: a horse at 18 lies in both LongShots
(10-20) and VLongShots (15-35) and a horse at 5 lies in both Favourites and
Contenders. Lookup walks the table in declaration order and the first group
containing the odds wins, so boundary and overlap values always resolve to the
earlier group.
"""

from dataclasses import dataclass
from typing import Optional

FAVOURITES = "Favourites"
CONTENDERS = "Contenders"
LONG_SHOTS = "LongShots"
VERY_LONG_SHOTS = "VLongShots"
OUTSIDERS = "Outsiders"


@dataclass(frozen=True)
class OddsGroup:
    name: str
    category: str
    low: float
    high: float

    def contains(self, win: float) -> bool:
        return self.low <= win <= self.high


DEFAULT_GROUPS: tuple[OddsGroup, ...] = (
    OddsGroup("Group 1 (Win <=5)", FAVOURITES, 1, 5),
    OddsGroup("Group 2 (5 < Win <=10)", CONTENDERS, 5, 10),
    OddsGroup("Group 3 (10 < Win <=20)", LONG_SHOTS, 10, 20),
    OddsGroup("Group 4 (15 < Win <=35)", VERY_LONG_SHOTS, 15, 35),
    OddsGroup("Group 5 (Win >30)", OUTSIDERS, 30, float("inf")),
)

CATEGORIES: tuple[str, ...] = tuple(g.category for g in DEFAULT_GROUPS)


def category_for_win_odds(win: float) -> Optional[str]:
    """First group in DEFAULT_GROUPS whose range contains ``win``.

    Withdrawn horses (win <= 0) and odds below 1.0 have no category.
    """
    for group in DEFAULT_GROUPS:
        if group.contains(win):
            return group.category
    return None


# Coarse buckets for "same price range as last start" (inclusive both ends;
# a shared edge resolves to the lower bucket).
WIN_RANGE_BOUNDARIES: tuple[tuple[float, float], ...] = (
    (1, 3),
    (3, 5),
    (5, 7),
    (7, 10),
    (10, 15),
    (15, 20),
    (20, 30),
    (30, 60),
    (60, 999),
)


def win_range_index(odds: float) -> Optional[int]:
    for i, (low, high) in enumerate(WIN_RANGE_BOUNDARIES):
        if low <= odds <= high:
            return i
    return None


def is_same_range(odds_a: float, odds_b: float) -> bool:
    """True when both odds land in the same bucket.

    Two out-of-table values (e.g. 0 and 0) also compare equal.
    """
    return win_range_index(odds_a) == win_range_index(odds_b)
