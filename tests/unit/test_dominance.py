"""Tests for combination-market dominance."""

from oddswatch.analysis.dominance import (
    compare_pq_dominance,
    compare_quinella_dominance,
    dominance_score,
    odds_lookup,
)
from oddswatch.models.race import QuinellaPair


def _lookup(**combos):
    """_lookup(a1_3=10.0) -> {frozenset({"1", "3"}): 10.0}"""
    out = {}
    for key, odds in combos.items():
        a, b = key[1:].split("_")
        out[frozenset((a, b))] = odds
    return out


class TestDominance:
    def test_shorter_combos_win(self):
        odds = _lookup(a1_3=10.0, a2_3=15.0, a1_4=20.0, a2_4=25.0)
        assert compare_quinella_dominance("1", "2", ["3", "4"], odds) == "1"

    def test_order_independent(self):
        odds = _lookup(a1_3=10.0, a2_3=15.0, a1_4=30.0, a2_4=25.0, a1_5=12.0, a2_5=18.0)
        assert compare_quinella_dominance("1", "2", ["3", "4", "5"], odds) == "1"
        assert compare_quinella_dominance("2", "1", ["3", "4", "5"], odds) == "1"
        assert dominance_score("1", "2", ["3", "4", "5"], odds) == -dominance_score("2", "1", ["3", "4", "5"], odds)

    def test_equal_odds_do_not_count(self):
        odds = _lookup(a1_3=10.0, a2_3=10.0)
        assert dominance_score("1", "2", ["3"], odds) == 0
        assert compare_quinella_dominance("1", "2", ["3"], odds) is None

    def test_tie_is_none(self):
        odds = _lookup(a1_3=10.0, a2_3=15.0, a1_4=30.0, a2_4=25.0)
        assert compare_pq_dominance("1", "2", ["3", "4"], odds) is None

    def test_missing_and_zero_combos_skipped(self):
        odds = _lookup(a1_3=10.0, a1_4=0, a2_4=5.0)
        assert compare_quinella_dominance("1", "2", ["3", "4", "5"], odds) is None

    def test_legs_equal_to_contestants_skipped(self):
        odds = _lookup(a1_2=5.0, a1_3=10.0, a2_3=15.0)
        assert dominance_score("1", "2", ["1", "2", "3"], odds) == 1

    def test_accepts_pair_list(self):
        pairs = [QuinellaPair("1", "3", 12.0), QuinellaPair("3", "2", 8.0)]
        assert compare_pq_dominance("1", "2", ["3"], pairs) == "2"

    def test_odds_lookup_is_unordered(self):
        lookup = odds_lookup([QuinellaPair("3", "1", 12.0)])
        assert lookup[frozenset(("1", "3"))] == 12.0
