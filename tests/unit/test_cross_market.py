"""Tests for win vs combination-market comparisons."""

from oddswatch.analysis.cross_market import (
    analyse_expected_quinella,
    analyse_win_place_quinella,
    analyse_win_quinella,
)
from oddswatch.analysis.groups import CONTENDERS
from oddswatch.analysis.preprocess import preprocess_race_data
from oddswatch.analysis.store import AlertStore
from oddswatch.models.race import RaceData

RUNNERS = [
    {"number": 1, "win": 2.5, "place": 1.2},
    {"number": 2, "win": 6.0, "place": 2.0},
    {"number": 3, "win": 8.0, "place": 2.5},
]


def _prep(race_builder, runners=RUNNERS, **kwargs):
    return preprocess_race_data(RaceData.from_dict(race_builder(runners, **kwargs)))


def _messages(store):
    return [(a.horse_number, a.message) for a in store.get_all(sorted=False)]


# ──────────────────────────────────────────────
# Group comparisons
# ──────────────────────────────────────────────

class TestWinQuinella:
    def test_longer_horse_with_better_quinella(self, race_builder):
        data = _prep(race_builder, quinella={(1, 2): 10.0, (1, 3): 8.0, (2, 3): 25.0})
        store = AlertStore()
        analyse_win_quinella(data, data.category_members(CONTENDERS), store)
        assert _messages(store) == [("3", "Q better")]
        alert = store.get_all()[0]
        assert (alert.priority, alert.metrics.win_score, alert.metrics.place_score) == (20, 2, 2)

    def test_consistent_prices(self, race_builder):
        data = _prep(race_builder, quinella={(1, 2): 8.0, (1, 3): 10.0})
        store = AlertStore()
        analyse_win_quinella(data, data.category_members(CONTENDERS), store)
        assert _messages(store) == [("2", "Q odds OK")]

    def test_zero_odds_ignored(self, race_builder):
        data = _prep(race_builder, quinella={(1, 2): 0, (1, 3): 8.0})
        store = AlertStore()
        analyse_win_quinella(data, data.category_members(CONTENDERS), store)
        assert len(store) == 0

    def test_single_horse_group(self, race_builder):
        data = _prep(race_builder, quinella={(1, 2): 8.0})
        store = AlertStore()
        analyse_win_quinella(data, [data.horse("2")], store)
        assert _messages(store) == [("2", "only horse in group with reasonable odds")]

    def test_no_pairs(self, race_builder):
        data = _prep(race_builder)
        store = AlertStore()
        analyse_win_quinella(data, data.category_members(CONTENDERS), store)
        assert len(store) == 0


class TestWinPlaceQuinella:
    def test_pq_better(self, race_builder):
        data = _prep(race_builder, place_quinella={(1, 2): 4.0, (1, 3): 3.5})
        store = AlertStore()
        analyse_win_place_quinella(data, data.category_members(CONTENDERS), store)
        assert _messages(store) == [("3", "PQ combination better")]
        alert = store.get_all()[0]
        assert (alert.metrics.win_score, alert.metrics.place_score) == (0, 2)

    def test_single_horse_group(self, race_builder):
        data = _prep(race_builder, place_quinella={(1, 2): 4.0})
        store = AlertStore()
        analyse_win_place_quinella(data, [data.horse("3")], store)
        assert _messages(store) == [("3", "Only horse in group with reasonable PQ odds")]


# ──────────────────────────────────────────────
# Expected quinella
# ──────────────────────────────────────────────

class TestExpectedQuinella:
    RUNNERS = [
        {"number": 1, "win": 4.0, "place": 1.6},
        {"number": 2, "win": 6.0, "place": 2.1},
        {"number": 3, "win": 30.0, "place": 7.0},
        {"number": 4, "win": 0, "place": 0},
    ]

    def test_pair_reports(self, race_builder):
        data = _prep(race_builder, self.RUNNERS, quinella={(1, 2): 10.0, (1, 3): 100.0, (2, 3): 200.0, (1, 4): 0})
        store = AlertStore()
        analyse_expected_quinella(data, store)
        reports = [a for a in store.get_all(sorted=False) if a.message.startswith("Expected Q")]
        assert [a.horse_number for a in reports] == ["1-2", "1-3", "2-3"]
        assert reports[0].message == "Expected Q: 16.40, Actual Q: 10.00, Residual: 6.40, Z-score: 0.27"
        assert reports[0].priority == 30
        assert reports[0].metrics.fair_odds is not None

    def test_favourable_partners(self, race_builder):
        data = _prep(race_builder, self.RUNNERS, quinella={(1, 2): 10.0, (1, 3): 100.0, (2, 3): 200.0})
        store = AlertStore()
        analyse_expected_quinella(data, store)
        summaries = [(a.horse_number, a.message) for a in store.get_all(sorted=False) if a.priority == 140]
        assert summaries == [("1", "Q - 1 瓣 Q 拖 2 有飛"), ("2", "Q - 1 瓣 Q 拖 1 有飛")]

    def test_partners_sorted_numerically(self, race_builder):
        runners = [
            {"number": 1, "win": 4.0, "place": 1.6},
            {"number": 9, "win": 3.0, "place": 1.4},
            {"number": 10, "win": 3.0, "place": 1.4},
        ]
        data = _prep(race_builder, runners, quinella={(1, 10): 5.0, (1, 9): 5.0})
        store = AlertStore()
        analyse_expected_quinella(data, store)
        summary = next(a for a in store.get_all() if a.horse_number == "1" and a.priority == 140)
        assert summary.message == "Q - 2 瓣 Q 拖 9 + 10 有飛"
