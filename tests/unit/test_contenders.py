"""Tests for contender analysis."""

from oddswatch.analysis.contenders import analyse_contenders
from oddswatch.analysis.preprocess import preprocess_race_data
from oddswatch.analysis.store import AlertStore
from oddswatch.models.race import RaceData


def _prep(payload):
    return preprocess_race_data(RaceData.from_dict(payload))


class TestSingleContender:
    def _runners(self, place):
        return [
            {"number": 1, "win": 2.5, "place": 1.2, "index": 3.0},
            {"number": 2, "win": 6.0, "place": place, "index": 8.0, "name": "LUCKY PATCH"},
            {"number": 3, "win": 8.0, "place": 2.5, "index": 7.0},
        ]

    def test_value_pick(self, race_builder):
        store = AlertStore()
        alerts = analyse_contenders(_prep(race_builder(self._runners(1.5))), store)
        assert [a.message for a in alerts] == ["挑戰者 - LUCKY PATCH 今場抵買機會馬"]
        assert alerts[0].priority == 170
        assert (alerts[0].metrics.win_score, alerts[0].metrics.place_score) == (30, 30)
        assert len(store) == 1

    def test_place_too_long(self, race_builder):
        assert analyse_contenders(_prep(race_builder(self._runners(3.0))), AlertStore()) == []


class TestSeveralContenders:
    RUNNERS = [
        {"number": 1, "win": 2.5, "place": 1.2, "index": 3.0},
        {"number": 2, "win": 6.0, "place": 2.0, "index": 8.0, "name": "LUCKY PATCH"},
        {"number": 3, "win": 8.0, "place": 2.5, "index": 10.0, "name": "SILVER ARROW"},
        {"number": 4, "win": 20.0, "place": 5.0},
        {"number": 5, "win": 25.0, "place": 6.0},
    ]
    QUINELLA = {(1, 2): 12.0, (1, 3): 9.0, (2, 4): 20.0, (3, 4): 50.0, (2, 5): 20.0, (3, 5): 50.0}

    def test_against_lone_favourite(self, race_builder):
        data = _prep(race_builder(self.RUNNERS, quinella=self.QUINELLA))
        alerts = analyse_contenders(
            data, AlertStore(), is_only_favourite=True, any_beat_index=True, favourite_horse_number="1",
        )
        assert [a.message for a in alerts] == [
            "3 SILVER ARROW has suspicious Quinella wager as compared to 2 LUCKY PATCH",
        ]
        assert alerts[0].priority == 150
        assert alerts[0].horse_number == "3"

    def test_against_whole_field(self, race_builder):
        # Shorter-priced horse 2 wins the wider contest, which is expected
        data = _prep(race_builder(self.RUNNERS, quinella=self.QUINELLA))
        assert analyse_contenders(data, AlertStore()) == []

    def test_pq_market(self, race_builder):
        data = _prep(race_builder(self.RUNNERS, place_quinella={(1, 2): 4.0, (1, 3): 3.0}))
        alerts = analyse_contenders(
            data, AlertStore(), is_only_favourite=True, any_beat_index=True, favourite_horse_number="1",
        )
        assert [a.message for a in alerts] == [
            "3 SILVER ARROW has suspicious PQ wager as compared to 2 LUCKY PATCH",
        ]
