"""Tests for prediction-slot alerts."""

from oddswatch.analysis.predictions import create_prediction_alerts, describe_horse
from oddswatch.analysis.preprocess import preprocess_race_data
from oddswatch.analysis.store import AlertStore
from oddswatch.models.race import RaceData


def _prep(payload):
    return preprocess_race_data(RaceData.from_dict(payload))


class TestPredictionAlerts:
    def test_one_alert_per_filled_slot(self, sample_race_payload):
        store = AlertStore()
        alerts = create_prediction_alerts(_prep(sample_race_payload), store)
        assert [(a.message.split(" - ")[0], a.horse_number) for a in alerts] == [
            ("DBL1", "1"), ("DBL2", "2"), ("Q1", "1"), ("Q2", "3"), ("QP1", "2"), ("RTG1", "1"), ("RTG2", "4"),
        ]
        assert len(store) == 7

    def test_double_slot(self, sample_race_payload):
        alerts = create_prediction_alerts(_prep(sample_race_payload), AlertStore())
        dbl1 = alerts[0]
        assert dbl1.priority == 170
        assert (dbl1.metrics.win_score, dbl1.metrics.place_score) == (50, 60)
        assert dbl1.message == (
            "DBL1 - 1 GOLDEN SIXTY: Current odds 2.5 vs expected 3 (16.67%). Last race: 4 odds, finished 2"
        )

    def test_rating_slot_uses_score(self, sample_race_payload):
        alerts = create_prediction_alerts(_prep(sample_race_payload), AlertStore())
        rtg1 = next(a for a in alerts if a.message.startswith("RTG1"))
        assert rtg1.priority == 160
        assert rtg1.metrics.win_score == 82.5
        assert rtg1.metrics.place_score == 60
        assert rtg1.message.endswith(" !Score = 82.50")

    def test_no_predictions(self, race_builder):
        data = _prep(race_builder([{"number": 1, "win": 3.0, "place": 1.4}]))
        store = AlertStore()
        assert create_prediction_alerts(data, store) == []
        assert len(store) == 0

    def test_unknown_horse_skipped(self, race_builder):
        payload = race_builder(
            [{"number": 1, "win": 3.0, "place": 1.4, "index": 4.0}],
            predictions={"DBL1": "12", "Q1": "1"},
        )
        alerts = create_prediction_alerts(_prep(payload), AlertStore())
        assert [a.message.split(" - ")[0] for a in alerts] == ["Q1"]

    def test_horse_without_detail_skipped(self, race_builder):
        payload = race_builder(
            [{"number": 1, "win": 3.0, "place": 1.4, "detail": False}],
            predictions={"DBL1": "1"},
        )
        assert create_prediction_alerts(_prep(payload), AlertStore()) == []

    def test_placeholder_metadata_still_reported(self, race_builder):
        payload = race_builder(
            [{"number": 1, "win": 3.0, "place": 1.4}, {"number": 2, "win": 5.0, "place": 1.8}],
            predictions={"DBL1": "1", "Q1": "2"},
        )
        payload["horseInfo"]["synthetic"] = True
        alerts = create_prediction_alerts(_prep(payload), AlertStore())
        assert [(a.message.split(" - ")[0], a.horse_number) for a in alerts] == [("DBL1", "1"), ("Q1", "2")]
        assert alerts[0].message.startswith("DBL1 - 1 Unknown: Current odds 3")

    def test_rating_without_other_slots(self, race_builder):
        payload = race_builder(
            [{"number": 2, "win": 5.0, "place": 1.8, "index": 6.0}],
            predictions={"RTG1": "2", "score1": "70"},
        )
        alerts = create_prediction_alerts(_prep(payload), AlertStore())
        assert len(alerts) == 1
        assert alerts[0].metrics.win_score == 70


class TestDescribeHorse:
    def test_missing_index(self, race_builder):
        horse = _prep(race_builder([{"number": 1, "win": 3.0, "place": 1.4, "index": 0}])).horse("1")
        assert "vs expected 0 (0.00%)" in describe_horse(horse)
