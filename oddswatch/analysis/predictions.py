"""Alerts for externally supplied picks (double, quinella, PQ and rating slots)."""

import logging
from typing import Optional

from oddswatch.analysis.preprocess import PreprocessedHorse, PreprocessedRaceData
from oddswatch.analysis.store import AlertStore
from oddswatch.models.alert import AlertMessage, Purpose, create_alert
from oddswatch.models.race import Predictions, format_odds

logger = logging.getLogger(__name__)

# slot -> (priority, win score, place score); RTG win scores come from the rating
SLOT_WEIGHTS: dict[str, tuple[int, float, float]] = {
    "DBL1": (170, 50, 60),
    "DBL2": (170, 50, 60),
    "DBL3": (160, 40, 30),
    "Q1": (170, 50, 60),
    "Q2": (170, 50, 60),
    "Q3": (160, 40, 30),
    "Q4": (160, 40, 30),
    "QP1": (170, 50, 60),
    "QP2": (170, 50, 60),
    "QP3": (160, 40, 30),
    "QP4": (160, 40, 30),
    "RTG1": (160, 0, 60),
    "RTG2": (160, 0, 30),
    "RTG3": (160, 0, 60),
}


def describe_horse(horse: PreprocessedHorse) -> str:
    """One-line odds-vs-index summary used in prediction messages."""
    index = horse.race_day_index
    pct = (index - horse.win) / index * 100 if index > 0 else 0.0
    return (
        f"{horse.horse_number} {horse.horse_name}: Current odds {format_odds(horse.win)} "
        f"vs expected {format_odds(index)} ({pct:.2f}%). "
        f"Last race: {format_odds(horse.last_win)} odds, finished {horse.last_position}"
    )


def prediction_alert(slot: str, data: PreprocessedRaceData, predictions: Predictions) -> Optional[AlertMessage]:
    horse_number = predictions.horse_for(slot)
    if horse_number is None:
        return None
    horse = data.horse(horse_number)
    # Placeholder metadata rows still count; only a horse with no row is skipped
    if horse is None or data.race_data.horse_info.find(horse_number) is None:
        logger.debug("Skipping %s: horse %s not in race", slot, horse_number)
        return None

    priority, win_score, place_score = SLOT_WEIGHTS[slot]
    message = f"{slot} - {describe_horse(horse)}"
    if slot.startswith("RTG"):
        win_score = predictions.scores.get(slot, 0.0)
        message += f" !Score = {win_score:.2f}"
    return create_alert(priority, horse_number, Purpose.ANALYZE, message, win_score, place_score)


def create_prediction_alerts(data: PreprocessedRaceData, store: AlertStore) -> list[AlertMessage]:
    """One alert per filled prediction slot. No predictions, no alerts."""
    predictions = data.race_data.predictions if data.race_data else None
    if predictions is None:
        return []
    alerts = []
    for slot in SLOT_WEIGHTS:
        alert = prediction_alert(slot, data, predictions)
        if alert is not None:
            alerts.append(alert)
    store.add_many(alerts)
    return alerts
