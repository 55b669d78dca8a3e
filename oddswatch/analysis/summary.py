"""Per-horse roll-up of an analysis run."""

from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Optional

from oddswatch.analysis.preprocess import PreprocessedRaceData
from oddswatch.models.alert import AlertMessage, Purpose


@dataclass
class HorseSummary:
    horse_number: str
    horse_name: str
    win: float
    place: float
    category: Optional[str]
    win_score: float = 0.0
    place_score: float = 0.0
    is_win_favourite: bool = False
    is_place_favourite: bool = False
    is_q_favourite: bool = False
    is_pq_favourite: bool = False
    is_predicted: bool = False
    prediction_types: list[str] = field(default_factory=list)
    lead_position: Optional[float] = None
    wide_position: Optional[float] = None
    analysis_notes: list[str] = field(default_factory=list)

    @property
    def total_score(self) -> float:
        return self.win_score + self.place_score

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def summarise_horses(data: PreprocessedRaceData, alerts: Iterable[AlertMessage]) -> list[HorseSummary]:
    """Aggregate scores and notes per runner, in race-card order.

    Only alerts addressed to a single horse count; combination and run-level
    alerts are left out. Notes keep the alert order (highest priority first
    when ``alerts`` comes from the store) and skip blank highlight text.
    """
    race_data = data.race_data
    predictions = race_data.predictions if race_data else None
    pace = race_data.pace_data if race_data else None

    summaries = {}
    for h in data.horses:
        summary = HorseSummary(
            horse_number=h.horse_number,
            horse_name=h.horse_name,
            win=h.win,
            place=h.place,
            category=h.category,
            is_win_favourite=h.is_win_favourite,
            is_place_favourite=h.is_place_favourite,
            is_q_favourite=h.is_q_favourite,
            is_pq_favourite=h.is_pq_favourite,
        )
        if predictions is not None:
            summary.prediction_types = predictions.slots_for(h.horse_number)
            summary.is_predicted = bool(summary.prediction_types)
        if pace is not None:
            position = pace.position_of(h.horse_number)
            if position is not None:
                summary.lead_position = position.lead_position
                summary.wide_position = position.wide_position
        summaries[h.horse_number] = summary

    for alert in alerts:
        summary = summaries.get(alert.horse_number)
        if summary is None:
            continue
        summary.win_score += alert.metrics.win_score
        summary.place_score += alert.metrics.place_score
        if alert.purpose is not Purpose.HIGHLIGHT and alert.message.strip():
            summary.analysis_notes.append(alert.message)

    return list(summaries.values())
