"""JSON export of an analysis run (findings at or above a priority threshold)."""

from datetime import datetime
from typing import Any, Iterable, Optional

from oddswatch.config import hk_now
from oddswatch.models.alert import AlertMessage
from oddswatch.models.race import RaceData


def export_filename(race_data: RaceData, priority_threshold: int) -> str:
    info = race_data.race_info
    return f"analysis-p{priority_threshold}-{info.date}-{info.race_number}.json"


def build_export(
    race_data: RaceData,
    alerts: Iterable[AlertMessage],
    priority_threshold: int,
    analysed_at: Optional[datetime] = None,
) -> dict[str, Any]:
    """Export document: metadata, findings with ``priority >= priority_threshold``, horse info.

    Horse info is passed through in its source shape so downstream tools
    see the same labels as the snapshot files.
    """
    analysed_at = analysed_at or hk_now()
    horse_info = race_data.horse_info.raw or {
        "Race Date": race_data.horse_info.race_date,
        "Race Number": race_data.horse_info.race_number,
        "Horses": [],
    }
    return {
        "metadata": {
            "date": race_data.race_info.date,
            "raceNumber": race_data.race_info.race_number,
            "analyzedAt": analysed_at.isoformat(),
            "priorityThreshold": priority_threshold,
        },
        "findings": [a.to_dict() for a in alerts if a.priority >= priority_threshold],
        "horseInfo": horse_info,
    }
