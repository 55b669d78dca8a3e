"""Race analysis orchestrator.

Runs every detector against one race snapshot in a fixed order and returns
the prioritised, de-duplicated alert list. Highlights are derived from the
final list and read back through the store.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from oddswatch.analysis.cross_market import (
    analyse_expected_quinella,
    analyse_win_place_quinella,
    analyse_win_quinella,
)
from oddswatch.analysis.favorites import (
    find_place_favorite,
    find_pq_favorite,
    find_quinella_favorite,
    find_win_favorite,
)
from oddswatch.analysis.groups import DEFAULT_GROUPS
from oddswatch.analysis.insider import analyse_win_race_day_index
from oddswatch.analysis.predictions import create_prediction_alerts
from oddswatch.analysis.preprocess import PreprocessedRaceData, preprocess_race_data
from oddswatch.analysis.store import AlertStore
from oddswatch.analysis.summary import HorseSummary, summarise_horses
from oddswatch.analysis.win_place import analyse_win_place
from oddswatch.analysis.win_win import analyse_win_win
from oddswatch.errors import InvalidInputError
from oddswatch.models.alert import AlertMessage, diagnostic
from oddswatch.models.race import RaceData

logger = logging.getLogger(__name__)


@dataclass
class RaceAnalysis:
    alerts: list[AlertMessage]
    highlights: dict[str, list[str]]
    summaries: list[HorseSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "alerts": [a.to_dict() for a in self.alerts],
            "highlights": self.highlights,
            "summaries": [s.to_dict() for s in self.summaries],
        }


def _run_detectors(data: PreprocessedRaceData, store: AlertStore) -> None:
    race = data.race_data

    store.add_many(find_win_favorite(race.odds, race.horse_info))
    store.add_many(find_place_favorite(race.odds, race.horse_info))
    if data.valid_quinella:
        store.add_many(find_quinella_favorite(data.valid_quinella))
    if data.valid_place_q:
        store.add_many(find_pq_favorite(data.valid_place_q))

    analyse_win_win(data, store)

    if data.quinella_pairs:
        analyse_expected_quinella(data, store)

    for group in DEFAULT_GROUPS:
        members = data.category_members(group.category)
        if not members:
            logger.debug("Skipping empty group %s", group.name)
            continue
        analyse_win_place(members, store)
        analyse_win_race_day_index(members, store)
        if data.quinella_pairs:
            analyse_win_quinella(data, members, store)
        if data.place_q_pairs:
            analyse_win_place_quinella(data, members, store)

    create_prediction_alerts(data, store)


def _analyse(race_data: Union[RaceData, dict, None], store: AlertStore) -> tuple[list[AlertMessage], Optional[PreprocessedRaceData]]:
    store.reset()
    if race_data is None:
        return [diagnostic("No odds data")], None
    try:
        race = RaceData.from_dict(race_data)
    except InvalidInputError as e:
        logger.warning("Race analysis aborted: %s", e)
        return [diagnostic(f"Analysis failed: {e}")], None
    if not race.odds:
        logger.warning("Race analysis aborted: no odds data")
        return [diagnostic("No odds data")], None
    try:
        data = preprocess_race_data(race)
    except InvalidInputError as e:
        logger.warning("Race analysis aborted: %s", e)
        return [diagnostic(f"Analysis failed: {e}")], None

    _run_detectors(data, store)

    alerts = store.get_all(sorted=True)
    for alert in alerts:
        store.apply_highlight(alert)
    alerts = AlertStore.dedupe(alerts)

    info = race.race_info
    logger.info(
        "Analysed race %s R%s: %d horses, %d alerts",
        info.date or "?", info.race_number or "?", len(data.horses), len(alerts),
    )
    return alerts, data


def analyse_race(race_data: Union[RaceData, dict, None], store: Optional[AlertStore] = None) -> list[AlertMessage]:
    """Analyse one race snapshot and return alerts, highest priority first.

    ``race_data`` may be a ``RaceData`` or the raw loader payload. Pass a
    ``store`` to read highlights afterwards; it is reset first. Unusable
    input yields a single priority-0 diagnostic instead of an exception.
    """
    alerts, _ = _analyse(race_data, store if store is not None else AlertStore())
    return alerts


def run_analysis(race_data: Union[RaceData, dict, None]) -> RaceAnalysis:
    """``analyse_race`` plus highlights and per-horse summaries."""
    store = AlertStore()
    alerts, data = _analyse(race_data, store)
    summaries = summarise_horses(data, alerts) if data is not None else []
    return RaceAnalysis(alerts=alerts, highlights=store.get_highlights(), summaries=summaries)
