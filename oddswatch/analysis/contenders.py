"""Contenders (win 5-10) that beat their race-day index.

One qualified contender with fair place odds is a value pick. Several are
compared pairwise in the combination markets; a longer-priced horse that
the quinella or PQ market prefers is flagged as suspicious money.
"""

import logging
from itertools import combinations
from typing import Optional

from oddswatch.analysis.dominance import compare_pq_dominance, compare_quinella_dominance
from oddswatch.analysis.groups import CONTENDERS
from oddswatch.analysis.preprocess import PreprocessedHorse, PreprocessedRaceData
from oddswatch.analysis.store import AlertStore
from oddswatch.models.alert import AlertMessage, Purpose, create_alert

logger = logging.getLogger(__name__)


def _comparison_alert(dominant: PreprocessedHorse, other: PreprocessedHorse, market: str) -> AlertMessage:
    return create_alert(
        150, dominant.horse_number, Purpose.ANALYZE,
        f"{dominant.horse_number} {dominant.horse_name} has suspicious {market} wager as compared to "
        f"{other.horse_number} {other.horse_name}",
        20, 20,
    )


def analyse_contenders(
    data: PreprocessedRaceData,
    store: AlertStore,
    is_only_favourite: bool = False,
    any_beat_index: bool = False,
    favourite_horse_number: Optional[str] = None,
) -> list[AlertMessage]:
    """Add contender alerts to ``store`` and return them.

    With a lone favourite that beats its index, contenders are compared on
    their combinations with that favourite only; otherwise against every
    other runner.
    """
    qualified = [h for h in data.category_members(CONTENDERS) if h.is_beat_index]
    alerts: list[AlertMessage] = []

    if len(qualified) == 1:
        horse = qualified[0]
        if horse.place <= horse.expected_place:
            alerts.append(create_alert(
                170, horse.horse_number, Purpose.ANALYZE,
                f"挑戰者 - {horse.horse_name} 今場抵買機會馬", 30, 30,
            ))
    elif len(qualified) > 1:
        against_favourite = bool(is_only_favourite and any_beat_index and favourite_horse_number)
        quinella_odds = data.quinella_odds()
        pq_odds = data.pq_odds()
        for a, b in combinations(qualified, 2):
            if against_favourite:
                legs = [favourite_horse_number]
            else:
                legs = [h.horse_number for h in data.horses if h.horse_number not in (a.horse_number, b.horse_number)]
            for market, compare, odds in (
                ("Quinella", compare_quinella_dominance, quinella_odds),
                ("PQ", compare_pq_dominance, pq_odds),
            ):
                winner = compare(a.horse_number, b.horse_number, legs, odds)
                if winner is None:
                    continue
                dominant, other = (a, b) if winner == a.horse_number else (b, a)
                if dominant.win > other.win:
                    alerts.append(_comparison_alert(dominant, other, market))

    logger.debug("Contenders: %d qualified, %d alerts", len(qualified), len(alerts))
    store.add_many(alerts)
    return alerts
